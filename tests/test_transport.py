from http import HTTPStatus

import httpx
import pytest

from geolocator.errors import ProviderRequestError
from geolocator.transport import fetch_text
from tests.common import FailingAsyncClient, FakeHttp, MockResponse


@pytest.mark.asyncio
async def test_fetch_text_returns_body_and_sends_user_agent(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeHttp({"http://api.ipify.org/": MockResponse(HTTPStatus.OK, "198.51.100.7")})
    monkeypatch.setattr(httpx, "AsyncClient", fake)

    body = await fetch_text("ipify", "http://api.ipify.org/", timeout_seconds=2.0, user_agent="Geo/1.0")

    assert body == "198.51.100.7"
    assert fake.calls == ["http://api.ipify.org/"]
    assert fake.client_kwargs == [{"timeout": 2.0, "headers": {"User-Agent": "Geo/1.0"}}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status_code",
    [HTTPStatus.NOT_FOUND, HTTPStatus.FORBIDDEN, HTTPStatus.TOO_MANY_REQUESTS, HTTPStatus.BAD_GATEWAY],
)
async def test_fetch_text_http_error_statuses_raise(monkeypatch: pytest.MonkeyPatch, status_code: HTTPStatus) -> None:
    fake = FakeHttp({"https://ipinfo.io/8.8.8.8/json": MockResponse(status_code, "error")})
    monkeypatch.setattr(httpx, "AsyncClient", fake)

    with pytest.raises(ProviderRequestError) as exc_info:
        await fetch_text("ipinfo.io", "https://ipinfo.io/8.8.8.8/json", timeout_seconds=2.0, user_agent="Geo/1.0")

    assert exc_info.value.provider == "ipinfo.io"


@pytest.mark.asyncio
async def test_fetch_text_network_failure_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        httpx, "AsyncClient", lambda *args, **kwargs: FailingAsyncClient("http://ident.me", *args, **kwargs)
    )

    with pytest.raises(ProviderRequestError):
        await fetch_text("ident", "http://ident.me", timeout_seconds=2.0, user_agent="Geo/1.0")


@pytest.mark.asyncio
async def test_fetch_text_timeout_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    url = "http://ip-api.com/json/8.8.8.8"
    fake = FakeHttp({url: httpx.ReadTimeout("timed out", request=httpx.Request("GET", url))})
    monkeypatch.setattr(httpx, "AsyncClient", fake)

    with pytest.raises(ProviderRequestError):
        await fetch_text("ip-api.com", url, timeout_seconds=2.0, user_agent="Geo/1.0")
