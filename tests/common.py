from typing import Any

import httpx

from geolocator.models.common import LocationRecord


class MockResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text


class MockAsyncClient:
    """Minimal async context-manager mock for httpx.AsyncClient that answers from a route table."""

    def __init__(self, routes: dict[str, MockResponse | Exception], calls: list[str]) -> None:
        self._routes = routes
        self._calls = calls

    async def __aenter__(self) -> "MockAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str) -> MockResponse:
        self._calls.append(url)
        outcome = self._routes.get(url)
        if outcome is None:
            raise httpx.ConnectError("No route to host", request=httpx.Request("GET", url))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeHttp:
    """Stand-in for the httpx.AsyncClient class.

    Every URL requested is recorded in `calls` (in order) and the keyword
    arguments each client was built with in `client_kwargs`. Unknown URLs fail
    with a connection error.
    """

    def __init__(self, routes: dict[str, MockResponse | Exception] | None = None) -> None:
        self.routes: dict[str, MockResponse | Exception] = routes or {}
        self.calls: list[str] = []
        self.client_kwargs: list[dict[str, Any]] = []

    def __call__(self, *args: Any, **kwargs: Any) -> MockAsyncClient:
        self.client_kwargs.append(kwargs)
        return MockAsyncClient(self.routes, self.calls)


class FailingAsyncClient:
    """Async client that raises a RequestError on enter to simulate network failure."""

    def __init__(self, url: str, *args: Any, **kwargs: Any) -> None:
        self._url = url

    async def __aenter__(self) -> "FailingAsyncClient":
        request = httpx.Request("GET", self._url)
        raise httpx.RequestError("Network failure", request=request)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None


class ReversingRandom:
    """Deterministic replacement for random.Random whose shuffle reverses the list."""

    def shuffle(self, items: list[Any]) -> None:
        items.reverse()


class RecordingOverride:
    """Override hook that records its calls and never overrides."""

    def __init__(self, result: str | None = None) -> None:
        self.result = result
        self.calls: list[tuple[str, bool, bool]] = []

    def __call__(self, ip: str, fallback: bool, api_fallback: bool) -> str | None:
        self.calls.append((ip, fallback, api_fallback))
        return self.result


def empty_record() -> LocationRecord:
    return LocationRecord(country="", state="", city="", postcode="")
