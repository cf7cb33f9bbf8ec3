from http import HTTPStatus

import httpx

from geolocator.errors import ProviderRequestError


async def fetch_text(provider: str, url: str, timeout_seconds: float, user_agent: str) -> str:
    """GET url and return the response body as text.

    Transport failures and HTTP error statuses are raised as
    ProviderRequestError so callers can move on to the next provider.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds, headers={"User-Agent": user_agent}) as client:
            response = await client.get(url)
    except httpx.RequestError as exc:
        raise ProviderRequestError(provider, f"Request to provider failed: {exc!r}") from exc

    if response.status_code >= HTTPStatus.BAD_REQUEST:
        raise ProviderRequestError(provider, f"Provider returned HTTP {response.status_code}")

    return response.text
