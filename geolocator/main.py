from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from pydantic import ValidationError

from geolocator.address import get_observed_address
from geolocator.cache import create_cache_store
from geolocator.exception_handlers import (
    pydantic_validation_exception_handler,
    unhandled_exception_handler,
)
from geolocator.logger import logger
from geolocator.models.request_models import GeolocateRequest
from geolocator.models.response_models import ExternalAddressResponse, GeolocateResponse, HealthResponse
from geolocator.resolver import Geolocator
from geolocator.settings import GeolocationSettings


@lru_cache
def get_geolocator() -> Geolocator:
    """Dependency to provide the process-wide Geolocator (and with it the cache)."""
    settings = GeolocationSettings.from_env()
    return Geolocator(settings=settings, cache=create_cache_store(settings))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close the cache store of the Geolocator in use on shutdown."""
    logger.info("Started IP Geolocator")
    yield

    override = app.dependency_overrides.get(get_geolocator)
    if override is not None:
        geolocator = override()
    elif get_geolocator.cache_info().currsize:
        geolocator = get_geolocator()
    else:
        return

    logger.info(f"Closing cache store store={type(geolocator.cache).__name__}")
    await geolocator.cache.close()
    get_geolocator.cache_clear()


app = FastAPI(
    title="IP Geolocator",
    version="0.1.0",
    description="Best-effort IP geolocation with external provider fallback and caching.",
    lifespan=lifespan,
)


def build_request_context(request: Request) -> dict[str, str]:
    """Translate request headers and peer address into CGI-style variables.

    ``X-Forwarded-For`` becomes ``HTTP_X_FORWARDED_FOR``, ``CF-IPCountry``
    becomes ``HTTP_CF_IPCOUNTRY`` and the connection peer is ``REMOTE_ADDR``.
    """
    context = {f"HTTP_{name.upper().replace('-', '_')}": value for name, value in request.headers.items()}
    if request.client and request.client.host:
        context["REMOTE_ADDR"] = request.client.host
    return context


# Register global exception handlers using the shared handlers module.
app.add_exception_handler(ValidationError, pydantic_validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get(
    "/health",
    tags=["health"],
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="ok")


@app.get(
    "/v1/geolocate",
    response_model=GeolocateResponse,
    status_code=status.HTTP_200_OK,
    tags=["geolocation"],
    summary="Geolocate an IP address or the calling client.",
)
async def geolocate(
    request: Request,
    query: Annotated[GeolocateRequest, Depends()],
    geolocator: Annotated[Geolocator, Depends(get_geolocator)],
) -> GeolocateResponse:
    """Geolocate either a specific IP or the caller.

    - If `query.ip` is provided, that IP is used and request headers are ignored.
    - Otherwise the address comes from X-Real-IP, X-Forwarded-For or the peer
      address, and CDN country headers (e.g. CF-IPCountry) are honoured.
    - An unknown location is reported with an empty `country`, never as an error.
    - `ip` in the response is the requested or observed address. With `fallback`
      the location may come from the server's external address instead, so
      `country` can describe a different address than `ip`.
    """
    context = build_request_context(request)
    ip = query.ip or get_observed_address(context)
    logger.info(
        "Performing geolocation "
        f"path={request.url.path} method={request.method} ip={ip} explicit={query.ip is not None} "
        f"fallback={query.fallback} api_fallback={query.api_fallback}"
    )

    record = await geolocator.geolocate(
        query.ip or "",
        fallback=query.fallback,
        api_fallback=query.api_fallback,
        context=context,
    )
    return GeolocateResponse(ip=ip, **record.model_dump())


@app.get(
    "/v1/ip/external",
    response_model=ExternalAddressResponse,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Public address of this host as seen by external services.",
)
async def external_address(
    request: Request,
    geolocator: Annotated[Geolocator, Depends(get_geolocator)],
) -> ExternalAddressResponse:
    """Return the external address, or 0.0.0.0 when no lookup service answered."""
    context = build_request_context(request)
    logger.info(f"Performing external address lookup path={request.url.path} method={request.method}")
    return ExternalAddressResponse(ip=await geolocator.get_external_address(context))
