import random
from collections.abc import Mapping

from geolocator.address import get_country_from_headers, get_observed_address
from geolocator.cache import MISS, BaseCacheStore, MemoryCacheStore
from geolocator.errors import ProviderError
from geolocator.hooks import GeolocationHooks
from geolocator.logger import logger
from geolocator.models.common import LocationRecord
from geolocator.providers.base import BaseProvider
from geolocator.providers.registry import ProviderRegistry
from geolocator.sanitize import clean, is_ip_address
from geolocator.settings import GeolocationSettings
from geolocator.transport import fetch_text

EXTERNAL_ADDRESS_SENTINEL = "0.0.0.0"
EXTERNAL_ADDRESS_CACHE_PREFIX = "external_ip_address_"


class Geolocator:
    """Best-effort IP geolocation with provider fallback and caching.

    Resolution order for :meth:`geolocate`:

    1. the ``override`` hook,
    2. country hints set by the web server or CDN (only when no address is given),
    3. the ``get_geolocation`` hook,
    4. external geolocation APIs (``api_fallback``),
    5. one retry against the server's external address (``fallback``).

    Providers are tried one at a time in a freshly shuffled order and every
    round's outcome is cached, so failures are absorbed: an unknown location
    is an empty ``country`` and an unknown external address is ``0.0.0.0``.
    """

    def __init__(
        self,
        settings: GeolocationSettings | None = None,
        cache: BaseCacheStore | None = None,
        hooks: GeolocationHooks | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings or GeolocationSettings()
        self._cache = cache or MemoryCacheStore(max_entries=self._settings.cache_max_entries)
        self._hooks = hooks or GeolocationHooks()
        self._registry = ProviderRegistry(self._settings, self._hooks)
        self._random = rng or random.Random()

    @property
    def settings(self) -> GeolocationSettings:
        return self._settings

    @property
    def cache(self) -> BaseCacheStore:
        return self._cache

    async def geolocate(
        self,
        ip: str = "",
        fallback: bool = False,
        api_fallback: bool = True,
        context: Mapping[str, str] | None = None,
    ) -> LocationRecord:
        """Geolocate ip, or the requesting client when ip is empty.

        :param ip: address to geolocate; empty means "derive it from context".
        :param fallback: retry with the external address when nothing is found (slower).
        :param api_fallback: query geolocation APIs when no hint is available (slower).
        :param context: CGI-style request variables (HTTP_X_FORWARDED_FOR, REMOTE_ADDR, ...).
        """
        country = self._hooks.override(ip, fallback, api_fallback)
        if country is not None:
            logger.debug(f"Geolocation overridden ip={ip} country={country}")
            return LocationRecord(country=country)

        country = ""
        if not ip:
            ip = get_observed_address(context)
            country = get_country_from_headers(context)

        record = LocationRecord.model_validate(self._hooks.get_geolocation(LocationRecord(country=country), ip))

        if not record.country and api_fallback:
            record = record.model_copy(update={"country": await self.geolocate_via_api(ip)})

        # A local or private address cannot be geolocated; retry once with the
        # address the outside world sees.
        if not record.country and fallback:
            external_ip = await self.get_external_address(context)
            if external_ip != EXTERNAL_ADDRESS_SENTINEL and external_ip != ip:
                logger.info(f"Retrying geolocation with external address ip={ip} external_ip={external_ip}")
                return await self.geolocate(external_ip, fallback=False, api_fallback=api_fallback, context=context)

        return record

    async def geolocate_via_api(self, ip: str) -> str:
        """Look up the country code for ip using the geolocation providers.

        Returns an empty string when ip is not a valid address, when no
        provider is configured, or when every provider failed. Only the last
        case is cached.
        """
        if not is_ip_address(ip):
            logger.debug(f"Skipping API geolocation for invalid address ip={ip!r}")
            return ""

        cache_key = f"{self._settings.transient_prefix}_{ip}"
        cached = await self._cache.get(cache_key)
        if cached is not MISS:
            logger.debug(f"Geolocation cache hit key={cache_key} country={cached}")
            return cached

        providers = self._registry.geoip_providers()
        if not providers:
            logger.warning(f"No geolocation providers configured, skipping API lookup ip={ip}")
            return ""

        country = ""
        for name in self._shuffled(providers):
            provider = providers[name]
            try:
                body = await self._fetch(provider, provider.build_url(ip))
                if not body:
                    logger.warning(f"Empty response from geolocation provider provider={name} ip={ip}")
                    continue
                country = clean(provider.parse(body)).upper()
            except ProviderError as exc:
                logger.warning(f"Geolocation provider failed provider={exc.provider} ip={ip} error={exc}")
                continue

            if country:
                logger.info(f"Geolocated via API provider={name} ip={ip} country={country}")
                break

        await self._cache.set(cache_key, country, self._settings.cache_ttl_seconds)
        return country

    async def get_external_address(self, context: Mapping[str, str] | None = None) -> str:
        """Ask "what is my IP" services for the public address of this host.

        Useful when the observed address is local and cannot be geolocated.
        Returns 0.0.0.0 when no provider produced a valid address; that
        outcome is cached like any other.
        """
        observed_ip = get_observed_address(context)
        # Without an observed address there is nothing to key the cache on.
        cache_key = f"{EXTERNAL_ADDRESS_CACHE_PREFIX}{observed_ip}" if observed_ip else None

        if cache_key is not None:
            cached = await self._cache.get(cache_key)
            if cached is not MISS:
                logger.debug(f"External address cache hit key={cache_key} external_ip={cached}")
                return cached

        external_ip = EXTERNAL_ADDRESS_SENTINEL
        providers = self._registry.ip_lookup_providers()
        for name in self._shuffled(providers):
            provider = providers[name]
            try:
                address = provider.parse(await self._fetch(provider, provider.build_url()))
            except ProviderError as exc:
                logger.warning(f"Address lookup provider failed provider={exc.provider} error={exc}")
                continue

            if not address:
                logger.warning(f"Address lookup provider returned no valid address provider={name}")
                continue

            address = clean(self._hooks.ip_lookup_response(address, name))
            if is_ip_address(address):
                external_ip = address
                logger.info(f"Resolved external address provider={name} external_ip={external_ip}")
                break

        if cache_key is not None:
            await self._cache.set(cache_key, external_ip, self._settings.cache_ttl_seconds)
        return external_ip

    def _shuffled(self, providers: Mapping[str, BaseProvider]) -> list[str]:
        names = list(providers)
        self._random.shuffle(names)
        return names

    async def _fetch(self, provider: BaseProvider, url: str) -> str:
        return await fetch_text(
            provider.name,
            url,
            timeout_seconds=self._settings.request_timeout_seconds,
            user_agent=self._settings.user_agent,
        )
