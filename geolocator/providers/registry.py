from geolocator.hooks import GeolocationHooks
from geolocator.providers.base import BaseProvider
from geolocator.providers.geoip import HookedGeoipProvider, JsonFieldProvider
from geolocator.providers.ip_lookup import PlainTextAddressProvider
from geolocator.settings import GeolocationSettings


class ProviderRegistry:
    """Builds the provider sets used for one lookup round.

    The configured ``name -> endpoint`` maps are passed through the
    ``ip_lookup_apis`` / ``geoip_apis`` hooks on every call, so the embedding
    application can add, remove or replace providers at any time.
    Geolocation providers listed in COUNTRY_FIELDS get a JSON parser; any
    other name is parsed by the ``geoip_response`` hook.
    """

    COUNTRY_FIELDS: dict[str, str] = {
        "ipinfo.io": "country",
        "ip-api.com": "countryCode",
    }

    def __init__(self, settings: GeolocationSettings, hooks: GeolocationHooks) -> None:
        self._settings = settings
        self._hooks = hooks

    def ip_lookup_providers(self) -> dict[str, BaseProvider]:
        endpoints = self._hooks.ip_lookup_apis(dict(self._settings.ip_lookup_apis))
        return {name: PlainTextAddressProvider(name, endpoint) for name, endpoint in endpoints.items()}

    def geoip_providers(self) -> dict[str, BaseProvider]:
        endpoints = self._hooks.geoip_apis(dict(self._settings.geoip_apis))
        return {name: self._build_geoip_provider(name, endpoint) for name, endpoint in endpoints.items()}

    def _build_geoip_provider(self, name: str, endpoint: str) -> BaseProvider:
        field = self.COUNTRY_FIELDS.get(name)
        if field is None:
            return HookedGeoipProvider(name, endpoint, self._hooks.geoip_response)
        return JsonFieldProvider(name, endpoint, field)
