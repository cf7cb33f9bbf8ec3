from collections.abc import Callable
from dataclasses import dataclass

from geolocator.models.common import LocationRecord

OverrideHook = Callable[[str, bool, bool], str | None]
GeolocationHook = Callable[[LocationRecord, str], LocationRecord]
ProviderSetHook = Callable[[dict[str, str]], dict[str, str]]
IpLookupResponseHook = Callable[[str, str], str]
GeoipResponseHook = Callable[[str, str], str]


def _no_override(ip: str, fallback: bool, api_fallback: bool) -> str | None:
    return None


def _same_record(record: LocationRecord, ip: str) -> LocationRecord:
    return record


def _same_providers(providers: dict[str, str]) -> dict[str, str]:
    return providers


def _same_address(address: str, provider_name: str) -> str:
    return address


def _no_country(provider_name: str, body: str) -> str:
    return ""


@dataclass(frozen=True)
class GeolocationHooks:
    """Strategies the embedding application can plug into a Geolocator.

    - ``override(ip, fallback, api_fallback)``: return a country code to skip
      resolution entirely, or None to continue.
    - ``get_geolocation(record, ip)``: replace or augment the working record,
      including state/city/postcode.
    - ``ip_lookup_apis(providers)`` / ``geoip_apis(providers)``: filter the
      ``name -> endpoint`` maps before each lookup round.
    - ``ip_lookup_response(address, provider_name)``: rewrite an accepted
      external address.
    - ``geoip_response(provider_name, body)``: parse bodies of geolocation
      providers that have no built-in parser.
    """

    override: OverrideHook = _no_override
    get_geolocation: GeolocationHook = _same_record
    ip_lookup_apis: ProviderSetHook = _same_providers
    geoip_apis: ProviderSetHook = _same_providers
    ip_lookup_response: IpLookupResponseHook = _same_address
    geoip_response: GeoipResponseHook = _no_country
