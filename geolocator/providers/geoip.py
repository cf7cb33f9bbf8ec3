import json
from typing import Any

from geolocator.errors import ProviderResponseError
from geolocator.hooks import GeoipResponseHook
from geolocator.providers.base import BaseProvider


class JsonFieldProvider(BaseProvider):
    """Geolocation provider answering with a JSON object that holds the country code in one field."""

    def __init__(self, name: str, endpoint_template: str, field: str) -> None:
        super().__init__(name, endpoint_template)
        self.field = field

    def parse(self, body: str) -> str:
        data = self._parse_json(body)
        if not isinstance(data, dict):
            return ""
        value = data.get(self.field)
        return str(value) if value else ""

    def _parse_json(self, body: str) -> Any:
        try:
            return json.loads(body)
        except ValueError as exc:
            raise ProviderResponseError(self.name, f"Failed to decode provider response as JSON: {exc}") from exc


class HookedGeoipProvider(BaseProvider):
    """Geolocation provider with no built-in parser; the body is handed to the geoip_response hook."""

    def __init__(self, name: str, endpoint_template: str, parser: GeoipResponseHook) -> None:
        super().__init__(name, endpoint_template)
        self._parser = parser

    def parse(self, body: str) -> str:
        try:
            country = self._parser(self.name, body)
        except Exception as exc:
            raise ProviderResponseError(self.name, f"Response parser failed: {exc!r}") from exc
        return country or ""
