from geolocator.providers.base import BaseProvider
from geolocator.sanitize import is_ip_address


class PlainTextAddressProvider(BaseProvider):
    """Address provider for "what is my IP" services that answer with the bare address."""

    def parse(self, body: str) -> str:
        address = body.strip()
        return address if is_ip_address(address) else ""
