from pydantic import BaseModel, Field, field_validator

from geolocator.sanitize import is_ip_address


class GeolocateRequest(BaseModel):
    """Request model for geolocation via query parameters.

    If `ip` is provided, that explicit address is geolocated. If it is omitted
    or blank, the address and country hints are taken from the request itself.
    """

    ip: str | None = Field(
        default=None,
        description="IPv4 or IPv6 address to geolocate. If omitted, the client's address is used.",
        examples=["8.8.8.8", "2001:4860:4860::8888"],
    )
    fallback: bool = Field(
        default=False,
        description="Retry with the server's external address when nothing is found (slower).",
    )
    api_fallback: bool = Field(
        default=True,
        description="Query external geolocation APIs when no country hint is available (slower).",
    )

    @field_validator("ip", mode="before")
    @classmethod
    def _validate_ip(cls, value: str | None) -> str | None:
        """Validate that ip is either empty/None or a valid IP address (IPv4 or IPv6).

        - None or blank string -> treated as None (client address lookup, no error).
        - Non-blank -> must be a valid IP literal, otherwise a validation error
          is raised and the endpoint handler is never invoked.
        """
        if value is None:
            return None

        value_str = str(value).strip()
        if not value_str:
            return None

        if not is_ip_address(value_str):
            raise ValueError("ip must be a valid IPv4 or IPv6 address")

        return value_str
