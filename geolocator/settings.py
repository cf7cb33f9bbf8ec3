import os

from pydantic import BaseModel, Field

DAY_IN_SECONDS = 24 * 60 * 60

DEFAULT_IP_LOOKUP_APIS: dict[str, str] = {
    "ipify": "http://api.ipify.org/",
    "ipecho": "http://ipecho.net/plain",
    "ident": "http://ident.me",
    "tnedi": "http://tnedi.me",
}

DEFAULT_GEOIP_APIS: dict[str, str] = {
    "ipinfo.io": "https://ipinfo.io/{ip}/json",
    "ip-api.com": "http://ip-api.com/json/{ip}",
}


class GeolocationSettings(BaseModel):
    """Configuration owned by a Geolocator instance.

    Provider maps are ``name -> endpoint``. Geolocation endpoints carry an
    ``{ip}`` placeholder; address lookup endpoints are plain URLs.
    """

    transient_prefix: str = "geoip"
    user_agent: str = "ip-geolocator/0.1.0"
    request_timeout_seconds: float = Field(default=2.0, gt=0)
    cache_ttl_seconds: int = Field(default=DAY_IN_SECONDS, gt=0)
    cache_max_entries: int = Field(default=10_000, gt=0)
    redis_url: str | None = None
    ip_lookup_apis: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_IP_LOOKUP_APIS))
    geoip_apis: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_GEOIP_APIS))

    @classmethod
    def from_env(cls) -> "GeolocationSettings":
        """Build settings from GEOLOCATION_* environment variables, keeping defaults for unset ones."""
        env_map = {
            "transient_prefix": "GEOLOCATION_TRANSIENT_PREFIX",
            "user_agent": "GEOLOCATION_USER_AGENT",
            "request_timeout_seconds": "GEOLOCATION_TIMEOUT_SECONDS",
            "cache_ttl_seconds": "GEOLOCATION_CACHE_TTL_SECONDS",
            "cache_max_entries": "GEOLOCATION_CACHE_MAX_ENTRIES",
            "redis_url": "GEOLOCATION_REDIS_URL",
        }
        values = {field: os.getenv(var) for field, var in env_map.items()}
        # Pydantic coerces the numeric strings.
        return cls(**{field: value for field, value in values.items() if value})
