from collections.abc import Mapping

from geolocator.sanitize import clean, is_ip_address

REAL_IP_HEADER = "HTTP_X_REAL_IP"
FORWARDED_FOR_HEADER = "HTTP_X_FORWARDED_FOR"
REMOTE_ADDR = "REMOTE_ADDR"


def get_observed_address(context: Mapping[str, str] | None) -> str:
    """Derive the client address from request metadata.

    Sources are tried in priority order and the first one present wins:

    - ``HTTP_X_REAL_IP``: set by a trusted reverse proxy, returned as-is.
    - ``HTTP_X_FORWARDED_FOR``: ``client, proxy1, proxy2``; only the first
      entry is considered and it is returned only if it is a valid address.
    - ``REMOTE_ADDR``: the connection peer.

    Returns an empty string when none of them is available.
    """
    if not context:
        return ""

    if REAL_IP_HEADER in context:
        return clean(context[REAL_IP_HEADER])

    if FORWARDED_FOR_HEADER in context:
        first = clean(context[FORWARDED_FOR_HEADER]).split(",")[0].strip()
        return first if is_ip_address(first) else ""

    if REMOTE_ADDR in context:
        return clean(context[REMOTE_ADDR])

    return ""


COUNTRY_HEADERS = (
    "MM_COUNTRY_CODE",
    "GEOIP_COUNTRY_CODE",
    "HTTP_CF_IPCOUNTRY",
    "HTTP_X_COUNTRY_CODE",
)


def get_country_from_headers(context: Mapping[str, str] | None) -> str:
    """Return the country code set by a GeoIP-aware web server or CDN, or an empty string."""
    if not context:
        return ""

    for header in COUNTRY_HEADERS:
        value = context.get(header)
        if not value:
            continue
        return clean(value).upper()

    return ""
