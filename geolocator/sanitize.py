import re
from ipaddress import ip_address
from typing import Any

_TAG_RE = re.compile(r"<[^>]*>")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")


def clean(value: Any) -> str:
    """Reduce an untrusted value to a single line of plain text.

    Markup tags and percent-encoded octets are removed, runs of whitespace
    (including line breaks and tabs) collapse to a single space and the
    result is trimmed. ``None`` becomes an empty string.
    """
    if value is None:
        return ""
    text = _TAG_RE.sub("", str(value))
    text = _OCTET_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def is_ip_address(value: Any) -> bool:
    """Return True if value is an IPv4 or IPv6 address in textual form."""
    if not isinstance(value, str) or not value:
        return False
    try:
        ip_address(value)
    except ValueError:
        return False
    return True
