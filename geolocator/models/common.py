from typing import Any

from pydantic import BaseModel, field_validator


class LocationRecord(BaseModel):
    """Best-effort location of an IP address.

    Every field is a string and defaults to empty; an empty ``country`` means
    the location is unknown. Built-in providers only ever fill ``country``,
    the remaining fields are left to the ``get_geolocation`` hook.
    """

    country: str = ""
    state: str = ""
    city: str = ""
    postcode: str = ""

    @field_validator("country", "state", "city", "postcode", mode="before")
    @classmethod
    def _coerce_empty(cls, value: Any) -> str:
        """Hooks may hand back None for fields they do not know; store those as empty strings."""
        if value is None:
            return ""
        return str(value)
