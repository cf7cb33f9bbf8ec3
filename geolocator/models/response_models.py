from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str


class GeolocateResponse(BaseModel):
    """Response model for a geolocation lookup."""

    ip: str
    country: str
    state: str
    city: str
    postcode: str


class ExternalAddressResponse(BaseModel):
    """Response model for the external address lookup; 0.0.0.0 when none was found."""

    ip: str
