class AppError(Exception):
    """Base application error for the IP geolocator."""


class ProviderError(AppError):
    """Base error for external lookup provider failures."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class ProviderRequestError(ProviderError):
    """Raised when a provider cannot be reached or answers with an HTTP error status."""


class ProviderResponseError(ProviderError):
    """Raised when a provider answers with a body that cannot be parsed."""
