from abc import ABC, abstractmethod

IP_PLACEHOLDER = "{ip}"


class BaseProvider(ABC):
    """Abstract base for external lookup providers.

    A provider is a named HTTP endpoint plus a parser that turns the raw
    response body into a single string answer (an address or a country
    code), or an empty string when the body holds no usable answer.
    """

    def __init__(self, name: str, endpoint_template: str) -> None:
        self.name = name
        self.endpoint_template = endpoint_template

    def build_url(self, ip: str = "") -> str:
        """Substitute ip into the endpoint template; templates without a placeholder are returned unchanged."""
        return self.endpoint_template.replace(IP_PLACEHOLDER, ip)

    @abstractmethod
    def parse(self, body: str) -> str:
        """Extract the answer from a response body."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, endpoint_template={self.endpoint_template!r})"
