from typing import Optional


class ActionClientError(Exception):
    """Base class for errors raised by action_client."""


class ConfigurationError(ActionClientError, ValueError):
    """Raised when a request cannot be assembled from the options given.

    Examples are passing both ``path`` and ``url`` to a verb method, or building
    a relative request on a client that has no base URL configured.
    """


class BaseUrlMissingError(ConfigurationError):
    def __init__(
        self,
        client_name: str,
        message: Optional[str] = None,
    ):
        self.client_name = client_name
        self.message = message or (
            f"Client '{client_name}' has no base URL. Configure one with "
            f'default(url="https://...") or pass url= to the verb method.'
        )
        super().__init__(self.message)


class AdapterNotFoundError(ActionClientError, LookupError):
    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        listing = ", ".join(available) if available else "none"
        super().__init__(f"Unknown adapter '{name}'. Available: {listing}")


class ResponseDecodeError(ActionClientError, ValueError):
    """Raised when a response body does not parse as its declared content type."""

    def __init__(self, content_type: str, body: bytes, reason: str):
        self.content_type = content_type
        self.body = body
        self.reason = reason
        super().__init__(
            f"Could not decode response body as '{content_type}': {reason}"
        )
