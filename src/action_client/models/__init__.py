from .errors import (
    ActionClientError,
    AdapterNotFoundError,
    BaseUrlMissingError,
    ConfigurationError,
    ResponseDecodeError,
)

__all__ = [
    "ActionClientError",
    "AdapterNotFoundError",
    "BaseUrlMissingError",
    "ConfigurationError",
    "ResponseDecodeError",
]
