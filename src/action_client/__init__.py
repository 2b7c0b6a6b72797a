"""Declarative outbound HTTP requests.

Client classes declare actions that build requests from templates, and send
them through a configurable middleware chain and transport adapter.
"""

from ._adapters import Adapter, AdapterRegistry, HttpxAdapter, StubAdapter
from ._base import ActionClient, action
from ._config import ClientDefaults
from ._decoding import decode
from ._middleware import (
    CacheMiddleware,
    HeaderMiddleware,
    LoggingMiddleware,
    Middleware,
    MiddlewareChain,
    RetryMiddleware,
    TracingMiddleware,
)
from ._rendering import JinjaTemplateResolver, TemplateDescriptor, TemplateResolver
from ._utils import HeaderSet, RawResponse, RequestSpec, Response
from .models.errors import (
    ActionClientError,
    AdapterNotFoundError,
    BaseUrlMissingError,
    ConfigurationError,
    ResponseDecodeError,
)
from .preview import ActionClientPreview

__all__ = [
    "ActionClient",
    "ActionClientError",
    "ActionClientPreview",
    "Adapter",
    "AdapterNotFoundError",
    "AdapterRegistry",
    "BaseUrlMissingError",
    "CacheMiddleware",
    "ClientDefaults",
    "ConfigurationError",
    "HeaderMiddleware",
    "HeaderSet",
    "HttpxAdapter",
    "JinjaTemplateResolver",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewareChain",
    "RawResponse",
    "RequestSpec",
    "Response",
    "ResponseDecodeError",
    "RetryMiddleware",
    "StubAdapter",
    "TemplateDescriptor",
    "TemplateResolver",
    "TracingMiddleware",
    "action",
    "decode",
]
