from ._chain import Middleware, MiddlewareChain, NextHandler, pass_through
from ._retry import RetryMiddleware, parse_retry_after
from ._stages import CacheMiddleware, HeaderMiddleware, LoggingMiddleware
from ._tracing import TracingMiddleware

__all__ = [
    "CacheMiddleware",
    "HeaderMiddleware",
    "LoggingMiddleware",
    "Middleware",
    "MiddlewareChain",
    "NextHandler",
    "RetryMiddleware",
    "TracingMiddleware",
    "parse_retry_after",
    "pass_through",
]
