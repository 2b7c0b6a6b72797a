import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Iterable, Optional

from .._utils._headers import HeaderInput, HeaderSet
from .._utils._request_spec import RequestSpec
from .._utils._response import RawResponse
from ._chain import Middleware, NextHandler


class LoggingMiddleware(Middleware[Any]):
    """Log each request passing through, and the response when there is one."""

    def __init__(
        self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG
    ) -> None:
        self._logger = logger or logging.getLogger("action_client")
        self._level = level

    def handle(self, request: RequestSpec, next: NextHandler[Any]) -> Any:
        self._logger.log(self._level, f"Request: {request.method} {request.uri}")
        started = time.perf_counter()

        result = next(request)

        if isinstance(result, RawResponse):
            elapsed_ms = (time.perf_counter() - started) * 1000
            self._logger.log(
                self._level,
                f"Response: {result.status} {request.method} {request.uri} "
                f"({elapsed_ms:.1f} ms)",
            )
        return result


class HeaderMiddleware(Middleware[Any]):
    """Add headers to every request passing through.

    By default existing headers win, like class defaults. With
    ``override=True`` these headers replace existing ones.
    """

    def __init__(self, headers: HeaderInput, *, override: bool = False) -> None:
        self._headers = HeaderSet(headers).freeze()
        self._override = override

    def handle(self, request: RequestSpec, next: NextHandler[Any]) -> Any:
        headers = request.headers.copy()
        if self._override:
            headers.merge_override(self._headers)
        else:
            headers.merge_with_defaults(self._headers)
        return next(request.replace(headers=headers))


class CacheMiddleware(Middleware[RawResponse]):
    """Serve repeated safe requests from memory.

    Successful responses to the cacheable methods are stored under a key made
    of the method, the URI and every request header, so requests sent with
    different credentials or ``Accept`` values never share an entry. A hit
    returns without calling the rest of the chain. At most ``maxsize`` entries
    are kept; the least recently used one is evicted first.
    """

    def __init__(
        self, methods: Iterable[str] = ("GET", "HEAD"), *, maxsize: int = 256
    ) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self._methods = frozenset(m.upper() for m in methods)
        self._maxsize = maxsize
        self._responses: OrderedDict[str, RawResponse] = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def cache_key(request: RequestSpec) -> str:
        """``<METHOD>:<sha256>`` over the URI and the case-folded headers."""
        headers = sorted(
            (name.lower(), value) for name, value in request.headers.items()
        )
        digest = hashlib.sha256(
            json.dumps([request.uri, headers], separators=(",", ":")).encode("utf-8")
        ).hexdigest()
        return f"{request.method}:{digest}"

    def handle(
        self, request: RequestSpec, next: NextHandler[RawResponse]
    ) -> RawResponse:
        if request.method not in self._methods:
            return next(request)

        key = self.cache_key(request)
        with self._lock:
            cached = self._responses.get(key)
            if cached is not None:
                self._responses.move_to_end(key)
                return cached

        response = next(request)
        if 200 <= response.status < 300:
            with self._lock:
                self._responses[key] = response
                self._responses.move_to_end(key)
                while len(self._responses) > self._maxsize:
                    self._responses.popitem(last=False)
        return response

    def clear(self) -> None:
        with self._lock:
            self._responses.clear()

    def __len__(self) -> int:
        return len(self._responses)
