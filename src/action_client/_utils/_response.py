from typing import Any, NamedTuple

from ._headers import HeaderSet


class RawResponse(NamedTuple):
    """What a transport adapter returns: status, headers and undecoded body."""

    status: int
    headers: HeaderSet
    body: bytes

    @classmethod
    def build(cls, status: int, headers: Any = None, body: Any = b"") -> "RawResponse":
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(int(status), HeaderSet(headers), bytes(body or b""))


class Response(NamedTuple):
    """Result of ``RequestSpec.submit()``; unpacks as ``status, headers, body``."""

    status: int
    headers: HeaderSet
    body: Any
