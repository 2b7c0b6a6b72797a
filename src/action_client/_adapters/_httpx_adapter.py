from logging import getLogger
from typing import Any, Optional

from httpx import Client

from .._utils._headers import HeaderSet
from .._utils._naming import titlecase_header
from .._utils._request_spec import RequestSpec
from .._utils._response import RawResponse
from .._utils._ssl_context import get_httpx_client_kwargs


class HttpxAdapter:
    """Send requests over the network with an ``httpx.Client``.

    Response header names are normalized to ``Title-Case`` so that lookups in
    logs and previews read the same regardless of the server's casing. A field
    the server repeats is folded into one value joined with ``", "``, except
    ``Set-Cookie``, whose values may contain commas and are joined with
    newlines instead.

    Args:
        client: A preconfigured client. When omitted, one is created with the
            package's SSL settings and any extra ``client_kwargs``.
        timeout: Request timeout, in seconds, for the created client.
    """

    def __init__(
        self,
        client: Optional[Client] = None,
        *,
        timeout: Optional[float] = None,
        **client_kwargs: Any,
    ) -> None:
        self._logger = getLogger("action_client")
        self._owns_client = client is None
        if client is None:
            client = Client(**{**get_httpx_client_kwargs(timeout), **client_kwargs})
        self._client = client

    def send(self, request: RequestSpec) -> RawResponse:
        self._logger.debug(f"Request: {request.method} {request.uri}")
        self._logger.debug(f"HEADERS: {request.headers.to_dict()}")

        response = self._client.request(
            request.method,
            request.uri,
            headers=request.headers.to_httpx(),
            content=request.body or None,
        )

        headers = HeaderSet()
        for name, value in response.headers.multi_items():
            name = titlecase_header(name)
            previous = headers.get(name)
            if previous is not None:
                separator = "\n" if name == "Set-Cookie" else ", "
                value = f"{previous}{separator}{value}"
            headers.set(name, value)

        return RawResponse(response.status_code, headers, response.content)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxAdapter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
