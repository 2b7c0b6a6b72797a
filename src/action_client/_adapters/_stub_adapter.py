import json as jsonlib
import threading
from collections import deque
from typing import Any, Callable, Optional

from .._utils._headers import HeaderInput, HeaderSet
from .._utils._request_spec import RequestSpec
from .._utils._response import RawResponse

Responder = Callable[[RequestSpec], RawResponse]


class StubAdapter:
    """In-memory adapter for tests and previews.

    Canned responses are served in the order they were added; once the queue
    is empty the optional ``responder`` is called. Every request received is
    recorded in ``requests``.

    Examples:
        ```python
        stub = StubAdapter()
        stub.add_response(status=201, json={"responded": True})

        status, headers, body = ArticleClient.create(article=article).submit()
        assert stub.last_request.method == "POST"
        ```
    """

    def __init__(self, responder: Optional[Responder] = None) -> None:
        self._responses: deque[RawResponse] = deque()
        self._responder = responder
        self._lock = threading.Lock()
        self.requests: list[RequestSpec] = []

    def add_response(
        self,
        status: int = 200,
        headers: HeaderInput = None,
        body: Any = b"",
        *,
        json: Any = None,
    ) -> RawResponse:
        header_set = HeaderSet(headers)
        if json is not None:
            body = jsonlib.dumps(json)
            header_set.merge_with_defaults({"Content-Type": "application/json"})
        response = RawResponse.build(status, header_set, body)
        with self._lock:
            self._responses.append(response)
        return response

    def send(self, request: RequestSpec) -> RawResponse:
        with self._lock:
            self.requests.append(request)
            if self._responses:
                return self._responses.popleft()
        if self._responder is not None:
            return self._responder(request)
        raise LookupError(f"No stubbed response for {request.method} {request.uri}")

    @property
    def last_request(self) -> Optional[RequestSpec]:
        return self.requests[-1] if self.requests else None

    def reset(self) -> None:
        with self._lock:
            self._responses.clear()
            self.requests.clear()
