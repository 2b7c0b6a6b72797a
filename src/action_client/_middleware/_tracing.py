from typing import Optional

from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode, Tracer

from .._utils._request_spec import RequestSpec
from .._utils._response import RawResponse
from ._chain import Middleware, NextHandler


class TracingMiddleware(Middleware[RawResponse]):
    """Record each submitted request as an OpenTelemetry client span.

    Exceptions raised downstream are recorded on the span and re-raised.
    """

    def __init__(self, tracer: Optional[Tracer] = None) -> None:
        self._tracer = tracer or trace.get_tracer("action_client")

    def handle(
        self, request: RequestSpec, next: NextHandler[RawResponse]
    ) -> RawResponse:
        with self._tracer.start_as_current_span(
            f"HTTP {request.method}",
            kind=SpanKind.CLIENT,
            attributes={
                "http.request.method": request.method,
                "url.full": request.uri,
            },
        ) as span:
            response = next(request)
            span.set_attribute("http.response.status_code", response.status)
            if response.status >= 500:
                span.set_status(Status(StatusCode.ERROR))
            return response
