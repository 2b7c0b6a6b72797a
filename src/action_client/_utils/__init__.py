from ._headers import HeaderSet
from ._naming import snake_case, titlecase_header
from ._request_spec import HTTP_METHODS, RequestSpec
from ._response import RawResponse, Response
from ._url import join_url, resolve_uri

__all__ = [
    "HTTP_METHODS",
    "HeaderSet",
    "RawResponse",
    "RequestSpec",
    "Response",
    "join_url",
    "resolve_uri",
    "snake_case",
    "titlecase_header",
]
