"""Naming helpers for client identities and header names."""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """Convert a class name to the identity used for template lookup.

    Examples:
        >>> snake_case("ArticleClient")
        'article_client'
        >>> snake_case("HTTPArticlesClient")
        'http_articles_client'
    """
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def titlecase_header(name: str) -> str:
    """Normalize a header name to ``Title-Case``.

    Examples:
        >>> titlecase_header("content-type")
        'Content-Type'
        >>> titlecase_header("x-request-id")
        'X-Request-Id'
    """
    return "-".join(part.capitalize() for part in name.split("-"))
