"""URL resolution for outbound requests.

Every request URI is absolute. It is either the client's base URL with a path
appended, or a full URL given wholesale by the caller.
"""

from typing import Optional

from httpx import URL, InvalidURL

from ..models.errors import BaseUrlMissingError, ConfigurationError


def join_url(base_url: str, path: Optional[str]) -> str:
    """Append ``path`` to ``base_url`` with exactly one separator between them.

    Unlike RFC 3986 resolution, a leading slash on ``path`` does not discard the
    path component of the base URL.

    Examples:
        >>> join_url("https://example.com/api/", "/articles")
        'https://example.com/api/articles'
        >>> join_url("https://example.com", "articles/1")
        'https://example.com/articles/1'
    """
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{str(path).lstrip('/')}"


def resolve_uri(
    client_name: str,
    base_url: Optional[str],
    *,
    path: Optional[str] = None,
    url: Optional[str] = None,
) -> str:
    if path is not None and url is not None:
        raise ConfigurationError("Only one of path or url can be provided")

    if url is not None:
        uri = str(url)
    elif base_url:
        uri = join_url(str(base_url), path)
    else:
        raise BaseUrlMissingError(client_name)

    try:
        parsed = URL(uri)
    except InvalidURL as e:
        raise ConfigurationError(f"Invalid request URL '{uri}': {e}") from e

    if not parsed.is_absolute_url:
        raise ConfigurationError(
            f"Request URL '{uri}' is not absolute; include a scheme and host"
        )
    return uri
