"""Body formats and the content types they are sent with."""

from typing import Optional

DEFAULT_FORMAT = "json"

# Extensions that name the template engine rather than the body format,
# e.g. the ``j2`` in ``create.json.j2``.
ENGINE_EXTENSIONS = ("j2", "jinja", "jinja2")

CONTENT_TYPES: dict[str, str] = {
    "json": "application/json",
    "xml": "application/xml",
    "html": "text/html",
    "text": "text/plain",
    "txt": "text/plain",
    "csv": "text/csv",
    "yaml": "application/yaml",
    "yml": "application/yaml",
    "form": "application/x-www-form-urlencoded",
    "graphql": "application/graphql",
}


def content_type_for(format: Optional[str]) -> Optional[str]:
    """Content type for a body format; unknown formats map to ``application/<format>``."""
    if not format:
        return None
    format = format.lower()
    return CONTENT_TYPES.get(format, f"application/{format}")


def split_template_name(filename: str) -> tuple[str, Optional[str]]:
    """Split a template file name into its action name and declared format.

    Examples:
        >>> split_template_name("create.json.j2")
        ('create', 'json')
        >>> split_template_name("destroy.json")
        ('destroy', 'json')
        >>> split_template_name("ping.j2")
        ('ping', None)
    """
    parts = filename.split(".")
    action, extensions = parts[0], parts[1:]
    if extensions and extensions[-1].lower() in ENGINE_EXTENSIONS:
        extensions = extensions[:-1]
    return action, (extensions[0].lower() if extensions else None)
