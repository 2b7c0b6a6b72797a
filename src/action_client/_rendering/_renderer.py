import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from ._formats import DEFAULT_FORMAT, content_type_for
from ._resolver import TemplateResolver

logger = logging.getLogger(__name__)

# Exactly the replacements markupsafe makes when autoescaping, reversed.
# ``&amp;`` goes last so that ``&amp;lt;`` becomes ``&lt;`` and not ``<``.
_MARKUP_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&#34;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


@dataclass(frozen=True)
class RenderedBody:
    body: bytes
    format: Optional[str]
    content_type: Optional[str]


def unescape_markup(text: str) -> str:
    """Undo the HTML escaping applied by an autoescaping template environment."""
    for entity, char in _MARKUP_ENTITIES:
        text = text.replace(entity, char)
    return text


def render_body(
    resolver: Optional[TemplateResolver],
    client_identity: Union[str, Sequence[str]],
    action_name: Optional[str],
    locals: Mapping[str, Any],
    layout: Optional[str] = None,
    format: Optional[str] = None,
) -> RenderedBody:
    """Render the body template for an action.

    Args:
        resolver: Template capability. ``None`` means the client has no templates.
        client_identity: Directory (or ordered candidate directories) the
            action's template is looked up in.
        action_name: The action being dispatched. ``None`` outside an action.
        locals: Variables visible to the template.
        layout: Name of a layout wrapping the rendered body.
        format: Per-call format override. Takes precedence over the template's
            declared format, which takes precedence over ``json``.

    Returns:
        RenderedBody: The body bytes with its format and content type. When no
        template exists the body is empty and the content type is ``None``, so
        the caller's headers decide it.
    """
    if resolver is None or action_name is None:
        return RenderedBody(b"", format, None)

    candidate_paths = (
        [client_identity] if isinstance(client_identity, str) else list(client_identity)
    )
    template = resolver.find(action_name, candidate_paths, format=format)
    if template is None:
        logger.debug(
            f"No template for {candidate_paths[0]}#{action_name}, sending an empty body"
        )
        return RenderedBody(b"", format, None)

    resolved_format = format or template.format or DEFAULT_FORMAT
    body = resolver.render(template, resolved_format, locals, layout=layout)

    if template.autoescape:
        body = unescape_markup(body.decode("utf-8")).encode("utf-8")

    return RenderedBody(body, resolved_format, content_type_for(resolved_format))
