from ._formats import CONTENT_TYPES, DEFAULT_FORMAT, content_type_for, split_template_name
from ._renderer import RenderedBody, render_body, unescape_markup
from ._resolver import JinjaTemplateResolver, TemplateDescriptor, TemplateResolver

__all__ = [
    "CONTENT_TYPES",
    "DEFAULT_FORMAT",
    "JinjaTemplateResolver",
    "RenderedBody",
    "TemplateDescriptor",
    "TemplateResolver",
    "content_type_for",
    "render_body",
    "split_template_name",
    "unescape_markup",
]
