"""Template lookup and rendering.

Templates live under a directory named after the client identity and are named
after the action, with the body format as the first extension:

    article_client/create.json.j2
    article_client/update.xml.j2
    layouts/article_client.json.j2

The Body Renderer only needs the ``TemplateResolver`` capability below;
``JinjaTemplateResolver`` is the implementation shipped with the package.
"""

import logging
from os import PathLike
from typing import Any, Mapping, Optional, Protocol, Sequence, Union, runtime_checkable

from jinja2 import (
    BaseLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    Undefined,
)
from markupsafe import Markup
from pydantic import BaseModel, ConfigDict

from ._formats import (
    CONTENT_TYPES,
    ENGINE_EXTENSIONS,
    content_type_for,
    split_template_name,
)

logger = logging.getLogger(__name__)

LAYOUTS_DIRECTORY = "layouts"


class TemplateDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    virtual_path: str
    format: Optional[str] = None
    autoescape: bool = False

    @property
    def content_type(self) -> Optional[str]:
        return content_type_for(self.format)


@runtime_checkable
class TemplateResolver(Protocol):
    """Capability the Body Renderer consumes to find and render templates."""

    def find(
        self,
        action_name: str,
        candidate_paths: Sequence[str],
        *,
        format: Optional[str] = None,
    ) -> Optional[TemplateDescriptor]: ...

    def render(
        self,
        template: TemplateDescriptor,
        format: str,
        locals: Mapping[str, Any],
        layout: Optional[str] = None,
    ) -> bytes: ...


class JinjaTemplateResolver:
    """Resolve and render body templates with Jinja2.

    Autoescaping is off by default: bodies are JSON or XML, not HTML, and an
    escaping pass would rewrite quotes into entities. When an autoescaping
    environment is supplied, the descriptor says so and the Body Renderer
    reverses the escaping.

    Args:
        loader: Any Jinja2 loader. Defaults to a ``FileSystemLoader`` over
            ``search_path``.
        search_path: Directory (or directories) holding the templates.
        environment: A fully configured environment; overrides the other options.
        autoescape: Passed to the environment when one is created.
        strict: Raise on undefined template variables instead of rendering them
            as empty strings.

    Examples:
        ```python
        resolver = JinjaTemplateResolver.from_mapping(
            {"article_client/create.json.j2": '{"title": {{ article.title | tojson }}}'}
        )
        ```
    """

    def __init__(
        self,
        loader: Optional[BaseLoader] = None,
        *,
        search_path: Union[str, PathLike, Sequence[Union[str, PathLike]], None] = None,
        environment: Optional[Environment] = None,
        autoescape: bool = False,
        strict: bool = False,
    ) -> None:
        if environment is None:
            if loader is None:
                if search_path is None:
                    raise ValueError("Either loader, search_path or environment is required")
                loader = FileSystemLoader(search_path)
            environment = Environment(
                loader=loader,
                autoescape=autoescape,
                undefined=StrictUndefined if strict else Undefined,
            )
        self.environment = environment

    @classmethod
    def from_mapping(cls, templates: Mapping[str, str], **kwargs: Any) -> "JinjaTemplateResolver":
        return cls(DictLoader(dict(templates)), **kwargs)

    @classmethod
    def from_directory(
        cls, path: Union[str, PathLike], **kwargs: Any
    ) -> "JinjaTemplateResolver":
        return cls(search_path=path, **kwargs)

    def _autoescapes(self, name: str) -> bool:
        autoescape = self.environment.autoescape
        if callable(autoescape):
            return bool(autoescape(name))
        return bool(autoescape)

    @staticmethod
    def _candidate_names(
        directory: str, action_name: str, format: Optional[str]
    ) -> list[str]:
        """Template names to try, the requested format first, undeclared last."""
        formats: list[Optional[str]] = [format] if format else []
        formats += [f for f in CONTENT_TYPES if f != format]
        formats.append(None)

        names: list[str] = []
        for candidate_format in formats:
            stem = f"{directory}/{action_name}"
            if candidate_format:
                stem = f"{stem}.{candidate_format}"
            names += [f"{stem}.{extension}" for extension in ENGINE_EXTENSIONS]
            names.append(stem)
        return names

    def _lookup(
        self, directory: str, action_name: str, format: Optional[str]
    ) -> Optional[str]:
        candidates = self._candidate_names(directory, action_name, format)
        try:
            return self.environment.select_template(candidates).name
        except TemplateNotFound:
            pass

        if format is not None:
            return None
        # formats outside the table are only discoverable by listing
        return self._list_lookup(directory, action_name)

    def _list_lookup(self, directory: str, action_name: str) -> Optional[str]:
        try:
            names = self.environment.list_templates()
        except TypeError:
            # the loader cannot enumerate its templates
            return None

        for name in sorted(names):
            head, _, filename = name.rpartition("/")
            if head != directory:
                continue
            if split_template_name(filename)[0] == action_name:
                return name
        return None

    def find(
        self,
        action_name: str,
        candidate_paths: Sequence[str],
        *,
        format: Optional[str] = None,
    ) -> Optional[TemplateDescriptor]:
        for directory in candidate_paths:
            name = self._lookup(directory, action_name, format)
            if name is not None:
                _, template_format = split_template_name(name.rpartition("/")[2])
                logger.debug(f"Resolved template {name} for action '{action_name}'")
                return TemplateDescriptor(
                    virtual_path=name,
                    format=template_format,
                    autoescape=self._autoescapes(name),
                )
        return None

    def render(
        self,
        template: TemplateDescriptor,
        format: str,
        locals: Mapping[str, Any],
        layout: Optional[str] = None,
    ) -> bytes:
        body = self.environment.get_template(template.virtual_path).render(dict(locals))

        if layout:
            layout_name = self._lookup(LAYOUTS_DIRECTORY, layout, format)
            if layout_name is None:
                raise TemplateNotFound(f"{LAYOUTS_DIRECTORY}/{layout}.{format}")
            body = self.environment.get_template(layout_name).render(
                {**locals, "content": Markup(body)}
            )

        return body.encode("utf-8")
