"""Previews: named, argument-free calls to client actions for inspection.

```python
class ArticlesClientPreview(ActionClientPreview):
    def create(self):
        return ArticlesClient.create(title="Hello, World")
```

``action-client preview my_app.previews:ArticlesClientPreview create`` prints
the request line and the body the action builds.
"""

import json
from typing import Any, ClassVar, Dict

from ._decoding import is_json, parse_content_type
from ._utils._naming import snake_case
from ._utils._request_spec import RequestSpec


class ActionClientPreview:
    preview_name: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "preview_name" not in vars(cls):
            name = snake_case(cls.__name__)
            cls.preview_name = name[: -len("_preview")] if name.endswith("_preview") else name

    @classmethod
    def preview_methods(cls) -> list[str]:
        """Public methods declared by preview subclasses, in definition order."""
        names: list[str] = []
        for klass in reversed(cls.__mro__):
            if not issubclass(klass, ActionClientPreview) or klass is ActionClientPreview:
                continue
            for name, value in vars(klass).items():
                if callable(value) and not name.startswith("_") and name not in names:
                    names.append(name)
        return names

    @classmethod
    def call(cls, name: str) -> RequestSpec:
        if name not in cls.preview_methods():
            raise LookupError(
                f"Preview '{cls.preview_name}' has no method '{name}'. "
                f"Available: {', '.join(cls.preview_methods()) or 'none'}"
            )
        return getattr(cls(), name)()


def format_body(request: RequestSpec) -> str:
    """The request body as text, pretty-printed when it is JSON."""
    text = request.text
    media_type, _ = parse_content_type(request.content_type)
    if text.strip() and is_json(media_type):
        try:
            return json.dumps(json.loads(text), indent=2)
        except json.JSONDecodeError:
            return text
    return text


def render_preview(request: RequestSpec) -> str:
    return f"{request.method} {request.uri}\n\n{format_body(request)}".rstrip() + "\n"


def preview_as_dict(request: RequestSpec) -> Dict[str, Any]:
    return {
        "method": request.method,
        "url": request.uri,
        "headers": request.headers.to_dict(),
        "body": format_body(request),
    }
