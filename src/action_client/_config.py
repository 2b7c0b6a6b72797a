from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._middleware._chain import MiddlewareChain
from ._rendering._resolver import TemplateResolver

DEFAULT_ADAPTER = "httpx"


class ClientDefaults(BaseModel):
    """Configuration shared by every action of a client class.

    Instances are immutable. ``merged`` returns a copy with some options
    replaced, which is how ``ActionClient.default`` configures a class without
    touching its parent's defaults. Options that are not declared fields are
    kept, in order, in ``options``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        arbitrary_types_allowed=True,
    )

    url: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    adapter: str = DEFAULT_ADAPTER
    template_resolver: Optional[Any] = None
    middleware: Tuple[Any, ...] = ()
    request_middleware: Tuple[Any, ...] = ()

    @field_validator("headers", mode="before")
    @classmethod
    def _stringify_headers(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(k): str(v) for k, v in value.items()}
        return value

    @field_validator("template_resolver")
    @classmethod
    def _check_resolver(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, TemplateResolver):
            raise ValueError(
                "template_resolver must provide find() and render(), "
                f"got {type(value).__name__}"
            )
        return value

    @field_validator("middleware", "request_middleware", mode="before")
    @classmethod
    def _to_tuple(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, MiddlewareChain):
            return value.stages
        if isinstance(value, (list, tuple)):
            return tuple(value)
        return (value,)

    @property
    def options(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    def merged(self, **options: Any) -> "ClientDefaults":
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(self.options)
        values.update(options)
        return type(self).model_validate(values)
