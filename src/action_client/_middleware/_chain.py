"""Ordered middleware pipelines.

One chain type serves both directions:

* outbound: stages transform the assembled request; the terminal handler is
  ``pass_through`` and the chain's result is the final ``RequestSpec``.
* inbound: stages wrap transmission; the terminal handler is the adapter's
  ``send`` and the chain's result is a ``RawResponse``.

A chain built from ``[a, b, c]`` runs as ``a(b(c(terminal)))``. A stage may
return without calling ``next``; whatever it returns becomes the result.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar, Union

from .._utils._request_spec import RequestSpec

logger = logging.getLogger(__name__)

T = TypeVar("T")

NextHandler = Callable[[RequestSpec], T]
Handler = Callable[[RequestSpec], T]


class Middleware(ABC, Generic[T]):
    """A stage in a middleware chain.

    Subclasses implement ``handle``. Plain callables taking
    ``(request, next)`` are accepted by ``MiddlewareChain`` too.
    """

    @abstractmethod
    def handle(self, request: RequestSpec, next: NextHandler[T]) -> T:
        """Process ``request``, usually by delegating to ``next(request)``."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


Stage = Union[Middleware[Any], Callable[[RequestSpec, NextHandler[Any]], Any]]


def pass_through(request: RequestSpec) -> RequestSpec:
    return request


def _stage_name(stage: Stage) -> str:
    if isinstance(stage, Middleware):
        return stage.name
    return getattr(stage, "__name__", type(stage).__name__)


def _wrap(stage: Stage, next_handler: Handler[T]) -> Handler[T]:
    call = stage.handle if isinstance(stage, Middleware) else stage

    def handler(request: RequestSpec) -> T:
        return call(request, next_handler)

    handler.__name__ = _stage_name(stage)
    return handler


class MiddlewareChain(Generic[T]):
    """Immutable, ordered sequence of middleware stages."""

    def __init__(self, stages: Iterable[Stage] = ()) -> None:
        self._stages: tuple[Stage, ...] = tuple(stages)
        for stage in self._stages:
            if not isinstance(stage, Middleware) and not callable(stage):
                raise TypeError(
                    f"Middleware stage {stage!r} must define handle() or be callable"
                )

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    def build(self, terminal: Handler[T]) -> Handler[T]:
        """Compose the stages around ``terminal`` into a single handler."""
        handler = terminal
        for stage in reversed(self._stages):
            handler = _wrap(stage, handler)
        logger.debug(
            f"Built middleware chain: "
            f"{' -> '.join([_stage_name(s) for s in self._stages] + [getattr(terminal, '__name__', 'terminal')])}"
        )
        return handler

    def run(self, request: RequestSpec, terminal: Handler[T]) -> T:
        return self.build(terminal)(request)

    def append(self, stage: Stage) -> "MiddlewareChain[T]":
        return MiddlewareChain(self._stages + (stage,))

    def __add__(self, other: Union["MiddlewareChain[T]", Iterable[Stage]]) -> "MiddlewareChain[T]":
        extra = other.stages if isinstance(other, MiddlewareChain) else tuple(other)
        return MiddlewareChain(self._stages + extra)

    def __iter__(self) -> Iterator[Stage]:
        return iter(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MiddlewareChain):
            return NotImplemented
        return self._stages == other._stages

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"MiddlewareChain([{', '.join(_stage_name(s) for s in self._stages)}])"
