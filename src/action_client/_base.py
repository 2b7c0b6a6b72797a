import functools
from logging import getLogger
from typing import Any, Callable, ClassVar, Dict, FrozenSet, Mapping, Optional

from ._adapters._registry import AdapterRegistry
from ._config import ClientDefaults
from ._decoding import decode
from ._middleware._chain import MiddlewareChain, pass_through
from ._rendering._renderer import render_body
from ._utils._headers import HeaderInput, HeaderSet
from ._utils._naming import snake_case
from ._utils._request_spec import HTTP_METHODS, RequestSpec
from ._utils._response import RawResponse, Response
from ._utils._url import resolve_uri
from .models.errors import ConfigurationError

logger = getLogger("action_client")


class action:
    """Declare a client method as an action.

    Read from the class, an action is an entry point that creates a client
    instance and dispatches to it, so ``ArticleClient.create(article=a)`` works
    without instantiating. Read from an instance, it is a bound method. Either
    way the action's name selects the body template.
    """

    def __init__(self, func: Callable[..., RequestSpec]) -> None:
        self.func = func
        self.name = func.__name__
        functools.update_wrapper(self, func)

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Optional["ActionClient"], owner: type) -> Callable[..., RequestSpec]:
        name, func = self.name, self.func

        # run this descriptor's function, so super().<action>() reaches the parent
        if instance is None:

            @functools.wraps(func)
            def dispatch(*args: Any, **kwargs: Any) -> RequestSpec:
                return owner()._run(name, func, *args, **kwargs)

            return dispatch

        @functools.wraps(func)
        def bound(*args: Any, **kwargs: Any) -> RequestSpec:
            return instance._run(name, func, *args, **kwargs)

        return bound


def submit_request(defaults: ClientDefaults, request: RequestSpec) -> Response:
    """Send ``request`` through the inbound chain and decode the response."""
    adapter = AdapterRegistry.get(defaults.adapter)
    chain: MiddlewareChain[RawResponse] = MiddlewareChain(defaults.middleware)

    def transmit(request: RequestSpec) -> RawResponse:
        # adapters may answer with any (status, headers, body) triple
        return RawResponse.build(*adapter.send(request))

    status, headers, body = RawResponse.build(*chain.run(request, transmit))

    logger.debug(f"Response: {status} {request.method} {request.uri}")
    return Response(status, headers, decode(headers.get("Content-Type"), body))


def _verb(method: str) -> Callable[..., RequestSpec]:
    def verb(
        self: "ActionClient",
        *,
        path: Optional[str] = None,
        url: Optional[str] = None,
        headers: HeaderInput = None,
        locals: Optional[Mapping[str, Any]] = None,
        layout: Optional[str] = None,
        format: Optional[str] = None,
    ) -> RequestSpec:
        return self.build_request(
            method,
            path=path,
            url=url,
            headers=headers,
            locals=locals,
            layout=layout,
            format=format,
        )

    verb.__name__ = method.lower()
    verb.__qualname__ = f"ActionClient.{method.lower()}"
    verb.__doc__ = f"Build a {method} request for the current action."
    return verb


class ActionClient:
    """Base class for clients whose actions build outbound HTTP requests.

    Subclasses configure shared options with ``default`` and declare actions
    with ``@action``. An action calls one of the verb methods (``get``,
    ``post``, ...) and returns the resulting ``RequestSpec``; calling
    ``submit()`` on it sends the request through the client's middleware and
    adapter.

    Examples:
        ```python
        class ArticleClient(ActionClient):
            @action
            def create(self, article):
                self.article = article
                return self.post(path="/articles")

        ArticleClient.default(
            url="https://example.com",
            template_resolver=JinjaTemplateResolver.from_directory("templates"),
        )

        status, headers, body = ArticleClient.create(article=article).submit()
        ```

    The body of ``create`` is rendered from ``article_client/create.json.j2``;
    public instance attributes such as ``article`` are visible to the template.
    """

    defaults: ClassVar[ClientDefaults] = ClientDefaults()
    client_name: ClassVar[str] = "action_client"
    action_methods: ClassVar[FrozenSet[str]] = frozenset()
    _actions: ClassVar[Dict[str, Callable[..., RequestSpec]]] = {}
    _action_name: Optional[str] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Copy, so later changes to the parent do not leak into this class.
        cls.defaults = cls.defaults.merged()

        if "client_name" not in vars(cls):
            cls.client_name = snake_case(cls.__name__)

        actions: Dict[str, Callable[..., RequestSpec]] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, action):
                    actions[name] = value.func
                elif name in actions:
                    actions.pop(name)
        cls._actions = actions
        cls.action_methods = frozenset(actions)

    def __init__(self) -> None:
        self._action_name: Optional[str] = None

    @classmethod
    def default(cls, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        """Set default options for this client class and its future subclasses.

        Args:
            options: Options as a mapping; merged with ``kwargs``.
            **kwargs: ``url``, ``headers``, ``adapter``, ``template_resolver``,
                ``middleware``, ``request_middleware`` or any custom option.
        """
        cls.defaults = cls.defaults.merged(**{**dict(options or {}), **kwargs})
        logger.debug(f"Defaults for {cls.__name__}: {sorted({**(options or {}), **kwargs})}")

    @classmethod
    def template_paths(cls) -> list[str]:
        """Directories searched for action templates, most specific first."""
        paths: list[str] = []
        for klass in cls.__mro__:
            if not issubclass(klass, ActionClient) or klass is ActionClient:
                continue
            if klass.client_name not in paths:
                paths.append(klass.client_name)
        return paths

    @property
    def action_name(self) -> Optional[str]:
        return self._action_name

    def process(self, action_name: str, *args: Any, **kwargs: Any) -> RequestSpec:
        """Run the action named ``action_name`` on this instance."""
        func = self._actions.get(action_name)
        if func is None:
            raise AttributeError(
                f"{type(self).__name__} has no action '{action_name}'"
            )
        return self._run(action_name, func, *args, **kwargs)

    def _run(
        self,
        action_name: str,
        func: Callable[..., RequestSpec],
        *args: Any,
        **kwargs: Any,
    ) -> RequestSpec:
        previous, self._action_name = self._action_name, action_name
        try:
            return func(self, *args, **kwargs)
        finally:
            self._action_name = previous

    def _template_locals(self, locals: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        state = {k: v for k, v in vars(self).items() if not k.startswith("_")}
        return {"client": self, **state, **dict(locals or {})}

    def build_request(
        self,
        method: str,
        *,
        path: Optional[str] = None,
        url: Optional[str] = None,
        headers: HeaderInput = None,
        locals: Optional[Mapping[str, Any]] = None,
        layout: Optional[str] = None,
        format: Optional[str] = None,
    ) -> RequestSpec:
        """Assemble a request for the current action.

        Args:
            method: HTTP method, case-insensitive.
            path: Path appended to the client's base URL.
            url: Full URL used instead of the base URL. Mutually exclusive with
                ``path``.
            headers: Headers for this request. They win over the class default
                headers, which win over the content type of the rendered body.
            locals: Variables visible to the body template.
            layout: Layout wrapping the rendered body.
            format: Body format overriding the template's declared format.

        Returns:
            RequestSpec: The request, after the outbound middleware has run.

        Raises:
            ConfigurationError: Both ``path`` and ``url`` were given, the method
                is unknown, or no absolute URI can be formed.
        """
        if path is not None and url is not None:
            raise ConfigurationError("Only one of path or url can be provided")
        if str(method).upper() not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method '{method}'")

        defaults = self.defaults
        uri = resolve_uri(self.client_name, defaults.url, path=path, url=url)

        rendered = render_body(
            defaults.template_resolver,
            self.template_paths(),
            self.action_name,
            self._template_locals(locals),
            layout=layout,
            format=format,
        )

        header_set = HeaderSet(headers).merge_with_defaults(defaults.headers)
        if rendered.content_type:
            header_set.merge_with_defaults({"Content-Type": rendered.content_type})

        request = RequestSpec(
            method=method,
            uri=uri,
            headers=header_set,
            body=rendered.body,
            submitter=functools.partial(submit_request, defaults),
        )
        logger.debug(
            f"Built {request.method} {request.uri} for "
            f"{self.client_name}#{self.action_name}"
        )

        chain: MiddlewareChain[RequestSpec] = MiddlewareChain(defaults.request_middleware)
        return chain.run(request, pass_through)

    connect = _verb("CONNECT")
    delete = _verb("DELETE")
    get = _verb("GET")
    head = _verb("HEAD")
    options = _verb("OPTIONS")
    patch = _verb("PATCH")
    post = _verb("POST")
    put = _verb("PUT")
    trace = _verb("TRACE")
