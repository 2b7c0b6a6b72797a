from typing import Callable, Protocol, Union, runtime_checkable

from .._utils._request_spec import RequestSpec
from .._utils._response import RawResponse


@runtime_checkable
class Adapter(Protocol):
    """Transport at the end of the inbound middleware chain."""

    def send(self, request: RequestSpec) -> RawResponse: ...


AdapterFactory = Callable[[], Adapter]
AdapterSource = Union[Adapter, AdapterFactory]
