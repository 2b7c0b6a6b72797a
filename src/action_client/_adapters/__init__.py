from ._base import Adapter, AdapterFactory
from ._httpx_adapter import HttpxAdapter
from ._registry import AdapterRegistry
from ._stub_adapter import StubAdapter

__all__ = [
    "Adapter",
    "AdapterFactory",
    "AdapterRegistry",
    "HttpxAdapter",
    "StubAdapter",
]
