import importlib.metadata
import logging
import threading
from typing import Dict, List

from ..models.errors import AdapterNotFoundError
from ._base import Adapter, AdapterFactory, AdapterSource
from ._httpx_adapter import HttpxAdapter
from ._stub_adapter import StubAdapter

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "action_client.adapters"

_BUILTIN_ADAPTERS: Dict[str, AdapterFactory] = {
    "httpx": HttpxAdapter,
    "stub": StubAdapter,
}


class AdapterRegistry:
    """Process-wide registry of transport adapters, keyed by name.

    Clients name their adapter in ``default(adapter=...)``. An adapter can be
    registered as an instance, or as a factory called once on first use.
    Packages can contribute adapters through the ``action_client.adapters``
    entry-point group; each entry point loads a function that registers them.
    """

    _factories: Dict[str, AdapterFactory] = dict(_BUILTIN_ADAPTERS)
    _instances: Dict[str, Adapter] = {}
    _plugins_loaded = False
    _lock = threading.RLock()

    @classmethod
    def register(cls, name: str, adapter: AdapterSource) -> None:
        """Register an adapter instance or factory under ``name``."""
        with cls._lock:
            cls._instances.pop(name, None)
            # a class is a factory even though it has a send attribute
            if not isinstance(adapter, type) and isinstance(adapter, Adapter):
                cls._instances[name] = adapter
                cls._factories.pop(name, None)
            else:
                cls._factories[name] = adapter
        logger.debug(f"Registered adapter '{name}'")

    @classmethod
    def unregister(cls, name: str) -> None:
        with cls._lock:
            cls._instances.pop(name, None)
            cls._factories.pop(name, None)

    @classmethod
    def get(cls, name: str) -> Adapter:
        """Return the adapter registered under ``name``, creating it on first use."""
        if not cls._plugins_loaded:
            cls.load_plugins()

        with cls._lock:
            adapter = cls._instances.get(name)
            if adapter is not None:
                return adapter

            factory = cls._factories.get(name)
            if factory is None:
                raise AdapterNotFoundError(name, cls.names())

            adapter = factory()
            cls._instances[name] = adapter
            logger.debug(f"Created adapter '{name}': {type(adapter).__name__}")
            return adapter

    @classmethod
    def names(cls) -> List[str]:
        with cls._lock:
            return sorted(set(cls._factories) | set(cls._instances))

    @classmethod
    def clear(cls) -> None:
        """Drop registrations and created adapters, keeping only the built-ins."""
        with cls._lock:
            cls._factories = dict(_BUILTIN_ADAPTERS)
            cls._instances = {}

    @classmethod
    def load_plugins(cls) -> None:
        """Load adapters contributed by installed packages, once per process.

        A plugin that fails to load is logged and skipped; the others and the
        built-in adapters stay usable.
        """
        with cls._lock:
            if cls._plugins_loaded:
                return

            entry_points = list(
                importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)
            )
            if entry_points:
                logger.debug(f"Found {len(entry_points)} adapter plugins")

            for entry_point in entry_points:
                try:
                    register_func = entry_point.load()
                    register_func()
                except Exception:
                    logger.exception(
                        f"Failed to load adapter plugin {entry_point.name}"
                    )
                    continue
                logger.debug(f"Loaded adapter plugin: {entry_point.name}")

            cls._plugins_loaded = True
