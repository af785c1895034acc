"""Thread-safe registry that hands out one shared instance per capability.

Lifecycle: create the registry at startup, register factories, resolve
instances wherever they are needed, and call ``shutdown()`` at exit.
Shutdown is final; a registry cannot be reused afterwards.
"""

import threading
from typing import Any, Callable, Dict

from ..common.exceptions import RegistryShutdownError, ServiceNotRegisteredError
from ..common.log import log
from ..media.medium_factory import medium_factory
from ..storage.preference_store import PreferenceStore
from ..storage.storage_contract import StorageContract

DEFAULT_STORAGE_CONFIG = {"medium_type": "memory"}


class ServiceRegistry:
    """
    Binds capability types to factories and caches the constructed instances.
    """

    def __init__(self):
        """Initializes the ServiceRegistry."""
        self._factories: Dict[type, Callable[[], Any]] = {}
        self._instances: Dict[type, Any] = {}
        # Reentrant so a factory may resolve other capabilities
        self._lock = threading.RLock()
        self._shut_down = False

    def register(self, capability: type, factory: Callable[[], Any]) -> None:
        """
        Declares that requests for capability are served by factory(),
        called on the first resolve.

        Args:
            capability: The type callers will ask for.
            factory: Zero-argument callable building the instance.

        Raises:
            ValueError: If capability has already been resolved.
            RegistryShutdownError: If shutdown() has been called.
        """
        with self._lock:
            self._check_running()
            if capability in self._instances:
                raise ValueError(
                    f"Capability {capability.__name__} has already been resolved."
                )
            self._factories[capability] = factory

    def is_registered(self, capability: type) -> bool:
        with self._lock:
            return capability in self._factories

    def resolve(self, capability: type) -> Any:
        """
        Returns the shared instance for capability, constructing it on the
        first call.

        Raises:
            ServiceNotRegisteredError: If capability was never registered.
            RegistryShutdownError: If shutdown() has been called.
        """
        instance = self._instances.get(capability)
        if instance is not None:
            return instance
        with self._lock:
            self._check_running()
            if capability not in self._instances:
                factory = self._factories.get(capability)
                if factory is None:
                    raise ServiceNotRegisteredError(
                        f"No factory registered for {capability.__name__}"
                    )
                log.debug("Constructing %s", capability.__name__)
                self._instances[capability] = factory()
            return self._instances[capability]

    def shutdown(self) -> None:
        """
        Closes every constructed instance that has a close() method. Later
        register and resolve calls raise RegistryShutdownError, so no
        capability is ever constructed twice.
        """
        with self._lock:
            if self._shut_down:
                return
            self._shut_down = True
            instances = list(self._instances.items())
            self._instances.clear()
        for capability, instance in instances:
            close = getattr(instance, "close", None)
            if callable(close):
                log.debug("Closing %s", capability.__name__)
                close()

    def _check_running(self):
        if self._shut_down:
            raise RegistryShutdownError("Service registry has been shut down")


def register_preference_store(registry: ServiceRegistry, storage_config: dict) -> None:
    """Bind StorageContract to a PreferenceStore over the configured medium.

    The storage config is validated immediately; the store is built on the
    first resolve and opens its medium on the first operation.
    """
    factory = medium_factory(storage_config)
    registry.register(StorageContract, lambda: PreferenceStore(factory))


def create_registry(config: dict) -> ServiceRegistry:
    """Build a registry from a loaded configuration."""
    storage_config = (config or {}).get("storage")
    if not storage_config:
        log.warning("No storage config provided - using an in-memory medium")
        storage_config = DEFAULT_STORAGE_CONFIG
    registry = ServiceRegistry()
    register_preference_store(registry, storage_config)
    return registry
