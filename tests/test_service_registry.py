"""Tests for the service registry"""

import json
import threading
from unittest.mock import Mock

import pytest

from preference_store.common.exceptions import (
    InitializationError,
    RegistryShutdownError,
    ServiceNotRegisteredError,
    StoreClosedError,
)
from preference_store.registry.service_registry import (
    ServiceRegistry,
    create_registry,
    register_preference_store,
)
from preference_store.media.medium_file import MediumFile
from preference_store.media.medium_memory import MediumMemory
from preference_store.storage.preference_store import PreferenceStore
from preference_store.storage.storage_contract import StorageContract


class Clock:
    pass


class TestServiceRegistry:
    def test_resolve_constructs_on_first_request(self):
        registry = ServiceRegistry()
        factory = Mock(return_value=Clock())
        registry.register(Clock, factory)
        factory.assert_not_called()

        first = registry.resolve(Clock)
        second = registry.resolve(Clock)

        assert first is second
        factory.assert_called_once_with()

    def test_unregistered_capability(self):
        registry = ServiceRegistry()
        assert registry.is_registered(Clock) is False
        with pytest.raises(ServiceNotRegisteredError):
            registry.resolve(Clock)

    def test_register_replaces_unresolved_factory(self):
        registry = ServiceRegistry()
        replacement = Clock()
        registry.register(Clock, Clock)
        registry.register(Clock, lambda: replacement)
        assert registry.resolve(Clock) is replacement

    def test_register_after_resolve_rejected(self):
        registry = ServiceRegistry()
        registry.register(Clock, Clock)
        registry.resolve(Clock)
        with pytest.raises(ValueError):
            registry.register(Clock, Clock)

    def test_factory_may_resolve_other_capabilities(self):
        class Alarm:
            def __init__(self, clock):
                self.clock = clock

        registry = ServiceRegistry()
        registry.register(Clock, Clock)
        registry.register(Alarm, lambda: Alarm(registry.resolve(Clock)))
        assert registry.resolve(Alarm).clock is registry.resolve(Clock)

    def test_concurrent_resolve_constructs_once(self):
        registry = ServiceRegistry()
        constructed = []

        def factory():
            constructed.append(Clock())
            return constructed[-1]

        registry.register(Clock, factory)
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(registry.resolve(Clock))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(constructed) == 1
        assert all(result is constructed[0] for result in results)

    def test_shutdown_closes_instances(self):
        registry = ServiceRegistry()
        instance = Mock()
        registry.register(Clock, lambda: instance)
        registry.resolve(Clock)

        registry.shutdown()

        instance.close.assert_called_once_with()

    def test_shutdown_is_final(self):
        registry = ServiceRegistry()
        factory = Mock(return_value=Mock())
        registry.register(Clock, factory)
        registry.resolve(Clock)

        registry.shutdown()
        registry.shutdown()

        with pytest.raises(RegistryShutdownError):
            registry.resolve(Clock)
        with pytest.raises(RegistryShutdownError):
            registry.register(Clock, Clock)
        factory.assert_called_once_with()
        factory.return_value.close.assert_called_once_with()

    def test_shutdown_skips_instances_without_close(self):
        registry = ServiceRegistry()
        registry.register(Clock, Clock)
        registry.resolve(Clock)
        registry.shutdown()


class TestPreferenceStoreRegistration:
    def test_resolves_preference_store(self):
        registry = ServiceRegistry()
        register_preference_store(registry, {"medium_type": "memory"})

        store = registry.resolve(StorageContract)

        assert isinstance(store, PreferenceStore)
        assert store.is_initialized is False
        assert registry.resolve(StorageContract) is store

    def test_bad_config_fails_at_registration(self):
        registry = ServiceRegistry()
        with pytest.raises(InitializationError):
            register_preference_store(registry, {"medium_type": "file"})
        assert registry.is_registered(StorageContract) is False

    def test_resolve_does_not_open_medium(self, tmp_path):
        path = tmp_path / "missing_dir" / "prefs.json"
        registry = ServiceRegistry()
        register_preference_store(
            registry, {"medium_type": "file", "medium_config": {"file": str(path)}}
        )
        store = registry.resolve(StorageContract)
        assert store.is_initialized is False

    def test_create_registry_from_config(self, tmp_path):
        path = tmp_path / "prefs.json"
        registry = create_registry(
            {"storage": {"medium_type": "file", "medium_config": {"file": str(path)}}}
        )
        store = registry.resolve(StorageContract)
        assert store.save_text("token", "abc123") is True
        assert isinstance(store._medium, MediumFile)
        registry.shutdown()
        assert store.is_initialized is False

    def test_store_is_not_rebuilt_after_shutdown(self, tmp_path):
        path = tmp_path / "prefs.json"
        registry = create_registry(
            {"storage": {"medium_type": "file", "medium_config": {"file": str(path)}}}
        )
        store = registry.resolve(StorageContract)
        assert store.save_text("a", "1") is True

        registry.shutdown()

        with pytest.raises(RegistryShutdownError):
            registry.resolve(StorageContract)
        with pytest.raises(StoreClosedError):
            store.save_text("x", "old")
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "a": {"type": "text", "value": "1"}
        }

    def test_create_registry_defaults_to_memory(self):
        store = create_registry({}).resolve(StorageContract)
        store.get_text("anything")
        assert isinstance(store._medium, MediumMemory)
