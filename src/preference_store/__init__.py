"""Typed key-value preferences over a pluggable persistent medium."""

from .storage.storage_contract import StorageContract
from .storage.preference_store import PreferenceStore
from .registry.service_registry import (
    ServiceRegistry,
    create_registry,
    register_preference_store,
)

__version__ = "0.1.0"
