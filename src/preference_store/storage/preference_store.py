"""Preference store: the StorageContract implementation over a key-value medium."""

import threading
from typing import Any, Callable, List, Optional

from ..common.exceptions import MediumInitializationError, StoreClosedError
from ..common.log import log
from ..media.medium import KeyValueMedium, ValueType
from .storage_contract import StorageContract, validate_key


class PreferenceStore(StorageContract):
    """StorageContract implementation that delegates to a lazily opened medium.

    The medium is opened by ``medium_factory`` on the first operation, read or
    write, and the same handle is reused afterwards. Concurrent first calls
    open it exactly once; the handle is published only after the factory has
    returned, so no caller sees a half-opened medium.

    If the factory raises, the error is reported to the caller as a
    MediumInitializationError and the next operation tries again.

    close() is final: the handle is released and every later operation
    raises StoreClosedError instead of opening a second handle.
    """

    def __init__(self, medium_factory: Callable[[], KeyValueMedium]):
        self._medium_factory = medium_factory
        self._medium: Optional[KeyValueMedium] = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def is_initialized(self) -> bool:
        return self._medium is not None

    def _handle(self) -> KeyValueMedium:
        medium = self._medium
        if medium is not None:
            return medium
        with self._lock:
            if self._closed:
                raise StoreClosedError("Preference store has been closed")
            if self._medium is None:
                log.debug("Opening key-value medium")
                try:
                    medium = self._medium_factory()
                except MediumInitializationError:
                    raise
                except Exception as e:
                    log.error("Failed to open key-value medium: %s", e)
                    raise MediumInitializationError(
                        f"Failed to open key-value medium: {e}"
                    ) from e
                self._medium = medium
                log.info("Key-value medium %s opened", type(medium).__name__)
            return self._medium

    def _get(self, key: str, value_type: ValueType) -> Optional[Any]:
        validate_key(key)
        return self._handle().get(key, value_type)

    def _save(self, key: str, value_type: ValueType, value: Any) -> bool:
        validate_key(key)
        if not value_type.accepts(value):
            raise TypeError(
                f"Value for key '{key}' must be {value_type.value}, got {type(value).__name__}"
            )
        return self._handle().set(key, value_type, value)

    def save_text(self, key: str, value: str) -> bool:
        return self._save(key, ValueType.TEXT, value)

    def get_text(self, key: str) -> Optional[str]:
        return self._get(key, ValueType.TEXT)

    def save_boolean(self, key: str, value: bool) -> bool:
        return self._save(key, ValueType.BOOLEAN, value)

    def get_boolean(self, key: str) -> Optional[bool]:
        return self._get(key, ValueType.BOOLEAN)

    def save_integer(self, key: str, value: int) -> bool:
        return self._save(key, ValueType.INTEGER, value)

    def get_integer(self, key: str) -> Optional[int]:
        return self._get(key, ValueType.INTEGER)

    def remove(self, key: str) -> bool:
        validate_key(key)
        return self._handle().remove(key)

    def clear_all(self) -> bool:
        cleared = self._handle().clear()
        if cleared:
            log.info("Cleared all preferences")
        return cleared

    def keys(self) -> List[str]:
        """List every key currently stored."""
        return self._handle().keys()

    def close(self):
        """Release the medium handle. The store cannot be used afterwards."""
        with self._lock:
            self._closed = True
            medium, self._medium = self._medium, None
        if medium is not None:
            medium.close()
            log.debug("Key-value medium %s closed", type(medium).__name__)
