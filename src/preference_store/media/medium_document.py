"""Base class for media that keep every entry in one document.

The document is loaded once when the medium is opened and written back in
full after every mutation. Each entry is stored as
``{"type": "<value type>", "value": <value>}`` so reads can tell types apart.
"""

import threading
from abc import abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from ..common.log import log
from .medium import KeyValueMedium, ValueType


class DocumentMedium(KeyValueMedium):
    """Key-value medium backed by a single JSON-compatible document."""

    # Backend errors that turn a write into a False result
    persist_errors: Tuple[type, ...] = ()

    def __init__(self, config: dict):
        super().__init__(config)
        self.lock = threading.Lock()
        self.entries: Dict[str, Dict[str, Any]] = self._validate_document(
            self.load()
        )

    @abstractmethod
    def load(self) -> dict:
        """Read the stored document. Called once while opening."""

    @abstractmethod
    def persist(self, entries: Dict[str, Dict[str, Any]]):
        """Write the whole document. May raise one of ``persist_errors``."""

    def get(self, key: str, value_type: ValueType) -> Optional[Any]:
        with self.lock:
            entry = self.entries.get(key)
        if entry is None or entry["type"] != value_type.value:
            return None
        return entry["value"]

    def set(self, key: str, value_type: ValueType, value: Any) -> bool:
        with self.lock:
            entries = dict(self.entries)
            entries[key] = {"type": value_type.value, "value": value}
            return self._commit(entries, "set", key)

    def remove(self, key: str) -> bool:
        with self.lock:
            if key not in self.entries:
                return True
            entries = dict(self.entries)
            del entries[key]
            return self._commit(entries, "remove", key)

    def clear(self) -> bool:
        with self.lock:
            return self._commit({}, "clear", None)

    def keys(self) -> List[str]:
        with self.lock:
            return list(self.entries.keys())

    def _commit(self, entries, operation, key) -> bool:
        # Caller holds the lock
        try:
            self.persist(entries)
        except self.persist_errors as e:
            log.error(
                "%s: %s failed for key %s: %s",
                self.__class__.__name__,
                operation,
                key,
                e,
            )
            return False
        self.entries = entries
        return True

    def _validate_document(self, document) -> Dict[str, Dict[str, Any]]:
        if not isinstance(document, dict):
            raise ValueError(
                f"{self.__class__.__name__}: stored document must be a JSON object"
            )
        entries = {}
        for key, entry in document.items():
            if not self._is_valid_entry(entry):
                log.warning(
                    "%s: ignoring malformed entry for key %s",
                    self.__class__.__name__,
                    key,
                )
                continue
            entries[key] = entry
        return entries

    @staticmethod
    def _is_valid_entry(entry) -> bool:
        if not isinstance(entry, dict) or "value" not in entry:
            return False
        try:
            value_type = ValueType(entry.get("type"))
        except ValueError:
            return False
        return value_type.accepts(entry["value"])
