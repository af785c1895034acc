"""Top level module for the key-value media. A medium is the persistent facility
that actually holds the entries; the preference store only talks to it through
this interface."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional


class ValueType(Enum):
    """The closed set of primitive types an entry may hold."""

    TEXT = "text"
    BOOLEAN = "boolean"
    INTEGER = "integer"

    def accepts(self, value: Any) -> bool:
        """Return True if value is an instance of this type.

        Booleans are never accepted as integers.
        """
        if self is ValueType.BOOLEAN:
            return isinstance(value, bool)
        if self is ValueType.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        return isinstance(value, str)


class KeyValueMedium(ABC):
    """Abstract key-value medium.

    Constructing a medium acquires its handle (opens the file, connects to the
    database, ...). Constructors may raise; everything else reports failure
    through its return value.
    """

    def __init__(self, config: dict):
        """Initialize the medium."""

    @abstractmethod
    def get(self, key: str, value_type: ValueType) -> Optional[Any]:
        """Return the value at key, or None if missing or of another type."""

    @abstractmethod
    def set(self, key: str, value_type: ValueType, value: Any) -> bool:
        """Store a typed value at key. Return whether the write succeeded."""

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete the entry at key if present."""

    @abstractmethod
    def clear(self) -> bool:
        """Delete every entry."""

    @abstractmethod
    def keys(self) -> List[str]:
        """List all keys in the medium."""

    def close(self):
        """Release the handle. The default medium holds nothing to release."""
