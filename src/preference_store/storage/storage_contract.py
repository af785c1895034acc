"""Top level storage module for the preference store. This abstracts the actual
medium and provides a common interface for the rest of the application to use."""

from abc import ABC, abstractmethod
from typing import Optional


def validate_key(key) -> str:
    """Keys are non-empty strings."""
    if not isinstance(key, str):
        raise TypeError(f"Key must be a str, got {type(key).__name__}")
    if not key:
        raise ValueError("Key must not be empty")
    return key


class StorageContract(ABC):
    """Operations available for persisting and retrieving primitive values.

    Reads return None when the key is missing or holds another type. Writes
    return False when the underlying medium rejects them.
    """

    @abstractmethod
    def save_text(self, key: str, value: str) -> bool:
        """Persist a text value under key, overwriting any existing value."""

    @abstractmethod
    def get_text(self, key: str) -> Optional[str]:
        """Get the text value stored under key."""

    @abstractmethod
    def save_boolean(self, key: str, value: bool) -> bool:
        """Persist a boolean value under key, overwriting any existing value."""

    @abstractmethod
    def get_boolean(self, key: str) -> Optional[bool]:
        """Get the boolean value stored under key."""

    @abstractmethod
    def save_integer(self, key: str, value: int) -> bool:
        """Persist an integer value under key, overwriting any existing value."""

    @abstractmethod
    def get_integer(self, key: str) -> Optional[int]:
        """Get the integer value stored under key."""

    @abstractmethod
    def remove(self, key: str) -> bool:
        """Delete the entry at key. Succeeds whether or not the key existed."""

    @abstractmethod
    def clear_all(self) -> bool:
        """Delete every entry in the store. This cannot be undone."""
