"""Key-value stores for preferences."""

from typing import Dict, Optional, Protocol

import keyring
from keyring.errors import KeyringError

from ..errors import PreferencesError


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class KeyringStore:
    """Preferences kept in the system keyring."""

    def __init__(self, service: str = "runtime_playground"):
        self.service = service

    def get(self, key: str) -> Optional[str]:
        """Retrieve a stored value from keyring."""
        try:
            return keyring.get_password(self.service, key)
        except KeyringError as e:
            raise PreferencesError(f"Could not read {key}: {e}") from e

    def set(self, key: str, value: str) -> None:
        """Store a value securely."""
        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            raise PreferencesError(f"Could not write {key}: {e}") from e


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
