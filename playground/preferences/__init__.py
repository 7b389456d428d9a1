"""Durable user preferences."""

from .mirror import AVATAR_URL_KEY, GITHUB_TOKEN_KEY, PreferenceMirror
from .store import KeyringStore, KeyValueStore, MemoryStore

__all__ = [
    "AVATAR_URL_KEY",
    "GITHUB_TOKEN_KEY",
    "PreferenceMirror",
    "KeyringStore",
    "KeyValueStore",
    "MemoryStore",
]
