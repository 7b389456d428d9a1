"""Mirrors state fields into the durable preferences store."""

import logging
from typing import Callable, List, Optional

from ..errors import PreferencesError
from ..state import events as ev
from ..state.app_state import AppState
from .store import KeyValueStore

logger = logging.getLogger(__name__)

GITHUB_TOKEN_KEY = "githubToken"
AVATAR_URL_KEY = "avatarUrl"


class PreferenceMirror:
    """Keeps the GitHub token and avatar URL persisted as they change.

    Arm it once at startup. Arming again is a no-op, so repeated version
    switches never pile up duplicate writers.
    """

    def __init__(self, state: AppState, store: KeyValueStore):
        self.state = state
        self.store = store
        self._unsubscribers: List[Callable[[], None]] = []

    @property
    def armed(self) -> bool:
        return bool(self._unsubscribers)

    def restore(self) -> None:
        """Load persisted values into the state. Empty strings count as absent."""
        self.state.github_token = self._read(GITHUB_TOKEN_KEY)
        self.state.avatar_url = self._read(AVATAR_URL_KEY)

    def arm(self) -> None:
        if self.armed:
            return
        self._unsubscribers = [
            self.state.events.on(ev.GITHUB_TOKEN_CHANGED, self._writer(GITHUB_TOKEN_KEY)),
            self.state.events.on(ev.AVATAR_URL_CHANGED, self._writer(AVATAR_URL_KEY)),
        ]

    def disarm(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _writer(self, key: str) -> Callable[[Optional[str]], None]:
        def _write(value: Optional[str]) -> None:
            self.store.set(key, value or "")
        return _write

    def _read(self, key: str) -> Optional[str]:
        try:
            value = self.store.get(key)
        except PreferencesError as e:
            logger.warning("%s", e)
            return None
        return value or None
