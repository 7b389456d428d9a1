"""Explicit change events emitted by the application state."""

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]

ACTIVE_VERSION_CHANGED = "active_version_changed"
CATALOG_CHANGED = "catalog_changed"
VERSION_FAILED = "version_failed"
GITHUB_TOKEN_CHANGED = "github_token_changed"
AVATAR_URL_CHANGED = "avatar_url_changed"
CONSOLE_TOGGLED = "console_toggled"
AUTH_DIALOG_TOGGLED = "auth_dialog_toggled"


class EventEmitter:
    def __init__(self):
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for ``event`` and return an unsubscribe callable."""
        self._listeners[event].append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners[event].remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, payload: Any = None) -> None:
        # A failing listener must not starve the others.
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener for %s failed", event)
