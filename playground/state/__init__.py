"""Application state."""

from .app_state import AppState
from .events import EventEmitter

__all__ = ["AppState", "EventEmitter"]
