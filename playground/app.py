"""Wiring of the application state and its collaborators."""

import asyncio
import logging
from typing import Optional, Tuple

from .binary import BinaryManager
from .config import PlaygroundConfig
from .preferences import KeyringStore, KeyValueStore, PreferenceMirror
from .state import AppState
from .typedefs import TypeDefinitionFetcher
from .versions import FileKnownVersions

logger = logging.getLogger(__name__)


def build_app_state(config: PlaygroundConfig,
                    store: Optional[KeyValueStore] = None) -> Tuple[AppState, PreferenceMirror]:
    """Create the state once and arm the preference mirrors."""
    known_versions = FileKnownVersions(config.releases_file)
    state = AppState(
        known_versions,
        BinaryManager(config),
        TypeDefinitionFetcher(config),
    )

    mirror = PreferenceMirror(state, store or KeyringStore(config.keyring_service))
    mirror.restore()
    mirror.arm()
    return state, mirror


async def start(state: AppState) -> None:
    """Pick up binaries already on disk and select the default version."""
    await state.update_downloaded_version_state()
    record = await state.switch_to(state.active_version)
    logger.info("Started with %s (%s)", record.identifier, record.state.value)


def schedule_start(state: AppState) -> asyncio.Task:
    """Run :func:`start` on the current loop, logging a failed startup."""
    task = asyncio.ensure_future(start(state))
    task.add_done_callback(_log_start_failure)
    return task


def _log_start_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Startup failed", exc_info=error)
