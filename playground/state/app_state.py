"""Application state and version switching."""

import asyncio
import logging
from typing import Optional, Set

from ..binary.manager import BinaryProvisioner
from ..errors import ProvisioningError, UnknownVersionError
from ..typedefs.fetcher import TypeDefinitionService
from ..versions.catalog import VersionCatalog
from ..versions.known import KnownVersionsSource
from ..versions.models import DownloadState, VersionRecord
from ..versions.normalize import normalize_version
from . import events as ev

logger = logging.getLogger(__name__)


class AppState:
    """State shared by the window, the editors and the preference mirrors.

    Built once at startup and handed to whoever needs it. ``active_version``
    and ``catalog`` are only replaced, never mutated, and every replacement is
    announced through :attr:`events`. Readers may observe an in-flight switch
    (an entry still ``downloading`` while another version is active).
    """

    def __init__(self, known_versions: KnownVersionsSource, provisioner: BinaryProvisioner,
                 type_definitions: Optional[TypeDefinitionService] = None,
                 events: Optional[ev.EventEmitter] = None):
        self.provisioner = provisioner
        self.type_definitions = type_definitions
        self.events = events or ev.EventEmitter()

        self._catalog = VersionCatalog.seed(known_versions.get_known_versions())
        self._active_version = self._catalog.default_version
        self._github_token: Optional[str] = None
        self._avatar_url: Optional[str] = None
        self._side_effects: Set[asyncio.Task] = set()

        self.is_console_showing = False
        self.is_token_dialog_showing = False

    @property
    def active_version(self) -> str:
        return self._active_version

    @property
    def catalog(self) -> VersionCatalog:
        return self._catalog

    @property
    def github_token(self) -> Optional[str]:
        return self._github_token

    @github_token.setter
    def github_token(self, value: Optional[str]):
        if value != self._github_token:
            self._github_token = value
            self.events.emit(ev.GITHUB_TOKEN_CHANGED, value)

    @property
    def avatar_url(self) -> Optional[str]:
        return self._avatar_url

    @avatar_url.setter
    def avatar_url(self, value: Optional[str]):
        if value != self._avatar_url:
            self._avatar_url = value
            self.events.emit(ev.AVATAR_URL_CHANGED, value)

    def toggle_console(self) -> bool:
        self.is_console_showing = not self.is_console_showing
        self.events.emit(ev.CONSOLE_TOGGLED, self.is_console_showing)
        return self.is_console_showing

    def toggle_auth_dialog(self) -> bool:
        self.is_token_dialog_showing = not self.is_token_dialog_showing
        self.events.emit(ev.AUTH_DIALOG_TOGGLED, self.is_token_dialog_showing)
        return self.is_token_dialog_showing

    async def switch_to(self, raw_version: str) -> VersionRecord:
        """Make ``raw_version`` the active version, downloading it if needed.

        The active version changes before the binary is ready. A failed
        download leaves the entry ``failed``; switching to it again retries.
        Raises :class:`InvalidVersionError` or :class:`UnknownVersionError`
        without touching any state.
        """
        version = normalize_version(raw_version)
        if version not in self._catalog:
            raise UnknownVersionError(version)

        logger.info("Switching to %s", version)
        self._set_active_version(version)
        self._refresh_type_definitions(version)

        if self._catalog.state_of(version) is DownloadState.READY:
            return self._catalog[version]

        logger.info("Instructing provisioner to fetch %s", version)
        self._publish_catalog(self._catalog.with_download_state(version, DownloadState.DOWNLOADING))

        try:
            await self.provisioner.setup(version)
        except ProvisioningError as e:
            logger.exception("Provisioning %s failed", version)
            self._publish_catalog(self._catalog.with_download_state(version, DownloadState.FAILED))
            self.events.emit(ev.VERSION_FAILED, (version, e))
            return self._catalog[version]

        await self.update_downloaded_version_state()
        return self._catalog[version]

    async def retry(self, raw_version: str) -> VersionRecord:
        """Retry a version whose download failed."""
        return await self.switch_to(raw_version)

    async def update_downloaded_version_state(self) -> None:
        """Mark every locally present version as ready."""
        downloaded = await self.provisioner.get_downloaded_versions()
        logger.info("Updating version state")
        self._publish_catalog(self._catalog.reconcile(downloaded))

    async def wait_for_side_effects(self) -> None:
        """Wait for detached type definition refreshes to finish."""
        if self._side_effects:
            await asyncio.gather(*list(self._side_effects), return_exceptions=True)

    def _set_active_version(self, version: str) -> None:
        if version != self._active_version:
            self._active_version = version
            self.events.emit(ev.ACTIVE_VERSION_CHANGED, version)

    def _publish_catalog(self, catalog: VersionCatalog) -> None:
        if catalog != self._catalog:
            self._catalog = catalog
            self.events.emit(ev.CATALOG_CHANGED, catalog)

    def _refresh_type_definitions(self, version: str) -> None:
        if self.type_definitions is None:
            return
        task = asyncio.ensure_future(self.type_definitions.refresh(version))
        self._side_effects.add(task)
        task.add_done_callback(self._on_side_effect_done)

    def _on_side_effect_done(self, task: asyncio.Task) -> None:
        self._side_effects.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Type definition refresh failed: %s", error)
