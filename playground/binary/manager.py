"""Runtime binary manager."""

import asyncio
import logging
import platform
import shutil
import zipfile
import zlib
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, Set

import aiohttp

from ..config import PlaygroundConfig
from ..errors import InvalidVersionError, ProvisioningError
from ..utils.async_http import AsyncHTTPClient
from ..versions.normalize import normalize_version

logger = logging.getLogger(__name__)

# No overall deadline; a stalled connection still times out.
DOWNLOAD_TIMEOUT = aiohttp.ClientTimeout(total=None, sock_connect=30, sock_read=60)


class BinaryProvisioner(Protocol):
    async def setup(self, identifier: str) -> None:
        """Make sure the binary for ``identifier`` is present locally."""
        ...

    async def get_downloaded_versions(self) -> Set[str]:
        """Identifiers of every version present locally."""
        ...


class BinaryManager:
    """Downloads and unpacks runtime release archives."""

    def __init__(self, config: PlaygroundConfig, progress_callback: Optional[Callable] = None):
        self.config = config
        self.binaries_dir = Path(config.binaries_dir)
        self.progress_callback = progress_callback
        self.semaphore = asyncio.Semaphore(config.concurrent_downloads)
        self._pending: Dict[str, asyncio.Task] = {}

    @staticmethod
    def get_platform_suffix() -> str:
        """Platform/arch part of the release archive name."""
        system = platform.system().lower()
        machine = platform.machine().lower()

        os_map = {
            "windows": "win32",
            "linux": "linux",
            "darwin": "darwin"
        }
        arch_map = {
            "amd64": "x64",
            "x86_64": "x64",
            "i386": "ia32",
            "i686": "ia32",
            "arm64": "arm64",
            "aarch64": "arm64"
        }
        return f"{os_map.get(system, system)}-{arch_map.get(machine, machine)}"

    def get_download_url(self, identifier: str) -> str:
        base = self.config.download_base_url.rstrip("/")
        return f"{base}/v{identifier}/electron-v{identifier}-{self.get_platform_suffix()}.zip"

    def binary_path(self, identifier: str) -> Path:
        return self.binaries_dir / identifier / "dist"

    def is_present(self, identifier: str) -> bool:
        return self.binary_path(identifier).is_dir()

    async def setup(self, identifier: str) -> None:
        """Download and extract ``identifier`` unless it is already present.

        Concurrent calls for the same version wait on the same download.
        """
        if self.is_present(identifier):
            logger.info("Binary %s already present", identifier)
            return

        task = self._pending.get(identifier)
        if task is None:
            task = asyncio.ensure_future(self._download(identifier))
            self._pending[identifier] = task
            task.add_done_callback(lambda _: self._pending.pop(identifier, None))
        await asyncio.shield(task)

    async def _download(self, identifier: str) -> None:
        url = self.get_download_url(identifier)
        version_dir = self.binaries_dir / identifier
        archive_path = version_dir / f"electron-v{identifier}.zip"

        logger.info("Downloading %s from %s", identifier, url)
        async with self.semaphore:
            try:
                async with AsyncHTTPClient(timeout=DOWNLOAD_TIMEOUT) as client:
                    await client.download(url, archive_path, self.progress_callback)
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                archive_path.unlink(missing_ok=True)
                raise ProvisioningError(identifier, f"download failed: {e}") from e

        await asyncio.get_running_loop().run_in_executor(None, self._extract, identifier, archive_path)
        logger.info("Binary %s ready at %s", identifier, self.binary_path(identifier))

    def _extract(self, identifier: str, archive_path: Path) -> None:
        dist_dir = self.binary_path(identifier)
        staging_dir = dist_dir.with_name("dist.partial")
        shutil.rmtree(staging_dir, ignore_errors=True)
        try:
            with zipfile.ZipFile(archive_path, 'r') as zip_ref:
                zip_ref.extractall(staging_dir)
            staging_dir.rename(dist_dir)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, EOFError, OSError) as e:
            # Unsupported compression, encrypted members and truncated streams included
            shutil.rmtree(staging_dir, ignore_errors=True)
            raise ProvisioningError(identifier, f"extraction failed: {e}") from e
        finally:
            archive_path.unlink(missing_ok=True)

    async def get_downloaded_versions(self) -> Set[str]:
        """Scan the binaries directory for extracted versions."""
        if not self.binaries_dir.exists():
            return set()

        downloaded = set()
        for item in self.binaries_dir.iterdir():
            if not (item / "dist").is_dir():
                continue
            try:
                downloaded.add(normalize_version(item.name))
            except InvalidVersionError:
                logger.debug("Ignoring non-version directory %s", item)
        return downloaded
