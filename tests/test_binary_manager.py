"""Tests for the runtime binary manager."""

import asyncio
import io
import struct
import zipfile
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from playground.binary import BinaryManager
from playground.binary.manager import DOWNLOAD_TIMEOUT
from playground.config import PlaygroundConfig
from playground.errors import ProvisioningError
from playground.state import AppState
from playground.utils import AsyncHTTPClient
from playground.versions import DownloadState


@pytest.fixture
def config(tmp_path):
    return PlaygroundConfig(data_dir=tmp_path)


def mock_client(download):
    client_cls = MagicMock()
    client = client_cls.return_value.__aenter__.return_value
    client_cls.return_value.__aexit__.return_value = False
    client.download = AsyncMock(side_effect=download)
    return client_cls, client


async def write_archive(url, dest, progress_callback=None):
    dest.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(dest, "w") as archive:
        archive.writestr("electron", "binary")
        archive.writestr("version", "1.0.0")
    return dest


def test_download_url(config):
    manager = BinaryManager(config)

    with patch.object(BinaryManager, "get_platform_suffix", return_value="linux-x64"):
        url = manager.get_download_url("1.0.0")

    assert url == ("https://github.com/electron/electron/releases/download/"
                   "v1.0.0/electron-v1.0.0-linux-x64.zip")


@pytest.mark.asyncio
async def test_downloaded_versions_lists_extracted_dirs(config):
    manager = BinaryManager(config)
    (config.binaries_dir / "1.0.0" / "dist").mkdir(parents=True)
    (config.binaries_dir / "2.0.0").mkdir(parents=True)
    (config.binaries_dir / "scratch" / "dist").mkdir(parents=True)

    assert await manager.get_downloaded_versions() == {"1.0.0"}


@pytest.mark.asyncio
async def test_downloaded_versions_without_directory(config):
    assert await BinaryManager(config).get_downloaded_versions() == set()


@pytest.mark.asyncio
async def test_setup_downloads_and_extracts(config):
    client_cls, client = mock_client(write_archive)
    manager = BinaryManager(config)

    with patch("playground.binary.manager.AsyncHTTPClient", client_cls):
        await manager.setup("1.0.0")

    assert manager.is_present("1.0.0")
    assert (manager.binary_path("1.0.0") / "electron").read_text() == "binary"
    assert not list((config.binaries_dir / "1.0.0").glob("*.zip"))
    assert await manager.get_downloaded_versions() == {"1.0.0"}
    client.download.assert_awaited_once()


@pytest.mark.asyncio
async def test_setup_skips_present_binary(config):
    client_cls, client = mock_client(write_archive)
    (config.binaries_dir / "1.0.0" / "dist").mkdir(parents=True)

    with patch("playground.binary.manager.AsyncHTTPClient", client_cls):
        await BinaryManager(config).setup("1.0.0")

    client.download.assert_not_awaited()


@pytest.mark.asyncio
async def test_concurrent_setup_shares_download(config):
    release = asyncio.Event()

    async def slow_archive(url, dest, progress_callback=None):
        await release.wait()
        return await write_archive(url, dest)

    client_cls, client = mock_client(slow_archive)
    manager = BinaryManager(config)

    with patch("playground.binary.manager.AsyncHTTPClient", client_cls):
        first = asyncio.ensure_future(manager.setup("1.0.0"))
        second = asyncio.ensure_future(manager.setup("1.0.0"))
        await asyncio.sleep(0)
        release.set()
        await asyncio.gather(first, second)

    assert client.download.await_count == 1
    assert manager.is_present("1.0.0")


@pytest.mark.asyncio
async def test_download_failure_raises_provisioning_error(config):
    async def not_found(url, dest, progress_callback=None):
        raise aiohttp.ClientError("404")

    client_cls, _ = mock_client(not_found)
    manager = BinaryManager(config)

    with patch("playground.binary.manager.AsyncHTTPClient", client_cls):
        with pytest.raises(ProvisioningError) as excinfo:
            await manager.setup("1.0.0")

    assert excinfo.value.identifier == "1.0.0"
    assert not manager.is_present("1.0.0")


@pytest.mark.asyncio
async def test_corrupt_archive_raises_provisioning_error(config):
    async def corrupt(url, dest, progress_callback=None):
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(b"not a zip")
        return dest

    client_cls, _ = mock_client(corrupt)
    manager = BinaryManager(config)

    with patch("playground.binary.manager.AsyncHTTPClient", client_cls):
        with pytest.raises(ProvisioningError, match="extraction failed"):
            await manager.setup("1.0.0")

    assert not manager.is_present("1.0.0")
    assert await manager.get_downloaded_versions() == set()


def archive_with_compression(method):
    """A zip whose single member claims compression ``method``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("electron", "binary")
    data = bytearray(buffer.getvalue())
    struct.pack_into("<H", data, data.find(b"PK\x03\x04") + 8, method)
    struct.pack_into("<H", data, data.find(b"PK\x01\x02") + 10, method)
    return bytes(data)


@pytest.mark.asyncio
async def test_unsupported_compression_marks_version_failed(config, known_versions):
    async def unsupported(url, dest, progress_callback=None):
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(archive_with_compression(99))
        return dest

    client_cls, _ = mock_client(unsupported)
    state = AppState(known_versions, BinaryManager(config))

    with patch("playground.binary.manager.AsyncHTTPClient", client_cls):
        record = await state.switch_to("1.0.0")

    assert record.state is DownloadState.FAILED
    assert state.catalog.state_of("1.0.0") is DownloadState.FAILED
    assert not (config.binaries_dir / "1.0.0" / "dist").exists()


@pytest.mark.asyncio
async def test_download_uses_stall_timeout(config):
    client_cls, _ = mock_client(write_archive)

    with patch("playground.binary.manager.AsyncHTTPClient", client_cls):
        await BinaryManager(config).setup("1.0.0")

    client_cls.assert_called_once_with(timeout=DOWNLOAD_TIMEOUT)
    assert DOWNLOAD_TIMEOUT.total is None
    assert DOWNLOAD_TIMEOUT.sock_read == 60


@pytest.mark.asyncio
async def test_http_client_passes_timeout_to_session():
    timeout = aiohttp.ClientTimeout(total=None, sock_read=5)

    async with AsyncHTTPClient(timeout=timeout) as client:
        assert client.session.timeout is timeout
