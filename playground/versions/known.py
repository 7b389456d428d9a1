"""Sources for the list of known runtime versions."""

import json
import logging
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

import aiofiles
from pydantic import TypeAdapter, ValidationError

from ..config import PlaygroundConfig
from ..errors import PlaygroundError
from ..utils.async_http import AsyncHTTPClient
from .models import ReleaseInfo
from .normalize import is_valid_version

logger = logging.getLogger(__name__)

_RELEASE_LIST = TypeAdapter(List[ReleaseInfo])

# Shipped with the application so a first start works offline.
BUNDLED_RELEASES: List[ReleaseInfo] = [
    ReleaseInfo(tag_name="v2.0.0", name="electron v2.0.0"),
    ReleaseInfo(tag_name="v1.8.7", name="electron v1.8.7"),
    ReleaseInfo(tag_name="v1.7.15", name="electron v1.7.15"),
]


class KnownVersionsSource(Protocol):
    def get_known_versions(self) -> List[ReleaseInfo]:
        """Known releases, newest first."""
        ...


class StaticKnownVersions:
    def __init__(self, releases: Sequence[ReleaseInfo]):
        if not releases:
            raise PlaygroundError("At least one known version is required")
        self._releases = list(releases)

    def get_known_versions(self) -> List[ReleaseInfo]:
        return list(self._releases)


class FileKnownVersions:
    """Known versions cached on disk by :class:`ReleaseFetcher`."""

    def __init__(self, path: Path, fallback: Optional[Sequence[ReleaseInfo]] = None):
        self.path = Path(path)
        self.fallback = list(BUNDLED_RELEASES if fallback is None else fallback)

    def get_known_versions(self) -> List[ReleaseInfo]:
        releases = self._read_cache()
        if not releases:
            releases = self.fallback
        if not releases:
            raise PlaygroundError("At least one known version is required")
        return releases

    def _read_cache(self) -> List[ReleaseInfo]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                releases = _RELEASE_LIST.validate_python(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable release cache %s: %s", self.path, e)
            return []
        return [release for release in releases if is_valid_version(release.tag_name)]


class ReleaseFetcher:
    """Fetches the release list so the next start knows about new versions."""

    def __init__(self, config: PlaygroundConfig):
        self.config = config

    async def fetch_releases(self) -> List[ReleaseInfo]:
        """Fetch the releases list, dropping tags that are not versions."""
        async with AsyncHTTPClient({"Accept": "application/vnd.github+json"}) as client:
            data = await client.get_json(self.config.releases_url)

        releases = _RELEASE_LIST.validate_python(data)
        valid = [release for release in releases if is_valid_version(release.tag_name)]
        logger.info("Fetched %d releases (%d usable)", len(releases), len(valid))
        return valid

    async def refresh_cache(self, path: Optional[Path] = None) -> List[ReleaseInfo]:
        """Fetch releases and write them to the cache file."""
        path = Path(path or self.config.releases_file)
        releases = await self.fetch_releases()
        path.parent.mkdir(parents=True, exist_ok=True)

        payload = _RELEASE_LIST.dump_json(releases, indent=2)
        async with aiofiles.open(path, 'wb') as f:
            await f.write(payload)
        return releases
