"""Version management module."""

from .catalog import VersionCatalog
from .known import FileKnownVersions, KnownVersionsSource, ReleaseFetcher, StaticKnownVersions
from .models import DownloadState, ReleaseInfo, VersionRecord
from .normalize import is_valid_version, normalize_version

__all__ = [
    "VersionCatalog",
    "FileKnownVersions",
    "KnownVersionsSource",
    "ReleaseFetcher",
    "StaticKnownVersions",
    "DownloadState",
    "ReleaseInfo",
    "VersionRecord",
    "is_valid_version",
    "normalize_version",
]
