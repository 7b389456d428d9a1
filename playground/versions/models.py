"""Data models for runtime versions."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class DownloadState(str, Enum):
    UNKNOWN = "unknown"
    DOWNLOADING = "downloading"
    READY = "ready"
    FAILED = "failed"


class ReleaseInfo(BaseModel):
    """One entry of the known-versions list, as published by the releases API."""
    model_config = ConfigDict(frozen=True, extra="allow")

    tag_name: str
    name: Optional[str] = None
    prerelease: bool = False
    published_at: Optional[datetime] = None
    html_url: Optional[str] = None


class VersionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    identifier: str
    release: ReleaseInfo
    state: DownloadState = DownloadState.UNKNOWN

    def with_state(self, state: DownloadState) -> "VersionRecord":
        """Return a copy of this record in ``state``."""
        return self.model_copy(update={"state": state})
