"""Application configuration."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, model_validator


RELEASES_URL = "https://api.github.com/repos/electron/electron/releases?per_page=100"
DOWNLOAD_URL = "https://github.com/electron/electron/releases/download"
TYPES_URL = "https://unpkg.com/electron"


class PlaygroundConfig(BaseModel):
    data_dir: Path = Path.home() / ".runtime-playground"
    log_dir: Path = Path.home() / ".cache" / "runtime-playground"
    binaries_dir: Optional[Path] = None
    types_dir: Optional[Path] = None
    releases_file: Optional[Path] = None
    releases_url: str = RELEASES_URL
    download_base_url: str = DOWNLOAD_URL
    types_base_url: str = TYPES_URL
    keyring_service: str = "runtime_playground"
    concurrent_downloads: int = 4

    @model_validator(mode="after")
    def _derive_paths(self) -> "PlaygroundConfig":
        # Unset directories follow data_dir
        if self.binaries_dir is None:
            self.binaries_dir = self.data_dir / "binaries"
        if self.types_dir is None:
            self.types_dir = self.data_dir / "types"
        if self.releases_file is None:
            self.releases_file = self.data_dir / "releases.json"
        return self

    @classmethod
    def from_env(cls, **overrides) -> "PlaygroundConfig":
        """Build a config from ``PLAYGROUND_*`` environment variables."""
        env_map = {
            "data_dir": "PLAYGROUND_DATA_DIR",
            "log_dir": "PLAYGROUND_LOG_DIR",
            "releases_url": "PLAYGROUND_RELEASES_URL",
            "download_base_url": "PLAYGROUND_DOWNLOAD_URL",
            "types_base_url": "PLAYGROUND_TYPES_URL",
        }
        values = {}
        for field_name, env_name in env_map.items():
            value = os.environ.get(env_name)
            if value:
                values[field_name] = value
        values.update(overrides)
        return cls(**values)
