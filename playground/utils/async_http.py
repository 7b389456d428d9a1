"""Async HTTP client utilities."""

from pathlib import Path
from typing import Any, Callable, Dict, Optional

import aiofiles
import aiohttp

CHUNK_SIZE = 64 * 1024


class AsyncHTTPClient:
    """Reusable async HTTP client."""

    def __init__(self, headers: Optional[Dict[str, str]] = None,
                 timeout: Optional[aiohttp.ClientTimeout] = None):
        self.default_headers = headers or {}
        self.timeout = timeout or aiohttp.ClientTimeout(total=300)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(headers=self.default_headers, timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()
            self.session = None

    async def get_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """GET request returning decoded JSON."""
        async with self.session.get(url, headers=headers) as resp:
            resp.raise_for_status()
            return await resp.json()

    async def get_text(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        """GET request returning the body as text."""
        async with self.session.get(url, headers=headers) as resp:
            resp.raise_for_status()
            return await resp.text()

    async def download(self, url: str, dest: Path,
                       progress_callback: Optional[Callable] = None) -> Path:
        """Stream ``url`` into ``dest``."""
        async with self.session.get(url) as resp:
            resp.raise_for_status()
            total_size = int(resp.headers.get('Content-Length', 0))
            downloaded = 0

            dest.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(dest, 'wb') as f:
                async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                    await f.write(chunk)
                    downloaded += len(chunk)
                    if progress_callback:
                        await progress_callback(dest.name, downloaded, total_size)
        return dest
