"""Type definition fetcher for the editor."""

import asyncio
import logging
from pathlib import Path
from typing import Callable, List, Optional, Protocol

import aiofiles
import aiohttp

from ..config import PlaygroundConfig
from ..errors import TypeDefinitionError
from ..utils.async_http import AsyncHTTPClient

logger = logging.getLogger(__name__)

TypesListener = Callable[[str, str], None]


class TypeDefinitionService(Protocol):
    async def refresh(self, identifier: str) -> None:
        ...


class TypeDefinitionFetcher:
    """Loads ``electron.d.ts`` for a version and hands it to the editor."""

    def __init__(self, config: PlaygroundConfig):
        self.config = config
        self.types_dir = Path(config.types_dir)
        self._listeners: List[TypesListener] = []

    def register(self, listener: TypesListener) -> Callable[[], None]:
        """Call ``listener(identifier, definitions)`` whenever types are refreshed."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def get_types_url(self, identifier: str) -> str:
        return f"{self.config.types_base_url.rstrip('/')}@{identifier}/electron.d.ts"

    def cache_path(self, identifier: str) -> Path:
        return self.types_dir / f"{identifier}.d.ts"

    async def get_definitions(self, identifier: str) -> str:
        """Return cached definitions, fetching them on a cache miss."""
        cached = await self._read_cache(identifier)
        if cached is not None:
            return cached

        url = self.get_types_url(identifier)
        logger.info("Fetching type definitions for %s", identifier)
        try:
            async with AsyncHTTPClient() as client:
                definitions = await client.get_text(url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TypeDefinitionError(f"Could not fetch types for {identifier}: {e}") from e

        await self._write_cache(identifier, definitions)
        return definitions

    async def refresh(self, identifier: str) -> None:
        definitions = await self.get_definitions(identifier)
        for listener in list(self._listeners):
            listener(identifier, definitions)

    async def _read_cache(self, identifier: str) -> Optional[str]:
        path = self.cache_path(identifier)
        if not path.exists():
            return None
        async with aiofiles.open(path, 'r', encoding='utf-8') as f:
            return await f.read()

    async def _write_cache(self, identifier: str, definitions: str) -> None:
        path = self.cache_path(identifier)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, 'w', encoding='utf-8') as f:
                await f.write(definitions)
        except OSError as e:
            logger.warning("Could not cache type definitions for %s: %s", identifier, e)
