"""Editor type definitions for runtime versions."""

from .fetcher import TypeDefinitionFetcher, TypeDefinitionService

__all__ = ["TypeDefinitionFetcher", "TypeDefinitionService"]
