"""
Resolver registry.

Resolvers register themselves with a class decorator; the registry keeps them
in order of registration, which is the rank tiebreak.

    @register_source
    class MySite(Source):
        id = "mysite"
        ...
"""
from __future__ import annotations
from typing import Optional

from .base import Embed, Source
from .errors import DuplicateResolverError


class Registry:
    def __init__(self):
        self._sources: list[Source] = []
        self._embeds: list[Embed] = []

    def add_source(self, source: Source) -> Source:
        if self.get_source(source.id) is not None:
            raise DuplicateResolverError(f"Duplicate source id: {source.id}")
        self._sources.append(source)
        return source

    def add_embed(self, embed: Embed) -> Embed:
        if self.get_embed(embed.id) is not None:
            raise DuplicateResolverError(f"Duplicate embed id: {embed.id}")
        self._embeds.append(embed)
        return embed

    def register_source(self, scraper):
        """Decorator to register a source scraper class."""
        self.add_source(scraper())
        return scraper

    def register_embed(self, scraper):
        """Decorator to register an embed scraper class."""
        self.add_embed(scraper())
        return scraper

    def list_sources(self) -> list[Source]:
        return list(self._sources)

    def list_embeds(self) -> list[Embed]:
        return list(self._embeds)

    def get_source(self, source_id: str) -> Optional[Source]:
        return next((s for s in self._sources if s.id == source_id), None)

    def get_embed(self, embed_id: str) -> Optional[Embed]:
        return next((e for e in self._embeds if e.id == embed_id), None)

    def skip_validation_ids(self) -> frozenset[str]:
        return frozenset(
            r.id for r in [*self._sources, *self._embeds] if r.skip_validation
        )


# Global registry, populated when source/embed modules are imported
default_registry = Registry()


def register_source(scraper):
    return default_registry.register_source(scraper)


def register_embed(scraper):
    return default_registry.register_embed(scraper)
