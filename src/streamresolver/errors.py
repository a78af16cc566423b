"""
Error taxonomy.

Resolvers raise ``NotFoundError`` when a site simply does not have the title.
Anything else they raise is treated as a transient fault by the runner.
``ExhaustedError`` is the only error ``ProviderEngine.resolve`` lets out.
"""
from __future__ import annotations


class ProviderError(Exception):
    """Base class for streamresolver errors."""


class NotFoundError(ProviderError):
    """The resolver looked and found nothing for this media."""


class ExhaustedError(ProviderError):
    """Every runnable candidate was tried and none produced a valid stream."""

    def __init__(self, media, tried: list[str]):
        self.media = media
        self.tried = list(tried)
        super().__init__(
            f"No playable stream for {media.media_type} {media.tmdb_id} "
            f"({len(self.tried)} sources tried)"
        )


class UnknownResolverError(ProviderError, LookupError):
    """No registered, enabled and compatible resolver has this id."""


class DuplicateResolverError(ProviderError, ValueError):
    """A resolver id was registered twice."""


class ConfigError(ProviderError, ValueError):
    """Invalid configuration value."""
