"""
Per-run and per-attempt contexts handed to resolvers and the validator.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable

from .base import Media
from .events import EventChannel
from .fetcher import Fetcher


def _no_progress(percentage: float):
    pass


@dataclass
class RunContext:
    """Everything one resolution run shares. Never reused across runs."""
    fetcher: Fetcher
    proxied_fetcher: Fetcher
    environment: frozenset[str]
    events: EventChannel = field(default_factory=EventChannel)


@dataclass
class ScrapeContext:
    media: Media
    fetcher: Fetcher
    proxied_fetcher: Fetcher
    progress: Callable[[float], None] = _no_progress


@dataclass
class EmbedContext:
    url: str                          # opaque payload from the EmbedRef
    fetcher: Fetcher
    proxied_fetcher: Fetcher
    progress: Callable[[float], None] = _no_progress
