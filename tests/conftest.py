"""Shared fixtures."""
from __future__ import annotations

import pytest

from streamresolver.base import Media
from streamresolver.config import Settings
from streamresolver.registry import Registry
from streamresolver.runner import ProviderEngine
from stubs import FakeFetcher


@pytest.fixture()
def registry() -> Registry:
    return Registry()


@pytest.fixture()
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture()
def engine(registry, fetcher) -> ProviderEngine:
    """Engine over an empty registry, with no network behind it."""
    return ProviderEngine(
        settings=Settings(),
        registry=registry,
        fetcher=fetcher,
        proxied_fetcher=fetcher,
    )


@pytest.fixture()
def movie() -> Media:
    return Media.movie("603", title="The Matrix", release_year=1999)


@pytest.fixture()
def episode() -> Media:
    return Media.show("1396", season=1, episode=2, title="Breaking Bad")
