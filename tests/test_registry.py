"""Tests for resolver registration and the built-in catalog."""
from __future__ import annotations

import pytest

from streamresolver.base import Embed, Source
from streamresolver.catalog import load_builtin
from streamresolver.errors import DuplicateResolverError
from streamresolver.registry import Registry
from stubs import StubEmbed, StubSource


def test_lists_keep_registration_order(registry):
    for sid, rank in [("b", 1), ("a", 100), ("c", 50)]:
        registry.add_source(StubSource(sid, rank))
    assert [s.id for s in registry.list_sources()] == ["b", "a", "c"]


def test_listing_is_a_copy(registry):
    registry.add_embed(StubEmbed("e", 1))
    registry.list_embeds().clear()
    assert [e.id for e in registry.list_embeds()] == ["e"]


def test_duplicate_ids_rejected(registry):
    registry.add_source(StubSource("dup", 1))
    with pytest.raises(DuplicateResolverError):
        registry.add_source(StubSource("dup", 2))
    # Sources and embeds have separate id spaces
    registry.add_embed(StubEmbed("dup", 1))


def test_decorators_register_instances():
    registry = Registry()

    @registry.register_source
    class MySource(Source):
        id = "mine"
        name = "Mine"
        rank = 3

    @registry.register_embed
    class MyEmbed(Embed):
        id = "my-embed"
        skip_validation = True

    assert isinstance(registry.get_source("mine"), MySource)
    assert isinstance(registry.get_embed("my-embed"), MyEmbed)
    assert registry.get_source("my-embed") is None
    assert registry.skip_validation_ids() == {"my-embed"}


class TestBuiltinCatalog:
    def test_ids_unique_and_loaded_once(self):
        registry = load_builtin()
        assert load_builtin() is registry
        source_ids = [s.id for s in registry.list_sources()]
        embed_ids = [e.id for e in registry.list_embeds()]
        assert len(source_ids) == len(set(source_ids))
        assert len(embed_ids) == len(set(embed_ids))
        assert {"vidlink", "autoembed", "vidify-source", "sezonlukdizi"} <= set(source_ids)
        assert {"autoembed-english", "vidify-alfa", "vidify-juliett", "mixdrop",
                "streamtape", "vidmoly"} <= set(embed_ids)

    def test_embed_references_point_at_registered_embeds(self):
        registry = load_builtin()
        assert registry.get_embed("vidmoly").skip_validation
        assert "vidmoly" in registry.skip_validation_ids()

    def test_show_only_source(self):
        registry = load_builtin()
        assert registry.get_source("sezonlukdizi").media_types == ("show",)
        assert registry.get_source("vidlink").media_types == ("movie", "show")

    def test_vidify_server_ranks(self):
        registry = load_builtin()
        assert registry.get_embed("vidify-alfa").rank == 230
        assert registry.get_embed("vidify-juliett").rank == 221
