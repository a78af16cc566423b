"""Tests for capability filtering and candidate ordering."""
from __future__ import annotations

from streamresolver.compat import is_compatible, is_runnable, playable_streams, rank_candidates
from streamresolver.targets import CF_BLOCKED, CORS_ALLOWED, IP_LOCKED, Target, make_environment
from stubs import StubSource, file_stream, hls


def test_no_flags_always_compatible():
    assert is_compatible((), frozenset())
    assert is_compatible([], {CORS_ALLOWED})


def test_every_flag_must_be_satisfied():
    assert is_compatible([CORS_ALLOWED], {CORS_ALLOWED, IP_LOCKED})
    assert not is_compatible([CORS_ALLOWED, IP_LOCKED], {CORS_ALLOWED})


def test_disabled_never_runnable():
    assert not is_runnable(StubSource("s", 1, disabled=True), {CORS_ALLOWED, IP_LOCKED})
    assert is_runnable(StubSource("s", 1), frozenset())


def test_rank_candidates_is_non_increasing_and_stable():
    sources = [StubSource(f"s{i}", rank) for i, rank in enumerate([5, 9, 5, 1, 9, 5])]
    ranked = rank_candidates(sources, frozenset())
    assert [s.rank for s in ranked] == [9, 9, 5, 5, 5, 1]
    assert [s.id for s in ranked] == ["s1", "s4", "s0", "s2", "s5", "s3"]


def test_rank_candidates_filters_before_ranking():
    sources = [
        StubSource("cors", 100, flags=[CORS_ALLOWED]),
        StubSource("off", 90, disabled=True),
        StubSource("ok", 1),
    ]
    assert [s.id for s in rank_candidates(sources, frozenset())] == ["ok"]


def test_explicit_order_first_then_rank():
    sources = [StubSource("a", 3), StubSource("b", 2), StubSource("c", 1), StubSource("d", 0)]
    ranked = rank_candidates(sources, frozenset(), order=["d", "b"])
    assert [s.id for s in ranked] == ["d", "b", "a", "c"]


def test_playable_streams_drops_absent_and_incompatible():
    streams = [
        hls(""),
        file_stream({}),
        hls("https://a.example/x.m3u8", flags=(IP_LOCKED,)),
        file_stream({"720": "https://a.example/x.mp4"}),
    ]
    assert playable_streams(streams, frozenset()) == [streams[3]]
    assert playable_streams(streams, {IP_LOCKED}) == streams[2:]


class TestTargets:
    def test_native_with_consistent_ip(self):
        assert make_environment(Target.NATIVE) == {CORS_ALLOWED, IP_LOCKED}

    def test_browser_without_consistent_ip(self):
        assert make_environment("browser", consistent_ip_for_requests=False) == frozenset()

    def test_extension(self):
        env = make_environment(Target.BROWSER_EXTENSION, consistent_ip_for_requests=False)
        assert env == {CORS_ALLOWED}

    def test_cloudflare_blocked_never_satisfied(self):
        for target in Target:
            assert CF_BLOCKED not in make_environment(target)
