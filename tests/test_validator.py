"""Tests for stream liveness probes."""
from __future__ import annotations

import aiohttp
import pytest

from streamresolver.base import Stream
from streamresolver.context import RunContext
from streamresolver.validator import StreamValidator
from aiohttp import web

from streamresolver.fetcher import Fetcher
from stubs import FakeFetcher, file_stream, hls, serve

URL_720 = "https://files.example/720.mp4"
URL_1080 = "https://files.example/1080.mp4"
URL_4K = "https://files.example/4k.mp4"


def run_with(fetcher: FakeFetcher) -> RunContext:
    return RunContext(fetcher=fetcher, proxied_fetcher=fetcher, environment=frozenset())


class TestFileStreams:
    @pytest.mark.asyncio()
    async def test_dead_quality_removed(self):
        fetcher = FakeFetcher(statuses={URL_720: 200, URL_1080: 404, URL_4K: 206})
        stream = file_stream({"720": URL_720, "1080": URL_1080, "4k": URL_4K})

        result = await StreamValidator().validate(stream, run_with(fetcher), "src")

        assert set(result.qualities) == {"720", "4k"}
        # The candidate handed in keeps its own mapping
        assert set(stream.qualities) == {"720", "1080", "4k"}

    @pytest.mark.asyncio()
    async def test_all_dead_is_absent(self):
        fetcher = FakeFetcher(default_status=500)
        stream = file_stream({"720": URL_720, "1080": URL_1080})

        assert await StreamValidator().validate(stream, run_with(fetcher), "src") is None

    @pytest.mark.asyncio()
    async def test_probes_are_ranged_gets_with_stream_headers(self):
        fetcher = FakeFetcher()
        stream = file_stream({"720": URL_720}, headers={"Referer": "https://site.example/"},
                             preferred_headers={"Origin": "https://site.example"})

        await StreamValidator().validate(stream, run_with(fetcher), "src")

        method, url, headers = fetcher.calls[0]
        assert (method, url) == ("GET", URL_720)
        assert headers == {
            "Referer": "https://site.example/",
            "Origin": "https://site.example",
            "Range": "bytes=0-1",
        }

    @pytest.mark.asyncio()
    async def test_probe_error_counts_as_dead(self):
        fetcher = FakeFetcher(statuses={URL_720: aiohttp.ClientConnectionError("reset")})
        stream = file_stream({"720": URL_720, "1080": URL_1080})

        result = await StreamValidator().validate(stream, run_with(fetcher), "src")

        assert list(result.qualities) == ["1080"]

    @pytest.mark.asyncio()
    async def test_redirect_status_is_alive(self):
        fetcher = FakeFetcher(statuses={URL_720: 302, URL_1080: 400})
        stream = file_stream({"720": URL_720, "1080": URL_1080})

        result = await StreamValidator().validate(stream, run_with(fetcher), "src")

        assert list(result.qualities) == ["720"]


class TestHlsStreams:
    @pytest.mark.asyncio()
    async def test_inline_playlist_accepted_without_probe(self):
        fetcher = FakeFetcher(default_status=500)
        stream = hls("data:application/vnd.apple.mpegurl;base64,I0VYVE0zVQ==")

        result = await StreamValidator().validate(stream, run_with(fetcher), "src")

        assert result is stream
        assert fetcher.calls == []

    @pytest.mark.asyncio()
    @pytest.mark.parametrize(("status", "alive"), [(200, True), (399, True), (404, False), (199, False)])
    async def test_playlist_status(self, status, alive):
        fetcher = FakeFetcher(default_status=status)
        stream = hls(headers={"Referer": "https://site.example/"})

        result = await StreamValidator().validate(stream, run_with(fetcher), "src")

        assert (result is not None) is alive
        assert fetcher.calls[0][2] == {"Referer": "https://site.example/"}

    @pytest.mark.asyncio()
    async def test_empty_playlist_is_absent(self):
        fetcher = FakeFetcher()
        assert await StreamValidator().validate(hls(""), run_with(fetcher), "src") is None


class TestSkipList:
    @pytest.mark.asyncio()
    async def test_skipped_resolver_is_not_probed(self):
        fetcher = FakeFetcher(default_status=404)
        stream = file_stream({"720": URL_720})

        result = await StreamValidator(skip_ids={"signed"}).validate(stream, run_with(fetcher), "signed")

        assert result is stream
        assert fetcher.calls == []

    @pytest.mark.asyncio()
    async def test_unknown_stream_type_is_absent(self):
        fetcher = FakeFetcher()
        stream = Stream(stream_type="dash", playlist="https://x.example/a.mpd")
        assert await StreamValidator().validate(stream, run_with(fetcher), "src") is None


class TestAgainstHttpServer:
    @pytest.mark.asyncio()
    async def test_binary_media_probed_by_status_only(self):
        ranges = []

        async def partial(request):
            ranges.append(request.headers.get("Range"))
            return web.Response(status=206, body=b"\xff\xfe", content_type="video/mp4")

        async def ignores_range(request):
            return web.Response(status=200, body=b"\xff\xfe\x00\x81" * 65536, content_type="video/mp4")

        async def gone(request):
            return web.Response(status=404, text="gone")

        fetcher = Fetcher(timeout=5)
        try:
            async with serve({"/720.mp4": partial, "/1080.mp4": ignores_range, "/4k.mp4": gone}) as server:
                stream = file_stream({
                    "720": str(server.make_url("/720.mp4")),
                    "1080": str(server.make_url("/1080.mp4")),
                    "4k": str(server.make_url("/4k.mp4")),
                })
                result = await StreamValidator().validate(stream, run_with(fetcher), "src")
        finally:
            await fetcher.close()

        assert list(result.qualities) == ["720", "1080"]
        assert ranges == ["bytes=0-1"]

    @pytest.mark.asyncio()
    async def test_playlist_probe_against_server(self):
        async def playlist(request):
            return web.Response(text="#EXTM3U\n", content_type="application/vnd.apple.mpegurl")

        fetcher = Fetcher(timeout=5)
        try:
            async with serve({"/master.m3u8": playlist}) as server:
                alive = await StreamValidator().validate(
                    hls(str(server.make_url("/master.m3u8"))), run_with(fetcher), "src")
                dead = await StreamValidator().validate(
                    hls(str(server.make_url("/missing.m3u8"))), run_with(fetcher), "src")
        finally:
            await fetcher.close()

        assert alive is not None
        assert dead is None
