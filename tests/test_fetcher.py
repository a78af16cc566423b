"""Tests for URL building, proxy request rewriting and response reading."""
from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest
from aiohttp import web

from streamresolver.fetcher import FetchResponse, Fetcher, ProxyFetcher, build_url
from stubs import serve


def test_build_url_joins_base_and_query():
    assert build_url("/embed/movie/603", base_url="https://a.example") == "https://a.example/embed/movie/603"
    assert build_url("https://a.example/s?x=1", query={"q": "a b"}) == "https://a.example/s?x=1&q=a+b"
    assert build_url("https://a.example/s") == "https://a.example/s"


def test_proxy_target_wraps_destination_and_headers():
    fetcher = ProxyFetcher("https://proxy.example/")
    url, headers = fetcher._target(
        "https://site.example/page?id=1",
        {"Referer": "https://site.example/", "Accept": "text/html", "Cookie": "a=1"},
    )
    parsed = urlparse(url)
    assert parsed.netloc == "proxy.example"
    assert parse_qs(parsed.query)["destination"] == ["https://site.example/page?id=1"]
    assert headers == {
        "X-Referer": "https://site.example/",
        "Accept": "text/html",
        "X-Cookie": "a=1",
    }


def test_response_ok_range():
    assert FetchResponse(status=206, final_url="u").ok
    assert FetchResponse(status=302, final_url="u").ok
    assert not FetchResponse(status=403, final_url="u").ok


@pytest.mark.asyncio()
async def test_full_reads_or_skips_body():
    async def video(request):
        return web.Response(status=206, body=b"\xff\xfe", content_type="video/mp4")

    async def api(request):
        return web.json_response({"ok": True})

    fetcher = Fetcher(timeout=5)
    try:
        async with serve({"/v.mp4": video, "/api": api}) as server:
            skipped = await fetcher.full(str(server.make_url("/v.mp4")), read_body=False)
            decoded = await fetcher.fetch("/api", base_url=str(server.make_url("/")))
    finally:
        await fetcher.close()

    assert skipped.status == 206
    assert skipped.body is None
    assert decoded == {"ok": True}
