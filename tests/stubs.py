"""In-memory stand-ins for fetchers and resolvers."""
from __future__ import annotations

from contextlib import asynccontextmanager

from aiohttp import web
from aiohttp.test_utils import TestServer

from streamresolver.base import Embed, EmbedResult, Source, SourceResult, Stream, StreamFile
from streamresolver.fetcher import FetchResponse


class FakeFetcher:
    """Answers from fixed tables instead of the network.

    ``statuses`` maps URL -> status code (or an exception to raise) for
    ``full``; ``bodies`` maps URL -> body for ``get`` / ``fetch``.
    """

    def __init__(self, statuses=None, bodies=None, default_status=200):
        self.statuses = dict(statuses or {})
        self.bodies = dict(bodies or {})
        self.default_status = default_status
        self.calls = []

    async def full(self, url, *, method="GET", headers=None, **kwargs):
        self.calls.append((method, url, dict(headers or {})))
        status = self.statuses.get(url, self.default_status)
        if isinstance(status, Exception):
            raise status
        return FetchResponse(status=status, final_url=url, body=self.bodies.get(url))

    async def fetch(self, url, *, method="GET", headers=None, base_url=None, **kwargs):
        full = f"{base_url.rstrip('/')}{url}" if base_url else url
        self.calls.append((method, full, dict(headers or {})))
        body = self.bodies[full]
        if isinstance(body, Exception):
            raise body
        return body

    async def get(self, url, *, headers=None, **kwargs):
        return await self.fetch(url, headers=headers)

    async def close(self):
        pass

    @property
    def urls(self):
        return [url for _, url, _ in self.calls]


def hls(url="https://cdn.example/master.m3u8", **kwargs) -> Stream:
    return Stream(stream_type="hls", playlist=url, **kwargs)


def file_stream(qualities: dict, **kwargs) -> Stream:
    return Stream(
        stream_type="file",
        qualities={q: StreamFile(url=u) for q, u in qualities.items()},
        **kwargs,
    )


class StubSource(Source):
    def __init__(self, id, rank, result=None, error=None, *, flags=(), disabled=False,
                 media_types=("movie", "show"), log=None):
        self.id = id
        self.name = id.title()
        self.rank = rank
        self.result = result
        self.error = error
        self.flags = tuple(flags)
        self.disabled = disabled
        self.media_types = tuple(media_types)
        self.calls = 0
        self.log = log

    async def scrape(self, ctx):
        self.calls += 1
        if self.log is not None:
            self.log.append(self.id)
        if self.error is not None:
            raise self.error
        return self.result if self.result is not None else SourceResult()


class StubEmbed(Embed):
    def __init__(self, id, rank, streams=None, error=None, *, flags=(), disabled=False, log=None):
        self.id = id
        self.name = id.title()
        self.rank = rank
        self.streams = list(streams or [])
        self.error = error
        self.flags = tuple(flags)
        self.disabled = disabled
        self.payloads = []
        self.log = log

    async def scrape(self, ctx):
        self.payloads.append(ctx.url)
        if self.log is not None:
            self.log.append(self.id)
        if self.error is not None:
            raise self.error
        return EmbedResult(streams=list(self.streams))


@asynccontextmanager
async def serve(routes: dict):
    """Run a local aiohttp server; ``routes`` maps path -> handler."""
    app = web.Application()
    for path, handler in routes.items():
        app.router.add_get(path, handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()
