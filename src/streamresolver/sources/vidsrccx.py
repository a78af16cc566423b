"""VidSrc.cx — embed page scraped for its HLS playlist."""
from __future__ import annotations
from ..base import Source, SourceResult, Stream
from ..context import ScrapeContext
from ..registry import register_source
from ..targets import CORS_ALLOWED
from .aether_common import find_m3u8

BASE = "https://vidsrc.cx"


@register_source
class VidSrcCx(Source):
    id = "vidsrccx"
    name = "VidSrc"
    rank = 175
    flags = (CORS_ALLOWED,)

    async def scrape_movie(self, ctx: ScrapeContext) -> SourceResult:
        return await self._scrape(ctx, f"/embed/movie/{ctx.media.tmdb_id}")

    async def scrape_show(self, ctx: ScrapeContext) -> SourceResult:
        m = ctx.media
        return await self._scrape(ctx, f"/embed/tv/{m.tmdb_id}/{m.season}/{m.episode}")

    async def _scrape(self, ctx: ScrapeContext, path: str) -> SourceResult:
        playlist = await find_m3u8(ctx.proxied_fetcher, f"{BASE}{path}")
        return SourceResult(streams=[
            Stream(stream_type="hls", playlist=playlist)
        ])
