"""Videasy — player page scraped for its HLS playlist."""
from __future__ import annotations
from ..base import Source, SourceResult, Stream
from ..context import ScrapeContext
from ..registry import register_source
from ..targets import CORS_ALLOWED
from .aether_common import find_m3u8

BASE = "https://videasy.net"
PLAYER = "https://player.videasy.net"
STREAM_HEADERS = {"Referer": f"{BASE}/", "Origin": BASE}


@register_source
class Videasy(Source):
    id = "videasy"
    name = "Videasy"
    rank = 820
    flags = (CORS_ALLOWED,)

    async def scrape(self, ctx: ScrapeContext) -> SourceResult:
        media = ctx.media
        if media.is_show:
            path = f"tv/{media.tmdb_id}/{media.season}/{media.episode}"
        else:
            path = f"movie/{media.tmdb_id}"

        playlist = await find_m3u8(ctx.proxied_fetcher, f"{PLAYER}/{path}",
                                   click=".play-icon-main", headers={"Referer": BASE})
        ctx.progress(90)
        return SourceResult(streams=[
            Stream(stream_type="hls", playlist=playlist, flags=(CORS_ALLOWED,),
                   headers=STREAM_HEADERS)
        ])
