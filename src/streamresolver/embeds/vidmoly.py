"""Vidmoly — HLS playlist inlined in the player setup."""
from __future__ import annotations
import re
from ..base import Embed, EmbedResult, Stream
from ..context import EmbedContext
from ..errors import NotFoundError
from ..registry import register_embed
from ..targets import CORS_ALLOWED

PLAYLIST_RE = re.compile(r'sources:\s*\[\{file:"([^"]+\.m3u8[^"]*)"\}\]')


@register_embed
class Vidmoly(Embed):
    id = "vidmoly"
    name = "Vidmoly"
    rank = 40
    skip_validation = True          # playlist URLs are signed for one viewer

    async def scrape(self, ctx: EmbedContext) -> EmbedResult:
        page = await ctx.proxied_fetcher.get(ctx.url)
        m = PLAYLIST_RE.search(page)
        if not m:
            raise NotFoundError("Vidmoly: no stream found")
        return EmbedResult(streams=[
            Stream(stream_type="hls", playlist=m.group(1), flags=(CORS_ALLOWED,),
                   headers={"Referer": "https://vidmoly.to/"})
        ])
