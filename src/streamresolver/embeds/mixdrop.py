"""MixDrop — packed JS → MDCore.wurl → direct MP4."""
from __future__ import annotations
import re
from ..base import Embed, EmbedResult, Stream, StreamFile
from ..context import EmbedContext
from ..errors import NotFoundError
from ..registry import register_embed
from ..targets import CORS_ALLOWED
from .. import unpacker

BASE = "https://mixdrop.ag"
LINK_RE = re.compile(r'MDCore\.wurl="(.*?)";')


@register_embed
class MixDrop(Embed):
    id = "mixdrop"
    name = "MixDrop"
    rank = 198

    async def scrape(self, ctx: EmbedContext) -> EmbedResult:
        embed_id = ctx.url.rstrip("/").split("/")[-1]
        html = await ctx.proxied_fetcher.get(f"{BASE}/e/{embed_id}")
        if not unpacker.detect(html):
            raise NotFoundError("MixDrop packed JS not found")
        ctx.progress(50)
        m = LINK_RE.search(unpacker.unpack(html))
        if not m:
            raise NotFoundError("MixDrop wurl not found")
        stream_url = m.group(1)
        if not stream_url.startswith("http"):
            stream_url = f"https:{stream_url}"
        return EmbedResult(streams=[
            Stream(stream_type="file",
                   qualities={"unknown": StreamFile(url=stream_url, type="mp4")},
                   flags=(CORS_ALLOWED,),
                   headers={"Referer": f"{BASE}/"})
        ])
