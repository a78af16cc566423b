"""Vidify — one embed per Vidify server, all fed the same media query."""
from __future__ import annotations
import json
from ..base import EmbedRef, Source, SourceResult
from ..context import ScrapeContext
from ..registry import register_source

SERVERS = ("alfa", "bravo", "charlie", "delta", "echo",
           "foxtrot", "golf", "hotel", "india", "juliett")


@register_source
class Vidify(Source):
    id = "vidify-source"
    name = "Vidify"
    rank = 155

    async def scrape(self, ctx: ScrapeContext) -> SourceResult:
        media = ctx.media
        query = {"type": media.media_type, "tmdbId": media.tmdb_id}
        if media.is_show:
            query["season"] = media.season
            query["episode"] = media.episode
        payload = json.dumps(query)
        return SourceResult(embeds=[
            EmbedRef(embed_id=f"vidify-{server}", url=payload) for server in SERVERS
        ])
