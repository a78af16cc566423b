"""
AutoEmbed — API hands back a video source URL per language; each language
is resolved by its own autoembed-<language> embed.
"""
from __future__ import annotations
from ..base import EmbedRef, Source, SourceResult
from ..context import ScrapeContext
from ..errors import NotFoundError
from ..registry import register_source
from ..targets import CORS_ALLOWED

BASE = "https://autoembed.pro"


@register_source
class AutoEmbed(Source):
    id = "autoembed"
    name = "AutoEmbed"
    rank = 550
    flags = (CORS_ALLOWED,)

    async def scrape(self, ctx: ScrapeContext) -> SourceResult:
        media = ctx.media
        kind = "tv" if media.is_show else "movie"
        url = f"{BASE}/embed/{kind}/{media.tmdb_id}"
        if media.is_show:
            url = f"{url}/{media.season}/{media.episode}"

        data = await ctx.proxied_fetcher.fetch(url, headers={"Referer": BASE})
        if not isinstance(data, dict) or not data.get("videoSource"):
            raise NotFoundError("AutoEmbed: no video source")
        ctx.progress(50)

        embeds = [EmbedRef(embed_id="autoembed-english", url=data["videoSource"])]
        # Dubbed tracks, when the API lists them
        for lang, src in (data.get("languages") or {}).items():
            embed_id = f"autoembed-{lang.lower()}"
            if src and embed_id != "autoembed-english":
                embeds.append(EmbedRef(embed_id=embed_id, url=src))
        ctx.progress(90)
        return SourceResult(embeds=embeds)
