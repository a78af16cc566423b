"""Film Ekseni (Turkish) — IMDb search, then the page's Vidmoly iframe."""
from __future__ import annotations
import json
import re
from ..base import EmbedRef, Source, SourceResult
from ..context import ScrapeContext
from ..errors import NotFoundError
from ..registry import register_source

BASE = "https://filmekseni.net"
IFRAME_RE = re.compile(r'class="card-video".*?<iframe[^>]+data-src="([^"]+)"', re.DOTALL)

SEARCH_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "X-Requested-With": "XMLHttpRequest",
    "Referer": BASE,
    "Origin": BASE,
    "Accept": "application/json, text/javascript, */*; q=0.01",
}


@register_source
class FilmEkseni(Source):
    id = "filmekseni"
    name = "Film Ekseni (Turkish)"
    rank = 181

    async def scrape(self, ctx: ScrapeContext) -> SourceResult:
        if not ctx.media.imdb_id:
            raise NotFoundError("Film Ekseni: IMDb id required")

        raw = await ctx.proxied_fetcher.fetch("/search/", method="POST", base_url=BASE,
                                              headers=SEARCH_HEADERS,
                                              body={"query": ctx.media.imdb_id})
        found = json.loads(raw) if isinstance(raw, str) else raw
        results = (found or {}).get("result") or []
        if not results:
            raise NotFoundError("Film Ekseni: no search results")
        ctx.progress(40)

        first = results[0]
        page = await ctx.proxied_fetcher.get(f"{BASE}/{first['slug_prefix']}{first['slug']}/1")
        m = IFRAME_RE.search(page)
        if not m:
            raise NotFoundError("Film Ekseni: no embed found")
        embed_url = m.group(1)
        if not embed_url.startswith("https:"):
            embed_url = f"https:{embed_url}"
        ctx.progress(90)
        return SourceResult(embeds=[EmbedRef(embed_id="vidmoly", url=embed_url)])
