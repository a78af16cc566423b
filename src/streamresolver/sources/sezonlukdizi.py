"""SezonlukDizi (Turkish dubs) — shows only, resolves to its Vidmoly mirror."""
from __future__ import annotations
import json
import re
from urllib.parse import quote
from ..base import EmbedRef, Source, SourceResult
from ..context import ScrapeContext
from ..errors import NotFoundError
from ..registry import register_source
from ..targets import CORS_ALLOWED

BASE = "https://sezonlukdizi6.com"
CARD_RE = re.compile(r'<a[^>]+class="column"[^>]*>', re.IGNORECASE)
ATTR_RE = re.compile(r'(title|href)="([^"]*)"')
EPISODE_ID_RE = re.compile(r'id="dilsec"[^>]*data-dil="0"[^>]*data-id="([^"]+)"')
IFRAME_RE = re.compile(r'<iframe[^>]+src="([^"]+)"')
AJAX_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "X-Requested-With": "XMLHttpRequest",
}


def _normalize(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", " ", title.lower()).strip()


def _find_show_link(html: str, title: str) -> str | None:
    wanted = _normalize(title)
    for tag in CARD_RE.findall(html):
        attrs = dict(ATTR_RE.findall(tag))
        card_title = attrs.get("title", "").replace(" izle", "")
        if card_title and _normalize(card_title) == wanted:
            return attrs.get("href")
    return None


@register_source
class SezonlukDizi(Source):
    id = "sezonlukdizi"
    name = "SezonlukDizi (Turkish)"
    rank = 500
    flags = (CORS_ALLOWED,)
    media_types = ("show",)

    async def scrape_show(self, ctx: ScrapeContext) -> SourceResult:
        media = ctx.media
        ctx.progress(10)
        search = await ctx.proxied_fetcher.get(f"{BASE}/diziler.asp?adi={quote(media.title)}")
        link = _find_show_link(search, media.title)
        if not link:
            raise NotFoundError("SezonlukDizi: show not found")

        ctx.progress(30)
        slug = link.replace("/diziler/", "").replace(".html", "")
        page_url = f"{BASE}/{slug}/dublaj/{media.season}-sezon-{media.episode}-bolum.html"
        page = await ctx.proxied_fetcher.get(page_url)
        m = EPISODE_ID_RE.search(page)
        if not m:
            raise NotFoundError("SezonlukDizi: episode id not found")

        ctx.progress(60)
        headers = {**AJAX_HEADERS, "Referer": page_url}
        raw = await ctx.proxied_fetcher.fetch("/ajax/dataAlternatif22.asp", method="POST",
                                              base_url=BASE, headers=headers,
                                              body=f"bid={m.group(1)}&dil=0")
        alternatives = json.loads(raw) if isinstance(raw, str) else raw
        if not alternatives or alternatives.get("status") != "success":
            raise NotFoundError("SezonlukDizi: no alternatives")
        mirror = next((a for a in alternatives.get("data", [])
                       if "vidmoly" in a.get("baslik", "").lower()), None)
        if mirror is None:
            raise NotFoundError("SezonlukDizi: no Vidmoly mirror")

        embed_page = await ctx.proxied_fetcher.fetch("/ajax/dataEmbed22.asp", method="POST",
                                                     base_url=BASE, headers=headers,
                                                     body=f"id={mirror['id']}")
        iframe = IFRAME_RE.search(embed_page or "")
        if not iframe or "vidmoly" not in iframe.group(1):
            raise NotFoundError("SezonlukDizi: Vidmoly iframe missing")
        ctx.progress(90)
        return SourceResult(embeds=[EmbedRef(embed_id="vidmoly", url=f"https:{iframe.group(1)}")])
