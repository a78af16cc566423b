"""VidLink — reliable HLS source via vidlink.pro API."""
from __future__ import annotations
import json
import logging
from ..base import Caption, Source, SourceResult, Stream
from ..context import ScrapeContext
from ..errors import NotFoundError
from ..registry import register_source
from ..targets import CORS_ALLOWED

log = logging.getLogger("streamresolver.sources.vidlink")

BASE = "https://vidlink.pro"
HEADERS = {"Referer": f"{BASE}/", "Origin": BASE}


def _stream_url(data: dict) -> str | None:
    source = data.get("source") or data
    if isinstance(source, str):
        return source
    url = source.get("url") or source.get("file") or source.get("source")
    if url:
        return url
    url = data.get("url") or data.get("file") or data.get("stream")
    if url:
        return url
    for s in data.get("sources") or []:
        if isinstance(s, dict) and s.get("file"):
            return s["file"]
        if isinstance(s, str):
            return s
    return None


def _captions(data: dict) -> list[Caption]:
    captions = []
    for sub in data.get("subtitles") or data.get("tracks") or data.get("captions") or []:
        if not isinstance(sub, dict):
            continue
        if sub.get("kind", "captions") not in ("captions", "subtitles", ""):
            continue
        url = sub.get("file") or sub.get("url") or sub.get("src")
        if not url:
            continue
        label = sub.get("label") or sub.get("language") or ""
        lang = sub.get("lang") or sub.get("srclang") or (label[:2].lower() if label else "en")
        captions.append(Caption(url=url, lang=lang, format="vtt" if ".vtt" in url else "srt"))
    return captions


@register_source
class VidLink(Source):
    id = "vidlink"
    name = "VidLink"
    rank = 350
    flags = (CORS_ALLOWED,)

    async def scrape(self, ctx: ScrapeContext) -> SourceResult:
        media = ctx.media
        if media.is_show:
            url = f"{BASE}/api/tv/{media.tmdb_id}/{media.season}/{media.episode}"
        else:
            url = f"{BASE}/api/movie/{media.tmdb_id}"

        raw = await ctx.fetcher.fetch(url, headers=HEADERS)
        data = json.loads(raw) if isinstance(raw, str) else raw
        if not data:
            raise NotFoundError("VidLink: empty response")
        ctx.progress(50)

        stream_url = _stream_url(data)
        if not stream_url:
            raise NotFoundError("VidLink: no stream URL found")
        captions = _captions(data)
        log.debug(f"VidLink: {len(captions)} caption tracks")

        return SourceResult(streams=[
            Stream(stream_type="hls", playlist=stream_url, captions=captions,
                   flags=(CORS_ALLOWED,), headers=HEADERS)
        ])
