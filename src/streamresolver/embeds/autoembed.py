"""
AutoEmbed embeds, one per audio language.
The payload is either the playlist itself or the player page holding it.
"""
from __future__ import annotations
import re
from ..base import Embed, EmbedResult, Stream
from ..context import EmbedContext
from ..errors import NotFoundError
from ..registry import register_embed

FILE_RE = re.compile(r'file:\s*["\']([^"\']+\.m3u8[^"\']*)["\']')
SRC_RE = re.compile(r'source:\s*["\']([^"\']+\.m3u8[^"\']*)["\']')
M3U8_RE = re.compile(r'(https?://[^\s"\']+\.m3u8[^\s"\']*)')


class _AutoEmbedLanguage(Embed):
    language = ""

    async def scrape(self, ctx: EmbedContext) -> EmbedResult:
        playlist = ctx.url if ".m3u8" in ctx.url.split("?")[0] else None
        if playlist is None:
            html = await ctx.proxied_fetcher.get(ctx.url, headers={"Referer": "https://autoembed.cc/"})
            # Try multiple patterns to find the HLS URL
            for pattern in (FILE_RE, SRC_RE, M3U8_RE):
                m = pattern.search(html)
                if m:
                    playlist = m.group(1)
                    break
        if not playlist:
            raise NotFoundError(f"AutoEmbed {self.language}: no HLS URL found")
        return EmbedResult(streams=[
            Stream(stream_type="hls", playlist=playlist)
        ])


@register_embed
class AutoEmbedEnglish(_AutoEmbedLanguage):
    id = "autoembed-english"
    name = "English"
    rank = 14
    language = "English"


@register_embed
class AutoEmbedHindi(_AutoEmbedLanguage):
    id = "autoembed-hindi"
    name = "Hindi"
    rank = 13
    language = "Hindi"


@register_embed
class AutoEmbedBengali(_AutoEmbedLanguage):
    id = "autoembed-bengali"
    name = "Bengali"
    rank = 12
    language = "Bengali"


@register_embed
class AutoEmbedTamil(_AutoEmbedLanguage):
    id = "autoembed-tamil"
    name = "Tamil"
    rank = 11
    language = "Tamil"


@register_embed
class AutoEmbedTelugu(_AutoEmbedLanguage):
    id = "autoembed-telugu"
    name = "Telugu"
    rank = 10
    language = "Telugu"
