"""
Vidify servers. Every request needs the bearer token baked into the
player's JS bundle; each server fetches it once and keeps it for an
hour.
"""
from __future__ import annotations
import json
import logging
import re
from typing import Any
from urllib.parse import urljoin
from ..base import Embed, EmbedResult, Stream
from ..cache import TokenCache
from ..context import EmbedContext
from ..errors import NotFoundError
from ..fetcher import Fetcher
from ..registry import default_registry

log = logging.getLogger("streamresolver.embeds.vidify")

API = "https://api.vidify.top"
PLAYER = "https://player.vidify.top/"
SERVERS = ("alfa", "bravo", "charlie", "delta", "echo",
           "foxtrot", "golf", "hotel", "india", "juliett")

JS_BUNDLE_RE = re.compile(r"/assets/index-([a-zA-Z0-9]+)\.js")
AUTH_RE = re.compile(r'Authorization:"Bearer\s*([^"]+)"')
M3U8_RE = re.compile(r"https?://[^\s\"'<>]+?\.m3u8[^\s\"'<>]*", re.IGNORECASE)
# Placeholder playlist served when the title is missing
DECOY_PLAYLIST = "https://live.adultiptv.net/rough.m3u8"


async def fetch_auth_header(fetcher: Fetcher) -> str:
    page = await fetcher.get(PLAYER, headers={"Referer": PLAYER})
    m = JS_BUNDLE_RE.search(page)
    if not m:
        raise ValueError("Vidify: player JS bundle not found")
    js = await fetcher.get(urljoin(PLAYER, m.group(0)), headers={"Referer": PLAYER})
    auth = AUTH_RE.search(js)
    if not auth:
        raise ValueError("Vidify: authorization token not found")
    log.debug("Vidify: refreshed auth token")
    return f"Bearer {auth.group(1)}"


def find_m3u8(node: Any) -> str | None:
    """First m3u8 URL anywhere in a decoded JSON document."""
    if isinstance(node, str):
        m = M3U8_RE.search(node)
        return m.group(0) if m else None
    if isinstance(node, dict):
        node = list(node.values())
    if isinstance(node, list):
        for item in node:
            found = find_m3u8(item)
            if found:
                return found
    return None


class VidifyServer(Embed):
    server = ""

    def __init__(self, server: str, rank: int):
        self.server = server
        self.id = f"vidify-{server}"
        self.name = f"Vidify {server.capitalize()}"
        self.rank = rank
        self.auth: TokenCache[str] = TokenCache(ttl=60 * 60)

    async def scrape(self, ctx: EmbedContext) -> EmbedResult:
        query = json.loads(ctx.url)
        index = SERVERS.index(self.server) + 1
        if query.get("type") == "movie":
            url = f"{API}/movie/{query['tmdbId']}?sr={index}"
        elif query.get("type") == "show":
            url = (f"{API}/tv/{query['tmdbId']}/season/{query['season']}"
                   f"/episode/{query['episode']}?sr={index}")
        else:
            raise NotFoundError("Vidify: unsupported media type")

        auth = await self.auth.get(lambda: fetch_auth_header(ctx.proxied_fetcher))
        headers = {
            "Referer": PLAYER,
            "Origin": PLAYER.rstrip("/"),
            "Authorization": auth,
        }
        data = await ctx.proxied_fetcher.fetch(url, headers=headers)
        playlist = find_m3u8(data)
        if not playlist or DECOY_PLAYLIST in playlist:
            raise NotFoundError("Vidify: no playlist URL found")
        ctx.progress(100)
        return EmbedResult(streams=[
            Stream(stream_type="hls", playlist=playlist,
                   headers={"Referer": PLAYER, "Origin": PLAYER.rstrip("/")})
        ])


for _i, _server in enumerate(SERVERS):
    default_registry.add_embed(VidifyServer(_server, rank=230 - _i))
