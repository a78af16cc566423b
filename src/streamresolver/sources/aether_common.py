"""
Shared helper for sources that go through the aether headless-scrape API:
it loads a player page in a browser and reports the network requests made.
"""
from __future__ import annotations
from urllib.parse import quote

from ..errors import NotFoundError
from ..fetcher import Fetcher

SCRAPE_API = "https://scraper.aether.mom/api/scrape"


async def find_m3u8(fetcher: Fetcher, page_url: str, *, click: str | None = None,
                    headers: dict | None = None) -> str:
    url = f"{SCRAPE_API}?url={quote(page_url, safe='')}"
    if click:
        url += f"&clickSelector={quote(click, safe='')}"
    url += "&waitfor=.m3u8"
    data = await fetcher.fetch(url, headers=headers)
    requests = data.get("requests", []) if isinstance(data, dict) else []
    for req in requests:
        if ".m3u8" in req.get("url", ""):
            return req["url"]
    raise NotFoundError("No m3u8 url found in response")
