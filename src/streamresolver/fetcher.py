"""
HTTP fetcher for provider scrapers. Wraps aiohttp with common defaults,
headers, timeout, and optional proxy support.

Two flavours are handed to resolvers:
  - Fetcher: plain requests (optionally through an HTTP proxy)
  - ProxyFetcher: routes every request through a simple-proxy endpoint,
    for origins that refuse requests from our own address or origin
"""
from __future__ import annotations
import aiohttp
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlencode, urljoin

DEFAULT_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class FetchResponse:
    status: int
    final_url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 400


def build_url(url: str, *, base_url: str | None = None, query: dict | None = None) -> str:
    full = urljoin(base_url, url) if base_url else url
    if query:
        sep = "&" if "?" in full else "?"
        full = f"{full}{sep}{urlencode(query)}"
    return full


def _is_json(resp: aiohttp.ClientResponse) -> bool:
    return "json" in (resp.content_type or "")


class Fetcher:
    def __init__(self, *, timeout: int = 10, proxy: str | None = None):
        self.timeout = aiohttp.ClientTimeout(total=timeout, connect=4)
        self.proxy = proxy
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": DEFAULT_UA},
                connector=aiohttp.TCPConnector(ssl=False),
            )
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    def _target(self, url: str, headers: dict) -> tuple[str, dict]:
        """Final request URL and headers. Overridden by ProxyFetcher."""
        return url, headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict | None = None,
        body: Any = None,
        json_body: Any = None,
        follow_redirects: bool = True,
        read_body: bool = True,
    ) -> FetchResponse:
        target, req_headers = self._target(url, dict(headers or {}))
        session = await self._get_session()
        async with session.request(
            method,
            target,
            headers=req_headers,
            data=body,
            json=json_body,
            allow_redirects=follow_redirects,
            proxy=self.proxy,
        ) as resp:
            if method == "HEAD" or not read_body:
                payload = None
            elif _is_json(resp):
                payload = await resp.json(content_type=None)
            else:
                payload = await resp.text()
            return FetchResponse(
                status=resp.status,
                final_url=self._final_url(resp),
                headers=dict(resp.headers),
                body=payload,
            )

    def _final_url(self, resp: aiohttp.ClientResponse) -> str:
        return str(resp.url)

    # ── generic entry points ──────────────────

    async def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        base_url: str | None = None,
        headers: dict | None = None,
        query: dict | None = None,
        body: Any = None,
        json_body: Any = None,
    ) -> Any:
        """Returns the response body (decoded JSON when the server says so)."""
        resp = await self.full(url, method=method, base_url=base_url, headers=headers,
                               query=query, body=body, json_body=json_body)
        return resp.body

    async def full(
        self,
        url: str,
        *,
        method: str = "GET",
        base_url: str | None = None,
        headers: dict | None = None,
        query: dict | None = None,
        body: Any = None,
        json_body: Any = None,
        follow_redirects: bool = True,
        read_body: bool = True,
    ) -> FetchResponse:
        """Returns status, final URL, headers and body. Never raises on HTTP status.

        With ``read_body=False`` the body is left unread and ``body`` is None.
        """
        full = build_url(url, base_url=base_url, query=query)
        return await self._request(method.upper(), full, headers=headers, body=body,
                                   json_body=json_body, follow_redirects=follow_redirects,
                                   read_body=read_body)

    # ── convenience methods ──────────────────

    async def get(
        self,
        url: str,
        *,
        base_url: str | None = None,
        headers: dict | None = None,
        params: dict | None = None,
        follow_redirects: bool = True,
    ) -> str:
        resp = await self.full(url, base_url=base_url, headers=headers, query=params,
                               follow_redirects=follow_redirects)
        if isinstance(resp.body, str):
            return resp.body
        return "" if resp.body is None else str(resp.body)

    async def get_json(
        self,
        url: str,
        *,
        base_url: str | None = None,
        headers: dict | None = None,
        params: dict | None = None,
    ) -> dict | list:
        resp = await self.full(url, base_url=base_url, headers=headers, query=params)
        return resp.body

    async def post(
        self,
        url: str,
        *,
        base_url: str | None = None,
        headers: dict | None = None,
        data: dict | str | None = None,
        json_body: dict | None = None,
    ) -> Any:
        return await self.fetch(url, method="POST", base_url=base_url, headers=headers,
                                body=data, json_body=json_body)

    async def head(
        self,
        url: str,
        *,
        base_url: str | None = None,
        headers: dict | None = None,
    ) -> int:
        """Returns status code."""
        resp = await self.full(url, method="HEAD", base_url=base_url, headers=headers)
        return resp.status

    async def get_final_url(
        self,
        url: str,
        *,
        base_url: str | None = None,
        headers: dict | None = None,
    ) -> str:
        """Follow redirects and return the final URL."""
        resp = await self.full(url, base_url=base_url, headers=headers)
        return resp.final_url


# Headers browsers refuse to set from script; the proxy re-applies them
_PROXIED_HEADERS = ("cookie", "referer", "origin", "user-agent")


class ProxyFetcher(Fetcher):
    """Sends requests via ``<proxy_url>?destination=<url>``.

    Restricted headers travel as ``X-<Name>`` and the proxy reports the
    upstream final URL in ``X-Final-Destination``.
    """

    def __init__(self, proxy_url: str, *, timeout: int = 10):
        super().__init__(timeout=timeout)
        self.proxy_url = proxy_url

    def _target(self, url: str, headers: dict) -> tuple[str, dict]:
        out = {}
        for name, value in headers.items():
            if name.lower() in _PROXIED_HEADERS:
                out[f"X-{name}"] = value
            else:
                out[name] = value
        return build_url(self.proxy_url, query={"destination": url}), out

    def _final_url(self, resp: aiohttp.ClientResponse) -> str:
        return resp.headers.get("X-Final-Destination") or str(resp.url)
