"""
Stream liveness validation.

Before a stream is handed to the caller, probe it with a cheap request:
  - hls: GET the playlist
  - file: ranged GET (bytes 0-1) of every quality, in parallel; dead
    qualities are dropped

Status codes in [200, 400) count as alive. A probe that errors out counts
as dead.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Iterable, Optional

from .base import FILE, HLS, Stream
from .context import RunContext

log = logging.getLogger("streamresolver.validator")


def _alive(status: int) -> bool:
    return 200 <= status < 400


class StreamValidator:
    def __init__(self, skip_ids: Iterable[str] = ()):
        # Resolvers whose URLs are single-use or signed; probing would burn them
        self.skip_ids = frozenset(skip_ids)

    async def validate(self, stream: Stream, run: RunContext, resolver_id: str) -> Optional[Stream]:
        if resolver_id in self.skip_ids:
            return stream
        if stream.stream_type == HLS:
            return await self._validate_hls(stream, run, resolver_id)
        if stream.stream_type == FILE:
            return await self._validate_file(stream, run, resolver_id)
        log.debug(f"[{resolver_id}] Unknown stream type {stream.stream_type!r}")
        return None

    async def _probe(self, url: str, headers: dict, run: RunContext, resolver_id: str) -> int:
        try:
            resp = await run.proxied_fetcher.full(url, method="GET", headers=headers, read_body=False)
        except Exception as e:
            log.warning(f"[{resolver_id}] Probe failed for {url}: {e!r}")
            return 0
        return resp.status

    async def _validate_hls(self, stream: Stream, run: RunContext, resolver_id: str) -> Optional[Stream]:
        if not stream.playlist:
            return None
        # Inline playlists can't be probed
        if stream.playlist.startswith("data:"):
            return stream
        status = await self._probe(stream.playlist, stream.request_headers(), run, resolver_id)
        if not _alive(status):
            log.info(f"[{resolver_id}] Playlist rejected (status {status})")
            return None
        return stream

    async def _validate_file(self, stream: Stream, run: RunContext, resolver_id: str) -> Optional[Stream]:
        # Own copy: other validations of the same output must not see removals
        qualities = {q: f for q, f in stream.qualities.items() if f.url}
        if not qualities:
            return None
        headers = {**stream.request_headers(), "Range": "bytes=0-1"}
        statuses = await asyncio.gather(*(
            self._probe(f.url, headers, run, resolver_id) for f in qualities.values()
        ))
        alive = {}
        for (quality, file), status in zip(qualities.items(), statuses):
            if _alive(status):
                alive[quality] = file
            else:
                log.info(f"[{resolver_id}] Dropping quality {quality} (status {status})")
        if not alive:
            return None
        return stream.with_qualities(alive)
