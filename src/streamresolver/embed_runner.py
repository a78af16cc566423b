"""
Embed stage: resolve the embed references one source handed out.

Same selection and fallback as the source stage, but scoped to the
referenced embeds and one level deep only; an embed returns streams, never
further references.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from .attempt import Outcome, invoke
from .base import Embed, EmbedRef, EmbedResult, Stream
from .compat import is_runnable, order_key, playable_streams
from .context import EmbedContext, RunContext
from .events import (
    EMBED, ERROR, INVALID, NOT_FOUND, AttemptFailed, AttemptStarted, AttemptSucceeded,
)
from .registry import Registry
from .validator import StreamValidator

log = logging.getLogger("streamresolver.runner")


@dataclass
class EmbedMatch:
    embed_id: str
    stream: Stream


class EmbedRunner:
    def __init__(self, registry: Registry, validator: StreamValidator):
        self.registry = registry
        self.validator = validator

    def select(self, refs: Sequence[EmbedRef], environment: frozenset[str],
               order: Optional[Sequence[str]] = None) -> list[tuple[Embed, EmbedRef]]:
        """Pair each usable reference with its embed, best rank first."""
        pairs = []
        for ref in refs:
            embed = self.registry.get_embed(ref.embed_id)
            if embed is None:
                log.debug(f"Unknown embed id {ref.embed_id!r}, skipping")
                continue
            if not is_runnable(embed, environment):
                log.debug(f"[{embed.id}] Embed disabled or incompatible, skipping")
                continue
            pairs.append((embed, ref))
        key = order_key(order)
        pairs.sort(key=lambda pair: key(pair[0]))
        return pairs

    async def run(self, source_id: str, refs: Sequence[EmbedRef], run: RunContext,
                  order: Optional[Sequence[str]] = None) -> Optional[EmbedMatch]:
        for embed, ref in self.select(refs, run.environment, order):
            match = await self._attempt(source_id, embed, ref, run)
            if match is not None:
                return match
        return None

    async def _attempt(self, source_id: str, embed: Embed, ref: EmbedRef,
                       run: RunContext) -> Optional[EmbedMatch]:
        events = run.events
        progress = events.progress(EMBED, embed.id)
        events.emit(AttemptStarted(EMBED, embed.id, source_id))
        log.info(f"  [{source_id} → {embed.id}] Resolving embed...")

        ctx = EmbedContext(
            url=ref.url,
            fetcher=run.fetcher,
            proxied_fetcher=run.proxied_fetcher,
            progress=progress,
        )
        attempt = await invoke(embed.scrape(ctx), EmbedResult)
        if attempt.outcome is Outcome.NOT_FOUND:
            log.info(f"  [{embed.id}] Nothing found")
            progress.finish()
            events.emit(AttemptFailed(EMBED, embed.id, NOT_FOUND, attempt.error))
            return None
        if attempt.outcome is Outcome.FAULT:
            log.warning(f"  [{embed.id}] Embed failed: {attempt.error!r}")
            progress.finish()
            events.emit(AttemptFailed(EMBED, embed.id, ERROR, attempt.error))
            return None

        for stream in playable_streams(attempt.value.streams, run.environment):
            valid = await self.validator.validate(stream, run, embed.id)
            if valid is not None:
                log.info(f"  [{embed.id}] Stream resolved")
                progress.finish()
                events.emit(AttemptSucceeded(EMBED, embed.id))
                return EmbedMatch(embed.id, valid)

        log.info(f"  [{embed.id}] No stream passed validation")
        progress.finish()
        events.emit(AttemptFailed(EMBED, embed.id, INVALID))
        return None
