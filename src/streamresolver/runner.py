"""
Provider engine — picks sources by rank, falls back, resolves embeds,
validates, and returns the first playable stream.

Usage:
    engine = ProviderEngine()
    try:
        result = await engine.resolve(Media.movie("603"))
        print(result.to_dict())
    except ExhaustedError:
        ...
    finally:
        await engine.close()

Sources are tried one at a time, best rank first. A source that finds
nothing, errors out, or hands back only dead streams just moves the run on
to the next one; only when every candidate failed does ``resolve`` raise.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Iterable, Optional, Sequence

from .attempt import Outcome, check_output, invoke
from .base import EmbedResult, Media, RunOutput, Source, SourceResult
from .catalog import load_builtin
from .compat import is_runnable, playable_streams, rank_candidates
from .config import Settings
from .context import EmbedContext, RunContext, ScrapeContext
from .embed_runner import EmbedRunner
from .errors import ExhaustedError, NotFoundError, UnknownResolverError
from .events import (
    EMBED, ERROR, INVALID, NOT_FOUND, SOURCE, AttemptFailed, AttemptStarted, AttemptSucceeded,
    EmbedsDiscovered, EventChannel, RunExhausted, RunStarted, RunSucceeded,
)
from .fetcher import Fetcher, ProxyFetcher
from .registry import Registry
from .targets import make_environment
from .validator import StreamValidator

log = logging.getLogger("streamresolver.runner")

Listener = Callable[[Any], Any]


class ProviderEngine:
    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        registry: Optional[Registry] = None,
        fetcher: Optional[Fetcher] = None,
        proxied_fetcher: Optional[Fetcher] = None,
        validator: Optional[StreamValidator] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.registry = registry if registry is not None else load_builtin()
        self.fetcher = fetcher or Fetcher(timeout=self.settings.timeout,
                                          proxy=self.settings.http_proxy)
        if proxied_fetcher is None and self.settings.proxy_url:
            proxied_fetcher = ProxyFetcher(self.settings.proxy_url, timeout=self.settings.timeout)
        self.proxied_fetcher = proxied_fetcher or self.fetcher
        self.validator = validator or StreamValidator(
            self.registry.skip_validation_ids() | self.settings.skip_validation_ids
        )
        self.embed_runner = EmbedRunner(self.registry, self.validator)

    async def close(self):
        await self.fetcher.close()
        if self.proxied_fetcher is not self.fetcher:
            await self.proxied_fetcher.close()

    def environment(self, capabilities: Optional[Iterable[str]] = None) -> frozenset[str]:
        if capabilities is None:
            return make_environment(self.settings.target, self.settings.consistent_ip)
        return frozenset(capabilities)

    def _run_context(self, environment, listener: Optional[Listener]) -> RunContext:
        return RunContext(
            fetcher=self.fetcher,
            proxied_fetcher=self.proxied_fetcher,
            environment=self.environment(environment),
            events=EventChannel(listener),
        )

    # ── catalog views ──────────────────

    def select_sources(self, media: Media, environment: frozenset[str],
                       order: Optional[Sequence[str]] = None) -> list[Source]:
        """Candidate sequence for ``media``: runnable sources, best rank first."""
        sources = [s for s in self.registry.list_sources() if s.supports(media)]
        return rank_candidates(sources, environment, order)

    def list_sources(self, environment: Optional[Iterable[str]] = None) -> list[dict]:
        env = self.environment(environment)
        return [s.metadata() for s in rank_candidates(self.registry.list_sources(), env)]

    def list_embeds(self, environment: Optional[Iterable[str]] = None) -> list[dict]:
        env = self.environment(environment)
        return [e.metadata() for e in rank_candidates(self.registry.list_embeds(), env)]

    def get_metadata(self, resolver_id: str) -> Optional[dict]:
        resolver = self.registry.get_source(resolver_id) or self.registry.get_embed(resolver_id)
        return resolver.metadata() if resolver is not None else None

    # ── full run ──────────────────

    async def resolve(
        self,
        media: Media,
        environment: Optional[Iterable[str]] = None,
        *,
        listener: Optional[Listener] = None,
        source_order: Optional[Sequence[str]] = None,
        embed_order: Optional[Sequence[str]] = None,
    ) -> RunOutput:
        """Return the first validated stream, or raise ExhaustedError."""
        run = self._run_context(environment, listener)
        candidates = self.select_sources(media, run.environment, source_order)
        run.events.emit(RunStarted(tuple(s.id for s in candidates)))

        tried = []
        for source in candidates:
            tried.append(source.id)
            output = await self._attempt_source(source, media, run, embed_order)
            if output is not None:
                run.events.emit(RunSucceeded(output))
                return output

        log.warning(f"All providers exhausted, no stream found for {media.media_type} {media.tmdb_id}")
        run.events.emit(RunExhausted(tuple(tried)))
        raise ExhaustedError(media, tried)

    async def _attempt_source(self, source: Source, media: Media, run: RunContext,
                              embed_order: Optional[Sequence[str]]) -> Optional[RunOutput]:
        events = run.events
        progress = events.progress(SOURCE, source.id)
        events.emit(AttemptStarted(SOURCE, source.id))
        log.info(f"[{source.id}] Trying source scraper...")

        ctx = ScrapeContext(
            media=media,
            fetcher=run.fetcher,
            proxied_fetcher=run.proxied_fetcher,
            progress=progress,
        )
        attempt = await invoke(source.resolve(ctx))
        if attempt.outcome is Outcome.NOT_FOUND:
            log.info(f"[{source.id}] Nothing found")
            progress.finish()
            events.emit(AttemptFailed(SOURCE, source.id, NOT_FOUND, attempt.error))
            return None
        if attempt.outcome is Outcome.FAULT:
            log.warning(f"[{source.id}] Source failed: {attempt.error!r}")
            progress.finish()
            events.emit(AttemptFailed(SOURCE, source.id, ERROR, attempt.error))
            return None

        result: SourceResult = attempt.value
        for stream in playable_streams(result.streams, run.environment):
            valid = await self.validator.validate(stream, run, source.id)
            if valid is not None:
                log.info(f"[{source.id}] Direct stream found")
                progress.finish()
                events.emit(AttemptSucceeded(SOURCE, source.id))
                return RunOutput(source_id=source.id, embed_id=None, stream=valid)

        # Direct streams missing or dead: this source's embeds come before the next source
        if result.embeds:
            events.emit(EmbedsDiscovered(source.id, tuple(result.embeds)))
            match = await self.embed_runner.run(source.id, result.embeds, run, embed_order)
            if match is not None:
                progress.finish()
                events.emit(AttemptSucceeded(SOURCE, source.id))
                return RunOutput(source_id=source.id, embed_id=match.embed_id, stream=match.stream)

        log.info(f"[{source.id}] No playable stream")
        progress.finish()
        events.emit(AttemptFailed(SOURCE, source.id, INVALID))
        return None

    # ── individual runners ──────────────────

    async def run_source(
        self,
        source_id: str,
        media: Media,
        environment: Optional[Iterable[str]] = None,
        *,
        listener: Optional[Listener] = None,
    ) -> SourceResult:
        """Run one source on its own: no fallback, no embed resolution.

        Returns its output with only the streams that pass validation.
        """
        run = self._run_context(environment, listener)
        source = self.registry.get_source(source_id)
        if source is None or not is_runnable(source, run.environment):
            raise UnknownResolverError(f"No runnable source with id {source_id!r}")
        if not source.supports(media):
            raise UnknownResolverError(f"Source {source_id!r} does not support {media.media_type}")

        progress = run.events.progress(SOURCE, source.id)
        run.events.emit(AttemptStarted(SOURCE, source.id))
        result = await source.resolve(ScrapeContext(
            media=media,
            fetcher=run.fetcher,
            proxied_fetcher=run.proxied_fetcher,
            progress=progress,
        ))
        if result is None:
            raise NotFoundError(f"{source_id}: no output")
        check_output(result, SourceResult)
        streams = []
        for stream in playable_streams(result.streams, run.environment):
            valid = await self.validator.validate(stream, run, source.id)
            if valid is not None:
                streams.append(valid)
        if not streams and not result.embeds:
            raise NotFoundError(f"{source_id}: no playable stream")
        progress.finish()
        run.events.emit(AttemptSucceeded(SOURCE, source.id))
        return SourceResult(embeds=list(result.embeds), streams=streams)

    async def run_embed(
        self,
        embed_id: str,
        url: str,
        environment: Optional[Iterable[str]] = None,
        *,
        listener: Optional[Listener] = None,
    ) -> EmbedResult:
        """Run one embed on its own payload. Returns only validated streams."""
        run = self._run_context(environment, listener)
        embed = self.registry.get_embed(embed_id)
        if embed is None or not is_runnable(embed, run.environment):
            raise UnknownResolverError(f"No runnable embed with id {embed_id!r}")

        progress = run.events.progress(EMBED, embed.id)
        run.events.emit(AttemptStarted(EMBED, embed.id))
        result = await embed.scrape(EmbedContext(
            url=url,
            fetcher=run.fetcher,
            proxied_fetcher=run.proxied_fetcher,
            progress=progress,
        ))
        if result is None:
            raise NotFoundError(f"{embed_id}: no output")
        check_output(result, EmbedResult)
        streams = []
        for stream in playable_streams(result.streams, run.environment):
            valid = await self.validator.validate(stream, run, embed.id)
            if valid is not None:
                streams.append(valid)
        if not streams:
            raise NotFoundError(f"{embed_id}: no playable stream")
        progress.finish()
        run.events.emit(AttemptSucceeded(EMBED, embed.id))
        return EmbedResult(streams=streams)
