"""
Run lifecycle events, delivered to a caller-supplied listener.

A listener is any callable taking one event object. Events for one run are
delivered in order, from the task running the resolution.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

log = logging.getLogger("streamresolver.events")

SOURCE = "source"
EMBED = "embed"

# Failure reasons
NOT_FOUND = "notfound"
ERROR = "error"
INVALID = "invalid"


@dataclass(frozen=True)
class RunStarted:
    source_ids: tuple[str, ...]


@dataclass(frozen=True)
class AttemptStarted:
    kind: str                         # "source" | "embed"
    id: str
    source_id: Optional[str] = None   # parent source, for embeds


@dataclass(frozen=True)
class AttemptProgress:
    kind: str
    id: str
    percentage: float


@dataclass(frozen=True)
class AttemptSucceeded:
    kind: str
    id: str


@dataclass(frozen=True)
class AttemptFailed:
    kind: str
    id: str
    reason: str                       # "notfound" | "error" | "invalid"
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class EmbedsDiscovered:
    source_id: str
    embeds: tuple                     # EmbedRef, in the order the source returned them


@dataclass(frozen=True)
class RunSucceeded:
    output: Any                       # RunOutput


@dataclass(frozen=True)
class RunExhausted:
    tried: tuple[str, ...]


class Progress:
    """Progress reporter for one attempt: clamped to 0–100, never goes back."""

    def __init__(self, channel: "EventChannel", kind: str, resolver_id: str):
        self._channel = channel
        self._kind = kind
        self._id = resolver_id
        self.percentage = 0.0

    def __call__(self, percentage: float):
        pct = max(0.0, min(100.0, float(percentage)))
        if pct <= self.percentage:
            return
        self.percentage = pct
        self._channel.emit(AttemptProgress(self._kind, self._id, pct))

    def finish(self):
        self(100)


class EventChannel:
    def __init__(self, listener: Optional[Callable[[Any], Any]] = None):
        self.listener = listener

    def emit(self, event):
        if self.listener is None:
            return
        try:
            self.listener(event)
        except Exception:
            # A broken listener must not break the run
            log.exception(f"Event listener failed on {type(event).__name__}")

    def progress(self, kind: str, resolver_id: str) -> Progress:
        return Progress(self, kind, resolver_id)
