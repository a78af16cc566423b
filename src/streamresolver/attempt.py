"""
Tri-state result of one resolver invocation.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Optional

from .base import EmbedRef, SourceResult, Stream
from .errors import NotFoundError


class Outcome(Enum):
    FOUND = "found"
    NOT_FOUND = "notfound"
    FAULT = "fault"


@dataclass
class Attempt:
    outcome: Outcome
    value: Any = None
    error: Optional[BaseException] = None


def check_output(value: Any, expected: type):
    """Raise TypeError unless ``value`` is a well-formed ``expected`` output."""
    if not isinstance(value, expected):
        raise TypeError(f"Expected {expected.__name__}, got {type(value).__name__}")
    if not isinstance(value.streams, list):
        raise TypeError(f"streams must be a list, got {type(value.streams).__name__}")
    for stream in value.streams:
        if not isinstance(stream, Stream):
            raise TypeError(f"Expected Stream, got {type(stream).__name__}")
        if not isinstance(stream.qualities, dict):
            raise TypeError(f"qualities must be a dict, got {type(stream.qualities).__name__}")
        if not isinstance(stream.headers, dict) or not isinstance(stream.preferred_headers, dict):
            raise TypeError("stream headers must be dicts")
        stream.is_present()
        tuple(stream.flags)
    if expected is SourceResult:
        if not isinstance(value.embeds, list):
            raise TypeError(f"embeds must be a list, got {type(value.embeds).__name__}")
        for ref in value.embeds:
            if not isinstance(ref, EmbedRef):
                raise TypeError(f"Expected EmbedRef, got {type(ref).__name__}")


async def invoke(call: Awaitable, expected: type = SourceResult) -> Attempt:
    """Await a resolver call and classify how it ended.

    NotFoundError and an empty result are NOT_FOUND; any other exception,
    or an output that is not a well-formed ``expected``, is a FAULT.
    Cancellation is not an ``Exception`` and passes through.
    """
    try:
        value = await call
        if value is None:
            return Attempt(Outcome.NOT_FOUND)
        check_output(value, expected)
        empty = value.is_empty()
    except NotFoundError as e:
        return Attempt(Outcome.NOT_FOUND, error=e)
    except Exception as e:
        return Attempt(Outcome.FAULT, error=e)
    if empty:
        return Attempt(Outcome.NOT_FOUND)
    return Attempt(Outcome.FOUND, value)

