"""
Compatibility filter and candidate ordering.
"""
from __future__ import annotations
from typing import Iterable, Optional, Sequence, TypeVar

from .base import Stream

R = TypeVar("R")


def is_compatible(flags: Iterable[str], environment: Iterable[str]) -> bool:
    """True iff every required flag is satisfied. No flags is always compatible."""
    return set(flags).issubset(environment)


def is_runnable(resolver, environment: Iterable[str]) -> bool:
    if getattr(resolver, "disabled", False):
        return False
    return is_compatible(resolver.flags, environment)


def order_key(order: Optional[Sequence[str]] = None):
    """Sort key: ids named in ``order`` first (in that order), then rank descending."""
    positions = {rid: i for i, rid in enumerate(order or ())}

    def key(resolver):
        if resolver.id in positions:
            return (0, positions[resolver.id])
        return (1, -resolver.rank)
    return key


def rank_candidates(resolvers: Iterable[R], environment: Iterable[str],
                    order: Optional[Sequence[str]] = None) -> list[R]:
    """Runnable resolvers, highest rank first.

    ``sorted`` is stable, so equal ranks keep registry order.
    """
    env = frozenset(environment)
    return sorted((r for r in resolvers if is_runnable(r, env)), key=order_key(order))


def playable_streams(streams: Iterable[Stream], environment: Iterable[str]) -> list[Stream]:
    env = frozenset(environment)
    return [s for s in streams if s.is_present() and is_compatible(s.flags, env)]
