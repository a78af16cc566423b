"""
Built-in resolver catalog. Importing a resolver module registers it with
the default registry; list order is registration order, the rank tiebreak.
"""
from __future__ import annotations

from .registry import Registry, default_registry

_loaded = False


def load_builtin() -> Registry:
    global _loaded
    if _loaded:
        return default_registry
    # ── Sources ──
    from .sources import videasy        # noqa: F401  rank 820
    from .sources import autoembed      # noqa: F401  rank 550
    from .sources import sezonlukdizi   # noqa: F401  rank 500 (shows only)
    from .sources import vidlink        # noqa: F401  rank 350
    from .sources import filmekseni     # noqa: F401  rank 181
    from .sources import vidsrccx       # noqa: F401  rank 175
    from .sources import vidify         # noqa: F401  rank 155
    # ── Embeds ──
    from .embeds import autoembed as autoembed_embed  # noqa: F401  rank 10-14
    from .embeds import vidify as vidify_embed        # noqa: F401  rank 230-221
    from .embeds import mixdrop         # noqa: F401  rank 198
    from .embeds import streamtape      # noqa: F401  rank 160, 159
    from .embeds import vidmoly         # noqa: F401  rank 40
    _loaded = True
    return default_registry
