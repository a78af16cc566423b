"""
Core types for the streamresolver provider system.

Two stream types:
  - HLS: m3u8 playlist URL
  - File: direct media URL(s) keyed by quality label

Resolvers come in two kinds:
  - Source: finds streams (or embed references) for a Media on one site
  - Embed: turns an opaque reference handed out by a Source into streams
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .context import EmbedContext, ScrapeContext

MOVIE = "movie"
SHOW = "show"
MEDIA_TYPES = (MOVIE, SHOW)

HLS = "hls"
FILE = "file"


# ──────────────────────────────
#  Media (immutable input of a run)
# ──────────────────────────────
@dataclass(frozen=True)
class Media:
    tmdb_id: str
    title: str = ""
    release_year: int = 0
    imdb_id: Optional[str] = None
    media_type: str = MOVIE           # "movie" | "show"
    season: Optional[int] = None      # show only
    episode: Optional[int] = None     # show only

    def __post_init__(self):
        # Accept "tv" as an alias, always store "show"
        if self.media_type == "tv":
            object.__setattr__(self, "media_type", SHOW)
        if self.media_type not in MEDIA_TYPES:
            raise ValueError(f"Unknown media type: {self.media_type!r}")
        object.__setattr__(self, "tmdb_id", str(self.tmdb_id))
        if self.media_type == SHOW and (self.season is None or self.episode is None):
            raise ValueError("A show episode needs both season and episode numbers")

    @classmethod
    def movie(cls, tmdb_id, title: str = "", release_year: int = 0,
              imdb_id: Optional[str] = None) -> "Media":
        return cls(tmdb_id=tmdb_id, title=title, release_year=release_year, imdb_id=imdb_id)

    @classmethod
    def show(cls, tmdb_id, season: int, episode: int, title: str = "",
             release_year: int = 0, imdb_id: Optional[str] = None) -> "Media":
        return cls(tmdb_id=tmdb_id, title=title, release_year=release_year,
                   imdb_id=imdb_id, media_type=SHOW, season=season, episode=episode)

    @property
    def is_show(self) -> bool:
        return self.media_type == SHOW


# ──────────────────────────────
#  Caption / Subtitle
# ──────────────────────────────
@dataclass
class Caption:
    url: str
    lang: str                         # ISO 639-1 code e.g. "en"
    format: str = "srt"               # "srt" | "vtt"

    def to_dict(self):
        return {"url": self.url, "lang": self.lang, "format": self.format}


@dataclass
class ThumbnailTrack:
    url: str
    format: str = "vtt"

    def to_dict(self):
        return {"url": self.url, "format": self.format}


# ──────────────────────────────
#  Stream definitions
# ──────────────────────────────
@dataclass
class StreamFile:
    url: str
    type: str = "mp4"

    def to_dict(self):
        return {"url": self.url, "type": self.type}


@dataclass
class Stream:
    stream_type: str                  # "hls" | "file"
    id: str = "primary"
    # HLS fields
    playlist: Optional[str] = None
    thumbnail_track: Optional[ThumbnailTrack] = None
    # File fields: quality label ("1080", "4k", "unknown", ...) -> file
    qualities: dict[str, StreamFile] = field(default_factory=dict)
    # Common
    captions: list[Caption] = field(default_factory=list)
    flags: tuple[str, ...] = ()       # capabilities needed to play this stream
    headers: dict[str, str] = field(default_factory=dict)            # required
    preferred_headers: dict[str, str] = field(default_factory=dict)  # nice to have

    def is_present(self) -> bool:
        if self.stream_type == HLS:
            return bool(self.playlist)
        if self.stream_type == FILE:
            return any(f.url for f in self.qualities.values())
        return False

    def request_headers(self) -> dict[str, str]:
        return {**self.preferred_headers, **self.headers}

    def with_qualities(self, qualities: dict[str, StreamFile]) -> "Stream":
        return replace(self, qualities=dict(qualities))

    def to_dict(self):
        d = {
            "id": self.id,
            "type": self.stream_type,
            "flags": list(self.flags),
            "captions": [c.to_dict() for c in self.captions],
        }
        if self.headers:
            d["headers"] = self.headers
        if self.preferred_headers:
            d["preferredHeaders"] = self.preferred_headers
        if self.stream_type == HLS:
            d["playlist"] = self.playlist
            if self.thumbnail_track:
                d["thumbnailTrack"] = self.thumbnail_track.to_dict()
        else:
            d["qualities"] = {q: f.to_dict() for q, f in self.qualities.items()}
        return d


# ──────────────────────────────
#  Embed reference (returned by sources)
# ──────────────────────────────
@dataclass(frozen=True)
class EmbedRef:
    embed_id: str                     # must match a registered embed id
    url: str                          # opaque payload, only the embed understands it


# ──────────────────────────────
#  Resolver outputs
# ──────────────────────────────
@dataclass
class SourceResult:
    embeds: list[EmbedRef] = field(default_factory=list)
    streams: list[Stream] = field(default_factory=list)  # direct streams (skip embed step)

    def is_empty(self) -> bool:
        return not self.embeds and not any(s.is_present() for s in self.streams)


@dataclass
class EmbedResult:
    streams: list[Stream] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not any(s.is_present() for s in self.streams)


# ──────────────────────────────
#  Final run output
# ──────────────────────────────
@dataclass
class RunOutput:
    source_id: str
    embed_id: Optional[str]
    stream: Stream

    def to_dict(self):
        return {
            "source": self.source_id,
            "embed": self.embed_id,
            "stream": self.stream.to_dict(),
        }


# ──────────────────────────────
#  Resolver interfaces
# ──────────────────────────────
class Source:
    """A top-level resolver for one external site.

    Subclasses either implement ``scrape`` (same logic for movies and shows)
    or override ``scrape_movie`` / ``scrape_show`` and narrow ``media_types``.
    """

    id: str = ""
    name: str = ""
    rank: int = 0
    flags: tuple[str, ...] = ()
    disabled: bool = False
    skip_validation: bool = False     # streams are single-use / signed
    media_types: tuple[str, ...] = MEDIA_TYPES

    async def scrape(self, ctx: "ScrapeContext") -> SourceResult:
        raise NotImplementedError

    async def scrape_movie(self, ctx: "ScrapeContext") -> SourceResult:
        return await self.scrape(ctx)

    async def scrape_show(self, ctx: "ScrapeContext") -> SourceResult:
        return await self.scrape(ctx)

    def supports(self, media: Media) -> bool:
        return media.media_type in self.media_types

    async def resolve(self, ctx: "ScrapeContext") -> SourceResult:
        if ctx.media.is_show:
            return await self.scrape_show(ctx)
        return await self.scrape_movie(ctx)

    def metadata(self) -> dict:
        return {
            "type": "source",
            "id": self.id,
            "name": self.name,
            "rank": self.rank,
            "flags": list(self.flags),
            "media_types": list(self.media_types),
        }


class Embed:
    """A second-level resolver: opaque payload in, streams out."""

    id: str = ""
    name: str = ""
    rank: int = 0
    flags: tuple[str, ...] = ()
    disabled: bool = False
    skip_validation: bool = False

    async def scrape(self, ctx: "EmbedContext") -> EmbedResult:
        raise NotImplementedError

    def metadata(self) -> dict:
        return {
            "type": "embed",
            "id": self.id,
            "name": self.name,
            "rank": self.rank,
            "flags": list(self.flags),
        }
