"""
Command-line entry point: resolve one title and print the result as JSON.

    streamresolver movie 603 --title "The Matrix" --year 1999
    streamresolver show 1396 1 2 --target browser
"""
from __future__ import annotations
import argparse
import asyncio
import json
import logging
import sys

from .base import Media
from .config import Settings, setup_logging
from .errors import ExhaustedError
from .runner import ProviderEngine
from .targets import Target

log = logging.getLogger("streamresolver.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="streamresolver", description="Find a playable stream for a title")
    sub = parser.add_subparsers(dest="media_type", required=True)

    movie = sub.add_parser("movie", help="Resolve a movie")
    movie.add_argument("tmdb_id")

    show = sub.add_parser("show", help="Resolve a show episode")
    show.add_argument("tmdb_id")
    show.add_argument("season", type=int)
    show.add_argument("episode", type=int)

    for p in (movie, show):
        p.add_argument("--title", default="")
        p.add_argument("--year", type=int, default=0)
        p.add_argument("--imdb-id", default=None)
        p.add_argument("--target", choices=[t.value for t in Target], default=None,
                       help="Override STREAMRESOLVER_TARGET")
        p.add_argument("--source", action="append", default=[], dest="sources",
                       help="Try this source id first (repeatable)")
    return parser


def media_from_args(args: argparse.Namespace) -> Media:
    if args.media_type == "show":
        return Media.show(args.tmdb_id, season=args.season, episode=args.episode,
                          title=args.title, release_year=args.year, imdb_id=args.imdb_id)
    return Media.movie(args.tmdb_id, title=args.title, release_year=args.year, imdb_id=args.imdb_id)


async def run(args: argparse.Namespace, settings: Settings) -> int:
    if args.target:
        settings.target = Target(args.target)
    engine = ProviderEngine(settings=settings)
    try:
        output = await engine.resolve(media_from_args(args), source_order=args.sources or None)
    except ExhaustedError as e:
        log.error(str(e))
        return 1
    finally:
        await engine.close()
    print(json.dumps(output.to_dict(), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
