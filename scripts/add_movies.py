#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys

from collection_backend.integrations.omdb.client import OmdbClientError
from collection_backend.services.movies import UserMeta, create_movie_service
from collection_backend.utils.env import env_float, load_env, resolve_data_file


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="add_movies",
        description="Add movies to the collection by IMDb id (already-collected ids are left alone).",
    )
    parser.add_argument("imdb_ids", nargs="+", metavar="IMDB_ID", help="IMDb title id, e.g. tt1375666.")
    parser.add_argument("--rating", type=float, default=None, help="Personal rating 0-10 applied to new movies.")
    parser.add_argument("--tag", action="append", default=[], help="Label applied to new movies. Repeatable.")
    parser.add_argument("--notes", default=None, help="Notes applied to new movies.")
    parser.add_argument("--data-file", default=None, help="Collection JSON file (default: $MOVIES_DATA_FILE).")
    parser.add_argument("--dry-run", action="store_true", help="Use an in-memory collection; nothing is written.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    args = parser.parse_args(argv)
    if args.rating is not None and not 0 <= args.rating <= 10:
        parser.error("--rating must be between 0 and 10")
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    load_env()

    service = create_movie_service(
        data_file=None if args.dry_run else resolve_data_file(args.data_file),
        timeout_seconds=env_float("OMDB_TIMEOUT_SECONDS", 10.0),
    )
    known_ids = {m.id for m in service.get_all()}
    meta = UserMeta(rating=args.rating, tags=list(args.tag), notes=args.notes)

    added = existing = missing = failed = 0
    for imdb_id in args.imdb_ids:
        imdb_id = imdb_id.strip()
        try:
            movie = service.add_from_external(imdb_id, meta)
        except OmdbClientError as exc:
            failed += 1
            print(f"FAILED {imdb_id}: {exc}", file=sys.stderr)
            continue

        if movie is None:
            missing += 1
            print(f"NOT FOUND {imdb_id}")
        elif movie.id in known_ids:
            existing += 1
            print(f"EXISTS {imdb_id} id={movie.id} title={movie.title!r}")
        else:
            added += 1
            known_ids.add(movie.id)
            print(f"ADDED {imdb_id} id={movie.id} title={movie.title!r} era={movie.era.value}")

    print(f"ADD summary added={added} existing={existing} not_found={missing} failed={failed}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
