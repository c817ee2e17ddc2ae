from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import asdict, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from collection_backend.models.movies import IMMUTABLE_FIELDS, MovieRecord, to_attr_fields

logger = logging.getLogger(__name__)


class MovieRepositoryError(RuntimeError):
    pass


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _generate_id() -> str:
    return str(uuid4())


class JsonMovieRepository:
    """
    JSON-file backed movie store.

    Records are kept in memory keyed by id (insertion ordered) and the whole set is
    rewritten to `path` after every mutation. With `path=None` nothing touches disk.

    Each mutation holds the repository lock from snapshot through save and swap.

    The repository does not police `imdb_id` uniqueness; that is the service's job.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._store: dict[str, MovieRecord] = {}
        self._lock = threading.Lock()
        self._load()

    @property
    def path(self) -> Path | None:
        return self._path

    # --- Persistence helpers ---

    def _load(self) -> None:
        if self._path is None or not self._path.is_file():
            self._store = {}
            return
        try:
            rows = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(rows, list):
                raise ValueError("expected a JSON array of movies")
        except (OSError, ValueError) as exc:
            logger.warning("Failed to load %s, starting with an empty collection: %s", self._path, exc)
            self._store = {}
            return

        records: list[MovieRecord] = []
        for index, row in enumerate(rows):
            try:
                records.append(MovieRecord.from_dict(row))
            except (ValueError, TypeError, AttributeError) as exc:
                logger.warning("Skipping malformed movie #%d in %s: %s", index, self._path, exc)
        self._store = {record.id: record for record in records}
        logger.debug("Loaded %d movies from %s", len(self._store), self._path)

    def _commit(self, store: dict[str, MovieRecord]) -> None:
        """Persist `store` and only then make it the live record set."""
        self._save(store)
        self._store = store

    def _save(self, store: dict[str, MovieRecord]) -> None:
        if self._path is None:
            return
        payload = json.dumps([m.to_dict() for m in store.values()], indent=2, ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise MovieRepositoryError(f"Failed to write {self._path}: {exc}") from exc

    # --- Reads ---

    def find_all(self) -> list[MovieRecord]:
        return list(self._store.values())

    def find_by_id(self, movie_id: str) -> MovieRecord | None:
        return self._store.get(movie_id)

    def find_by_imdb_id(self, imdb_id: str) -> MovieRecord | None:
        for movie in self._store.values():
            if movie.imdb_id == imdb_id:
                return movie
        return None

    def search(self, query: str) -> list[MovieRecord]:
        """Case-insensitive substring match on title, director, genres and tags."""
        q = query.casefold()
        return [
            m
            for m in self._store.values()
            if q in m.title.casefold()
            or q in m.director.casefold()
            or any(q in g.casefold() for g in m.genre)
            or any(q in t.casefold() for t in m.tags)
        ]

    # --- Writes ---

    def create(self, fields: Mapping[str, Any]) -> MovieRecord:
        values = {k: v for k, v in to_attr_fields(fields).items() if k not in IMMUTABLE_FIELDS}
        movie = MovieRecord.from_dict({**values, "id": _generate_id(), "date_added": _now_utc_iso()})
        with self._lock:
            self._commit({**self._store, movie.id: movie})
        return movie

    def update(self, movie_id: str, patch: Mapping[str, Any]) -> MovieRecord | None:
        values = {k: v for k, v in to_attr_fields(patch).items() if k not in IMMUTABLE_FIELDS}
        with self._lock:
            existing = self._store.get(movie_id)
            if existing is None:
                return None

            # Shallow merge: patch values replace existing ones wholesale (lists included).
            # Raises ValueError before anything is saved if the merge drops a required field.
            merged = MovieRecord.from_dict({**asdict(existing), **values})
            updated = replace(merged, id=existing.id, date_added=existing.date_added)
            self._commit({**self._store, movie_id: updated})
        return updated

    def delete(self, movie_id: str) -> bool:
        with self._lock:
            if movie_id not in self._store:
                return False
            self._commit({k: v for k, v in self._store.items() if k != movie_id})
        return True
