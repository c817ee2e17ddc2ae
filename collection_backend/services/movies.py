from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

import requests

from collection_backend.integrations.omdb.client import HttpOmdbClient, OmdbParseError
from collection_backend.models.movies import (
    COLLECTION_TYPE_MOVIE,
    IMMUTABLE_FIELDS,
    MovieRecord,
    OmdbMovieDetail,
    OmdbSearchPage,
    OmdbSearchResult,
    classify_era,
    to_attr_fields,
)
from collection_backend.repositories.movies import JsonMovieRepository

logger = logging.getLogger(__name__)

OMDB_MISSING = "N/A"

_LEADING_YEAR_RE = re.compile(r"^\s*(\d{4})")


class MovieRepository(Protocol):
    """Port for local movie storage."""

    def find_all(self) -> list[MovieRecord]: ...

    def find_by_id(self, movie_id: str) -> MovieRecord | None: ...

    def find_by_imdb_id(self, imdb_id: str) -> MovieRecord | None: ...

    def create(self, fields: Mapping[str, Any]) -> MovieRecord: ...

    def update(self, movie_id: str, patch: Mapping[str, Any]) -> MovieRecord | None: ...

    def delete(self, movie_id: str) -> bool: ...

    def search(self, query: str) -> list[MovieRecord]: ...


class MovieCatalogClient(Protocol):
    """Port for the external movie catalog (OMDb)."""

    def search_movies(self, query: str, page: int = 1) -> OmdbSearchPage: ...

    def get_movie_by_id(self, imdb_id: str) -> OmdbMovieDetail | None: ...


class UnparseableYearError(OmdbParseError):
    """The catalog returned a record whose `Year` has no leading four-digit year."""

    def __init__(self, imdb_id: str, raw_year: str) -> None:
        super().__init__(
            f"OMDb record {imdb_id} has an unparseable year {raw_year!r}; not adding it.",
            operation="addFromOmdb",
        )
        self.imdb_id = imdb_id
        self.raw_year = raw_year


@dataclass(frozen=True)
class UserMeta:
    rating: float | None = None
    tags: list[str] = field(default_factory=list)
    notes: str | None = None


def _none_if_missing(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped or stripped == OMDB_MISSING:
        return None
    return stripped


def parse_omdb_year(raw: str) -> int | None:
    """
    Parse an OMDb `Year` value.

    OMDb uses ranges for some titles (e.g. "2010–2014"); the leading year is used.
    """

    match = _LEADING_YEAR_RE.match(raw or "")
    return int(match.group(1)) if match else None


def split_genres(raw: str | None) -> list[str]:
    if not raw or raw.strip() == OMDB_MISSING:
        return []
    return [g.strip() for g in raw.split(",") if g.strip()]


def movie_fields_from_omdb(detail: OmdbMovieDetail) -> dict[str, Any]:
    """Map an OMDb detail payload into collection fields (without user metadata)."""
    year = parse_omdb_year(detail.year)
    if year is None:
        raise UnparseableYearError(detail.imdb_id, detail.year)

    poster = _none_if_missing(detail.poster)
    return {
        "title": detail.title,
        "year": year,
        "director": _none_if_missing(detail.director) or "Unknown",
        "genre": split_genres(detail.genre),
        "plot": _none_if_missing(detail.plot),
        "imdb_id": detail.imdb_id,
        "runtime": _none_if_missing(detail.runtime),
        "imdb_rating": _none_if_missing(detail.imdb_rating),
        "poster": poster,
        "image_url": poster,
    }


class MovieService:
    """
    Movie business logic: orchestrates OMDb lookups and repository persistence.

    This is the only component allowed to create records, so the one-record-per-IMDb-id
    guard in `add_from_external` cannot be bypassed.
    """

    def __init__(self, repository: MovieRepository, catalog: MovieCatalogClient) -> None:
        self._repository = repository
        self._catalog = catalog

    def get_all(self) -> list[MovieRecord]:
        return self._repository.find_all()

    def get_by_id(self, movie_id: str) -> MovieRecord | None:
        return self._repository.find_by_id(movie_id)

    def search(self, query: str) -> list[MovieRecord]:
        return self._repository.search(query)

    def add(self, fields: Mapping[str, Any]) -> MovieRecord:
        """
        Create a record from already-validated fields.

        An explicit `era` is kept as given even when it disagrees with `year`.
        """

        values = to_attr_fields(fields)
        if values.get("era") is None:
            values["era"] = classify_era(int(values["year"]))
        if values.get("tags") is None:
            values["tags"] = []
        values["collection_type"] = COLLECTION_TYPE_MOVIE

        movie = self._repository.create(values)
        logger.info("Added movie id=%s title=%r era=%s", movie.id, movie.title, movie.era.value)
        return movie

    def update(self, movie_id: str, patch: Mapping[str, Any]) -> MovieRecord | None:
        values = {
            k: v for k, v in to_attr_fields(patch).items() if k not in IMMUTABLE_FIELDS and k != "collection_type"
        }
        return self._repository.update(movie_id, values)

    def remove(self, movie_id: str) -> bool:
        return self._repository.delete(movie_id)

    def lookup_external(self, query: str, page: int = 1) -> list[OmdbSearchResult]:
        """Search OMDb without touching the collection."""
        return self._catalog.search_movies(query, page).results

    def add_from_external(self, imdb_id: str, user_meta: UserMeta | None = None) -> MovieRecord | None:
        """
        Fetch full details from OMDb and add them to the collection.

        Returns the existing record when `imdb_id` is already collected, and `None` when
        OMDb has no such movie.
        """

        existing = self._repository.find_by_imdb_id(imdb_id)
        if existing is not None:
            logger.info("Movie %s already in collection as id=%s", imdb_id, existing.id)
            return existing

        detail = self._catalog.get_movie_by_id(imdb_id)
        if detail is None:
            logger.info("OMDb has no movie for %s", imdb_id)
            return None

        meta = user_meta or UserMeta()
        fields = movie_fields_from_omdb(detail)
        # Key the record by the id the guard checked, not whatever casing OMDb echoes back.
        fields["imdb_id"] = imdb_id
        fields.update(
            {
                "rating": meta.rating,
                "notes": meta.notes,
                "tags": list(meta.tags or []),
            }
        )
        return self.add(fields)


def create_movie_service(
    *,
    data_file: str | os.PathLike[str] | None,
    api_key: str | None = None,
    timeout_seconds: float = 10.0,
    session: requests.Session | None = None,
) -> MovieService:
    """Wire a service to a JSON-file repository and an HTTP OMDb client."""
    repository = JsonMovieRepository(data_file)
    catalog = HttpOmdbClient(api_key=api_key, session=session, timeout_seconds=timeout_seconds)
    return MovieService(repository, catalog)
