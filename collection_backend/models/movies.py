from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

COLLECTION_TYPE_MOVIE = "movie"

# Dataclass attribute -> persisted/wire key. Keys match the on-disk `movies.json` layout.
_WIRE_KEYS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "year": "year",
    "era": "era",
    "director": "director",
    "genre": "genre",
    "tags": "tags",
    "date_added": "dateAdded",
    "collection_type": "collectionType",
    "imdb_id": "imdbId",
    "rating": "rating",
    "notes": "notes",
    "plot": "plot",
    "runtime": "runtime",
    "imdb_rating": "imdbRating",
    "poster": "poster",
    "image_url": "imageUrl",
}
_ATTR_NAMES: dict[str, str] = {wire: attr for attr, wire in _WIRE_KEYS.items()}

IMMUTABLE_FIELDS = frozenset({"id", "date_added"})


class MovieEra(str, Enum):
    """Release-year bucket, ordered oldest to newest."""

    SILENT = "silent"
    GOLDEN = "golden"
    CLASSIC = "classic"
    MODERN = "modern"
    CONTEMPORARY = "contemporary"


def classify_era(year: int) -> MovieEra:
    """Bucket a release year; each band includes its lower bound."""
    if year < 1930:
        return MovieEra.SILENT
    if year < 1960:
        return MovieEra.GOLDEN
    if year < 1980:
        return MovieEra.CLASSIC
    if year < 2000:
        return MovieEra.MODERN
    return MovieEra.CONTEMPORARY


def to_attr_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalize a mapping keyed by either wire keys (`imdbId`) or attribute names (`imdb_id`).

    Unknown keys are dropped.
    """

    out: dict[str, Any] = {}
    for key, value in values.items():
        if key in _WIRE_KEYS:
            out[key] = value
        elif key in _ATTR_NAMES:
            out[_ATTR_NAMES[key]] = value
    return out


@dataclass(frozen=True)
class MovieRecord:
    """
    Canonical collection record for a movie.

    `id` and `date_added` are assigned by the repository and never change afterwards.
    """

    id: str
    title: str
    year: int
    era: MovieEra
    date_added: str
    director: str = "Unknown"
    genre: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    collection_type: str = COLLECTION_TYPE_MOVIE
    imdb_id: str | None = None
    rating: float | None = None
    notes: str | None = None
    plot: str | None = None
    runtime: str | None = None
    imdb_rating: str | None = None
    poster: str | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValueError(f"Movie {self.id!r} needs a non-empty title, got {self.title!r}")
        if isinstance(self.year, bool) or not isinstance(self.year, int):
            raise ValueError(f"Movie {self.id!r} needs an integer year, got {self.year!r}")
        if not isinstance(self.director, str):
            raise ValueError(f"Movie {self.id!r} needs a director, got {self.director!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MovieRecord:
        fields_ = to_attr_fields(data)
        era = fields_.get("era")
        fields_["era"] = MovieEra(era) if era is not None else classify_era(int(fields_.get("year") or 0))
        fields_["genre"] = list(fields_.get("genre") or [])
        fields_["tags"] = list(fields_.get("tags") or [])
        if fields_.get("director") is None:
            fields_.pop("director", None)
        return cls(**fields_)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using wire keys; optional fields that are unset are omitted."""
        out: dict[str, Any] = {}
        for attr, wire in _WIRE_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, MovieEra):
                value = value.value
            elif isinstance(value, list):
                value = list(value)
            out[wire] = value
        return out


@dataclass(frozen=True)
class OmdbSearchResult:
    title: str
    year: str
    imdb_id: str
    type: str
    poster: str

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> OmdbSearchResult:
        return cls(
            title=str(payload["Title"]),
            year=str(payload.get("Year") or ""),
            imdb_id=str(payload["imdbID"]),
            type=str(payload.get("Type") or ""),
            poster=str(payload.get("Poster") or "N/A"),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "Title": self.title,
            "Year": self.year,
            "imdbID": self.imdb_id,
            "Type": self.type,
            "Poster": self.poster,
        }


@dataclass(frozen=True)
class OmdbSearchPage:
    results: list[OmdbSearchResult]
    total_results: int


@dataclass(frozen=True)
class OmdbMovieDetail:
    """
    Subset of the OMDb `?i=` / `?t=` payload used by the collection.

    Values are kept as the raw OMDb strings (including the literal "N/A"); mapping
    into collection fields happens in the service layer.
    """

    title: str
    year: str
    imdb_id: str
    genre: str = ""
    director: str = ""
    plot: str = ""
    runtime: str = ""
    imdb_rating: str = ""
    poster: str = "N/A"

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> OmdbMovieDetail:
        return cls(
            title=str(payload["Title"]),
            year=str(payload.get("Year") or ""),
            imdb_id=str(payload["imdbID"]),
            genre=str(payload.get("Genre") or ""),
            director=str(payload.get("Director") or ""),
            plot=str(payload.get("Plot") or ""),
            runtime=str(payload.get("Runtime") or ""),
            imdb_rating=str(payload.get("imdbRating") or ""),
            poster=str(payload.get("Poster") or "N/A"),
        )
