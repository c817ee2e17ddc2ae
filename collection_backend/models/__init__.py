"""
Domain models shared across scripts and services.
"""

from collection_backend.models.movies import (
    MovieEra,
    MovieRecord,
    OmdbMovieDetail,
    OmdbSearchPage,
    OmdbSearchResult,
    classify_era,
)

__all__ = [
    "MovieEra",
    "MovieRecord",
    "OmdbMovieDetail",
    "OmdbSearchPage",
    "OmdbSearchResult",
    "classify_era",
]
