"""
Repository layer for storage access patterns.
"""

from collection_backend.repositories.movies import (
    JsonMovieRepository,
    MovieRepositoryError,
)

__all__ = [
    "JsonMovieRepository",
    "MovieRepositoryError",
]
