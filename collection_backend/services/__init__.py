"""
Service layer: business rules on top of repositories and integrations.
"""

from collection_backend.services.movies import (
    MovieService,
    UnparseableYearError,
    UserMeta,
    create_movie_service,
    movie_fields_from_omdb,
)

__all__ = [
    "MovieService",
    "UnparseableYearError",
    "UserMeta",
    "create_movie_service",
    "movie_fields_from_omdb",
]
