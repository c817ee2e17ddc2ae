"""
Dependency injection for the movie service and other shared resources.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from collection_backend.services.movies import MovieService, create_movie_service
from collection_backend.utils.env import env_float, load_env, resolve_data_file

load_env()

logger = logging.getLogger(__name__)


@lru_cache
def get_data_file() -> Path:
    return resolve_data_file()


@lru_cache
def get_movie_service() -> MovieService:
    """
    Process-wide movie service.

    Tests replace it through `app.dependency_overrides[get_movie_service]`.
    """
    data_file = get_data_file()
    logger.info("Using movie collection file %s", data_file)
    return create_movie_service(
        data_file=data_file,
        timeout_seconds=env_float("OMDB_TIMEOUT_SECONDS", 10.0),
    )


# Type alias for dependency injection
MovieServiceDep = Annotated[MovieService, Depends(get_movie_service)]
