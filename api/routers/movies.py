"""
Movie collection endpoints: browse/search the local collection, look up OMDb, add/update/delete.
"""
from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from api.deps import MovieServiceDep
from api.envelope import ErrorEnvelope, SuccessEnvelope, error_response, success_response
from collection_backend.models.movies import MovieEra
from collection_backend.services.movies import UserMeta

router = APIRouter(prefix="/collections/movies", tags=["Movies"])

IMDB_ID_PATTERN = r"^tt\d+$"


# --- Pydantic models ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Movie(_CamelModel):
    id: UUID
    title: str
    year: int
    director: str
    genre: list[str]
    era: MovieEra
    tags: list[str]
    collection_type: str = Field(alias="collectionType")
    date_added: str = Field(alias="dateAdded")
    imdb_id: str | None = Field(default=None, alias="imdbId")
    rating: float | None = None
    notes: str | None = None
    plot: str | None = None
    runtime: str | None = None
    imdb_rating: str | None = Field(default=None, alias="imdbRating")
    poster: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")


class OmdbSearchResult(_CamelModel):
    Title: str
    Year: str
    imdbID: str
    Type: str
    Poster: str


class Deleted(BaseModel):
    deleted: bool = True


class _UserMetaFields(_CamelModel):
    rating: float | None = Field(default=None, ge=0, le=10, description="Personal rating 0-10")
    tags: list[str] | None = Field(default=None, description="Custom labels")
    notes: str | None = Field(default=None, description="Personal notes")


class AddMovieRequest(_UserMetaFields):
    imdb_id: str = Field(alias="imdbId", pattern=IMDB_ID_PATTERN, examples=["tt1375666"])


class ManualAddRequest(_UserMetaFields):
    title: str = Field(min_length=1)
    year: int = Field(ge=1888, le=2100)
    director: str = Field(default="Unknown", min_length=1)
    genre: list[str] = Field(min_length=1)
    plot: str | None = None
    runtime: str | None = None
    poster: HttpUrl | None = None
    era: MovieEra | None = Field(default=None, description="Overrides the era derived from `year`.")


class UpdateMovieRequest(_UserMetaFields):
    # Omitted means "leave unchanged"; an explicit null is rejected for required fields.
    title: str = Field(default=None, min_length=1)
    year: int = Field(default=None, ge=1888, le=2100)
    director: str = Field(default=None, min_length=1)
    genre: list[str] = Field(default=None, min_length=1)
    plot: str | None = None
    runtime: str | None = None
    poster: HttpUrl | None = None


def _fields(model: BaseModel, *, exclude_unset: bool = False) -> dict[str, Any]:
    values = model.model_dump(exclude_unset=exclude_unset)
    if values.get("poster") is not None:
        values["poster"] = str(values["poster"])
    return values


def _not_found(message: str = "Movie not found") -> JSONResponse:
    return JSONResponse(status_code=404, content=error_response(message))


# --- Endpoints ---


@router.get("", response_model=SuccessEnvelope[list[Movie]])
def list_movies(service: MovieServiceDep) -> dict:
    """Every movie in the collection."""
    movies = [m.to_dict() for m in service.get_all()]
    return success_response(movies, total=len(movies))


@router.get("/search", response_model=SuccessEnvelope[list[Movie]])
def search_movies(service: MovieServiceDep, q: str = Query(min_length=1)) -> dict:
    """Search the local collection by title, director, genre or tag."""
    movies = [m.to_dict() for m in service.search(q)]
    return success_response(movies, total=len(movies))


@router.get("/lookup", response_model=SuccessEnvelope[list[OmdbSearchResult]])
def lookup_movies(service: MovieServiceDep, q: str = Query(min_length=1)) -> dict:
    """Search OMDb. Does NOT add anything to the collection."""
    results = [r.to_dict() for r in service.lookup_external(q)]
    return success_response(results, total=len(results))


@router.get(
    "/{movie_id}",
    response_model=SuccessEnvelope[Movie],
    responses={404: {"model": ErrorEnvelope}},
)
def get_movie(service: MovieServiceDep, movie_id: UUID) -> Any:
    movie = service.get_by_id(str(movie_id))
    if movie is None:
        return _not_found()
    return success_response(movie.to_dict())


@router.post(
    "/add",
    status_code=201,
    response_model=SuccessEnvelope[Movie],
    responses={404: {"model": ErrorEnvelope}},
)
def add_movie_from_omdb(service: MovieServiceDep, body: AddMovieRequest) -> Any:
    """Fetch full details from OMDb by IMDb id and add them; re-adding returns the existing movie."""
    meta = UserMeta(rating=body.rating, tags=list(body.tags or []), notes=body.notes)
    movie = service.add_from_external(body.imdb_id, meta)
    if movie is None:
        return _not_found("Could not find movie on OMDB")
    return success_response(movie.to_dict())


@router.post("", status_code=201, response_model=SuccessEnvelope[Movie])
def add_movie_manually(service: MovieServiceDep, body: ManualAddRequest) -> dict:
    """Add a movie from caller-supplied details (bypasses OMDb)."""
    values = _fields(body)
    values["tags"] = values.get("tags") or []
    movie = service.add(values)
    return success_response(movie.to_dict())


@router.put(
    "/{movie_id}",
    response_model=SuccessEnvelope[Movie],
    responses={404: {"model": ErrorEnvelope}},
)
def update_movie(service: MovieServiceDep, movie_id: UUID, body: UpdateMovieRequest) -> Any:
    """Partially update a movie; only the supplied fields change."""
    movie = service.update(str(movie_id), _fields(body, exclude_unset=True))
    if movie is None:
        return _not_found()
    return success_response(movie.to_dict())


@router.delete(
    "/{movie_id}",
    response_model=SuccessEnvelope[Deleted],
    responses={404: {"model": ErrorEnvelope}},
)
def delete_movie(service: MovieServiceDep, movie_id: UUID) -> Any:
    if not service.remove(str(movie_id)):
        return _not_found()
    return success_response({"deleted": True})
