from __future__ import annotations

import pytest

from collection_backend.models.movies import MovieEra, MovieRecord, classify_era


@pytest.mark.parametrize(
    ("year", "expected"),
    [
        (1929, MovieEra.SILENT),
        (1930, MovieEra.GOLDEN),
        (1959, MovieEra.GOLDEN),
        (1960, MovieEra.CLASSIC),
        (1979, MovieEra.CLASSIC),
        (1980, MovieEra.MODERN),
        (1999, MovieEra.MODERN),
        (2000, MovieEra.CONTEMPORARY),
    ],
)
def test_classify_era_band_boundaries(year: int, expected: MovieEra) -> None:
    assert classify_era(year) is expected


def test_classify_era_extremes() -> None:
    assert classify_era(1888) is MovieEra.SILENT
    assert classify_era(0) is MovieEra.SILENT
    assert classify_era(2100) is MovieEra.CONTEMPORARY


def test_movie_record_reads_persisted_wire_keys() -> None:
    movie = MovieRecord.from_dict(
        {
            "id": "123e4567-e89b-12d3-a456-426614174000",
            "title": "Inception",
            "year": 2010,
            "era": "contemporary",
            "director": "Christopher Nolan",
            "genre": ["Action", "Sci-Fi"],
            "tags": ["favorite"],
            "dateAdded": "2024-01-01T00:00:00Z",
            "collectionType": "movie",
            "imdbId": "tt1375666",
            "imageUrl": "https://example.com/inception.jpg",
        }
    )

    assert movie.era is MovieEra.CONTEMPORARY
    assert movie.imdb_id == "tt1375666"
    assert movie.date_added == "2024-01-01T00:00:00Z"
    assert movie.image_url == "https://example.com/inception.jpg"
    assert movie.poster is None


def test_movie_record_to_dict_omits_unset_optionals() -> None:
    movie = MovieRecord(
        id="abc",
        title="Metropolis",
        year=1927,
        era=MovieEra.SILENT,
        date_added="2024-01-01T00:00:00Z",
    )

    data = movie.to_dict()

    assert data["era"] == "silent"
    assert data["dateAdded"] == "2024-01-01T00:00:00Z"
    assert data["collectionType"] == "movie"
    assert data["director"] == "Unknown"
    assert data["tags"] == []
    assert "imdbId" not in data
    assert "rating" not in data


def test_movie_record_without_era_derives_it_from_year() -> None:
    movie = MovieRecord.from_dict({"id": "x", "title": "Alien", "year": 1979, "dateAdded": "2024-01-01T00:00:00Z"})
    assert movie.era is MovieEra.CLASSIC
