from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from collection_backend.integrations.omdb.client import (
    HttpOmdbClient,
    OmdbNetworkError,
    OmdbParseError,
)
from collection_backend.models.movies import OmdbMovieDetail

INCEPTION_PAYLOAD = {
    "Title": "Inception",
    "Year": "2010",
    "Rated": "PG-13",
    "Runtime": "148 min",
    "Genre": "Action, Sci-Fi, Thriller",
    "Director": "Christopher Nolan",
    "Plot": "A thief who steals corporate secrets...",
    "Poster": "N/A",
    "imdbRating": "8.8",
    "imdbID": "tt1375666",
    "Type": "movie",
    "Response": "True",
}


def _response(payload=None, *, status_code: int = 200, text: str = "", json_error: bool = False) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if json_error:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        resp.json.return_value = payload
    return resp


def _client(resp: MagicMock | None = None) -> tuple[HttpOmdbClient, MagicMock]:
    session = MagicMock()
    if resp is not None:
        session.get.return_value = resp
    return HttpOmdbClient(api_key="test-key", session=session), session


def test_search_movies_parses_results_and_total() -> None:
    client, session = _client(
        _response(
            {
                "Search": [
                    {"Title": "Inception", "Year": "2010", "imdbID": "tt1375666", "Type": "movie", "Poster": "N/A"},
                    {"Title": "Interstellar", "Year": "2014", "imdbID": "tt0816692", "Type": "movie", "Poster": "x"},
                ],
                "totalResults": "2",
                "Response": "True",
            }
        )
    )

    page = client.search_movies("Inception")

    assert page.total_results == 2
    assert [r.imdb_id for r in page.results] == ["tt1375666", "tt0816692"]
    _args, kwargs = session.get.call_args
    assert kwargs["params"] == {"apikey": "test-key", "s": "Inception", "type": "movie", "page": 1}


def test_search_movies_no_match_is_empty_not_error() -> None:
    client, _session = _client(_response({"Response": "False", "Error": "Movie not found!"}))

    page = client.search_movies("asdkjhqwe")

    assert page.results == []
    assert page.total_results == 0


def test_get_movie_by_id_returns_detail() -> None:
    client, session = _client(_response(INCEPTION_PAYLOAD))

    detail = client.get_movie_by_id("tt1375666")

    assert detail == OmdbMovieDetail(
        title="Inception",
        year="2010",
        imdb_id="tt1375666",
        genre="Action, Sci-Fi, Thriller",
        director="Christopher Nolan",
        plot=INCEPTION_PAYLOAD["Plot"],
        runtime="148 min",
        imdb_rating=INCEPTION_PAYLOAD["imdbRating"],
        poster="N/A",
    )
    _args, kwargs = session.get.call_args
    assert kwargs["params"]["i"] == "tt1375666"
    assert kwargs["params"]["plot"] == "full"


def test_get_movie_by_id_returns_none_when_missing() -> None:
    client, _session = _client(_response({"Response": "False", "Error": "Incorrect IMDb ID."}))
    assert client.get_movie_by_id("tt0000000") is None


def test_get_movie_by_title_passes_year_for_disambiguation() -> None:
    client, session = _client(_response({**INCEPTION_PAYLOAD, "Title": "Dune", "Year": "1984"}))

    detail = client.get_movie_by_title("Dune", 1984)

    assert detail is not None and detail.year == "1984"
    _args, kwargs = session.get.call_args
    assert kwargs["params"]["t"] == "Dune"
    assert kwargs["params"]["y"] == 1984


def test_get_movie_by_title_without_year_omits_it() -> None:
    client, session = _client(_response(INCEPTION_PAYLOAD))

    client.get_movie_by_title("Inception")

    _args, kwargs = session.get.call_args
    assert "y" not in kwargs["params"]


def test_transport_failure_raises_network_error_tagged_with_operation() -> None:
    client, session = _client()
    session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(OmdbNetworkError) as excinfo:
        client.get_movie_by_id("tt1375666")

    assert excinfo.value.operation == "getMovieById"
    assert "getMovieById" in str(excinfo.value)
    session.get.assert_called_once()


def test_http_error_status_raises_network_error() -> None:
    client, _session = _client(_response(status_code=503, text="Service Unavailable"))

    with pytest.raises(OmdbNetworkError) as excinfo:
        client.search_movies("Inception")

    assert excinfo.value.status_code == 503
    assert excinfo.value.operation == "searchMovies"
    assert excinfo.value.body_snippet == "Service Unavailable"


def test_non_json_body_raises_parse_error() -> None:
    client, _session = _client(_response(text="<html>", json_error=True))

    with pytest.raises(OmdbParseError) as excinfo:
        client.get_movie_by_title("Inception")

    assert excinfo.value.operation == "getMovieByTitle"
    assert not isinstance(excinfo.value, OmdbNetworkError)


def test_non_object_body_raises_parse_error() -> None:
    client, _session = _client(_response(["not", "an", "object"]))

    with pytest.raises(OmdbParseError):
        client.search_movies("Inception")


def test_detail_missing_required_fields_raises_parse_error() -> None:
    client, _session = _client(_response({"Response": "True", "Year": "2010"}))

    with pytest.raises(OmdbParseError):
        client.get_movie_by_id("tt1375666")


def test_missing_api_key_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OMDB_API_KEY", raising=False)

    with pytest.raises(RuntimeError, match="OMDB_API_KEY"):
        HttpOmdbClient(session=MagicMock())


def test_api_key_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OMDB_API_KEY", "env-key")
    session = MagicMock()
    session.get.return_value = _response({"Response": "False"})

    client = HttpOmdbClient(session=session)
    client.search_movies("x")

    _args, kwargs = session.get.call_args
    assert kwargs["params"]["apikey"] == "env-key"
