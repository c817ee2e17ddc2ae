from __future__ import annotations

import logging
import os
from typing import Any, Mapping

import requests

from collection_backend.models.movies import OmdbMovieDetail, OmdbSearchPage, OmdbSearchResult

OMDB_API_BASE_URL = "https://www.omdbapi.com/"

logger = logging.getLogger(__name__)


class OmdbClientError(RuntimeError):
    def __init__(
        self,
        message: str,
        *,
        operation: str,
        status_code: int | None = None,
        body_snippet: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.body_snippet = body_snippet


class OmdbNetworkError(OmdbClientError):
    """OMDb could not be reached, or answered with a non-200 status."""


class OmdbParseError(OmdbClientError):
    """OMDb answered, but the body was not a usable JSON object."""


def _require_api_key(api_key: str | None) -> str:
    resolved = (api_key or os.getenv("OMDB_API_KEY") or "").strip()
    if not resolved:
        raise RuntimeError("OMDB_API_KEY is not set.")
    return resolved


def _is_no_match(payload: Mapping[str, Any]) -> bool:
    # OMDb reports "no match" in-band with HTTP 200: {"Response": "False", "Error": "Movie not found!"}
    return str(payload.get("Response", "")).strip().lower() == "false"


def _parse_total_results(value: Any) -> int:
    try:
        return int(str(value or "0").replace(",", ""))
    except ValueError:
        return 0


class HttpOmdbClient:
    """
    Thin wrapper around the OMDb API.

    Calls are not retried; a transient failure surfaces immediately as `OmdbNetworkError`.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        session: requests.Session | None = None,
        base_url: str = OMDB_API_BASE_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._api_key = _require_api_key(api_key)
        self._session = session or requests.Session()
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds

    def _request_json(self, params: Mapping[str, Any], *, operation: str) -> dict[str, Any]:
        headers = {"accept": "application/json"}
        query = {"apikey": self._api_key, **params}

        try:
            resp = self._session.get(self._base_url, params=query, headers=headers, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise OmdbNetworkError(f"OMDb network error during {operation}: {exc}", operation=operation) from exc

        if resp.status_code != 200:
            raise OmdbNetworkError(
                f"OMDb API error during {operation}: HTTP {resp.status_code}",
                operation=operation,
                status_code=resp.status_code,
                body_snippet=(resp.text or "")[:400],
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise OmdbParseError(
                f"OMDb invalid JSON during {operation}: {exc}",
                operation=operation,
                status_code=resp.status_code,
                body_snippet=(resp.text or "")[:400],
            ) from exc

        if not isinstance(payload, dict):
            raise OmdbParseError(
                f"OMDb returned unexpected JSON shape during {operation} (not an object).",
                operation=operation,
                status_code=resp.status_code,
            )
        return payload

    def _detail_from_payload(self, payload: dict[str, Any], *, operation: str) -> OmdbMovieDetail | None:
        if _is_no_match(payload):
            logger.debug("OMDb %s: no match (%s)", operation, payload.get("Error"))
            return None
        try:
            return OmdbMovieDetail.from_payload(payload)
        except KeyError as exc:
            raise OmdbParseError(f"OMDb payload missing {exc} during {operation}.", operation=operation) from exc

    def search_movies(self, query: str, page: int = 1) -> OmdbSearchPage:
        """Free-text search; a no-match answer yields an empty page rather than an error."""
        operation = "searchMovies"
        payload = self._request_json({"s": query, "type": "movie", "page": int(page)}, operation=operation)
        if _is_no_match(payload):
            return OmdbSearchPage(results=[], total_results=0)

        raw_results = payload.get("Search") or []
        if not isinstance(raw_results, list):
            raise OmdbParseError(f"OMDb `Search` is not a list during {operation}.", operation=operation)
        try:
            results = [OmdbSearchResult.from_payload(item) for item in raw_results if isinstance(item, dict)]
        except KeyError as exc:
            raise OmdbParseError(f"OMDb search result missing {exc} during {operation}.", operation=operation) from exc

        return OmdbSearchPage(results=results, total_results=_parse_total_results(payload.get("totalResults")))

    def get_movie_by_id(self, imdb_id: str) -> OmdbMovieDetail | None:
        operation = "getMovieById"
        payload = self._request_json({"i": str(imdb_id).strip(), "plot": "full"}, operation=operation)
        return self._detail_from_payload(payload, operation=operation)

    def get_movie_by_title(self, title: str, year: int | None = None) -> OmdbMovieDetail | None:
        """
        Exact-title lookup.

        Without `year`, OMDb picks one of the same-titled movies on its own; callers that
        need a specific release must pass the year.
        """

        operation = "getMovieByTitle"
        params: dict[str, Any] = {"t": title, "plot": "full"}
        if year:
            params["y"] = int(year)
        payload = self._request_json(params, operation=operation)
        return self._detail_from_payload(payload, operation=operation)
