"""
Collection Manager API - FastAPI application.

Provides endpoints for:
- Browsing and searching the local movie collection
- Looking up movies on OMDb
- Adding movies from OMDb (deduplicated by IMDb id) or manually
- Updating and deleting collection entries
"""
from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from api.envelope import error_response, success_response
from api.routers import movies
from collection_backend.integrations.omdb.client import OmdbClientError
from collection_backend.repositories.movies import MovieRepositoryError

logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()


def configure_logging() -> None:
    """Root logger setup; called on startup, never at import."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def get_cors_origins() -> list[str]:
    """
    Get CORS allowed origins from environment.
    Set CORS_ALLOW_ORIGINS as comma-separated list of origins.
    Example: CORS_ALLOW_ORIGINS=http://localhost:5173,http://localhost:3000
    """
    origins_str = os.getenv("CORS_ALLOW_ORIGINS", "")
    if not origins_str:
        return []
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    configure_logging()
    logger.info("Starting up Collection Manager API...")
    yield
    logger.info("Shutting down Collection Manager API...")


app = FastAPI(
    title="Collection Manager API",
    description="API for managing personal media collections. Currently supports movies with OMDb integration.",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration
# If no origins configured, allows all origins but disables credentials (safer default)
cors_origins = get_cors_origins()
allow_credentials = len(cors_origins) > 0  # Only allow credentials with explicit origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p not in ('body', 'query', 'path'))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content=error_response(message))


@app.exception_handler(OmdbClientError)
async def handle_omdb_error(request: Request, exc: OmdbClientError) -> JSONResponse:
    logger.error("OMDb error during %s: %s", exc.operation, exc)
    return JSONResponse(status_code=502, content=error_response(str(exc)))


@app.exception_handler(MovieRepositoryError)
async def handle_repository_error(request: Request, exc: MovieRepositoryError) -> JSONResponse:
    logger.error("Storage error: %s", exc)
    # Don't leak file paths to clients
    return JSONResponse(status_code=500, content=error_response("Internal Server Error"))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_response("Internal Server Error"))


# Include routers
app.include_router(movies.router, prefix="/api")


@app.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/docs")


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/health")
def api_health():
    """Health check endpoint with process uptime."""
    return success_response({"status": "ok", "uptime": round(time.monotonic() - _STARTED_AT, 3)})
