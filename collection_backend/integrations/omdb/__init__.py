"""
OMDb integration clients.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collection_backend.integrations.omdb.client import (
        HttpOmdbClient,
        OmdbClientError,
        OmdbNetworkError,
        OmdbParseError,
    )

__all__ = [
    "HttpOmdbClient",
    "OmdbClientError",
    "OmdbNetworkError",
    "OmdbParseError",
]


def __getattr__(name: str):
    if name in __all__:
        from collection_backend.integrations.omdb import client

        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
