"""
Uniform response envelope shared by every collection endpoint.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Meta(BaseModel):
    timestamp: str
    total: int | None = None
    page: int | None = None


class SuccessEnvelope(BaseModel, Generic[T]):
    success: bool = True
    data: T
    meta: Meta | None = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    data: None = None
    error: str
    meta: Meta | None = None


def _meta(total: int | None, page: int | None) -> dict[str, Any]:
    meta: dict[str, Any] = {"timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")}
    if total is not None:
        meta["total"] = total
    if page is not None:
        meta["page"] = page
    return meta


def success_response(data: Any, *, total: int | None = None, page: int | None = None) -> dict[str, Any]:
    return {"success": True, "data": data, "meta": _meta(total, page)}


def error_response(error: str, *, total: int | None = None, page: int | None = None) -> dict[str, Any]:
    return {"success": False, "data": None, "error": error, "meta": _meta(total, page)}
