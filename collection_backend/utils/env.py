from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATA_FILE = REPO_ROOT / "data" / "movies.json"

logger = logging.getLogger(__name__)


def load_env(*, override: bool = False) -> Path | None:
    candidates = [
        REPO_ROOT / ".env",
        Path.cwd() / ".env",
    ]
    for path in candidates:
        if path.is_file():
            load_dotenv(dotenv_path=path, override=override)
            return path
    return None


def resolve_data_file(value: str | None = None) -> Path:
    """Explicit value, then `MOVIES_DATA_FILE`, then `data/movies.json` under the repo root."""
    raw = (value or os.getenv("MOVIES_DATA_FILE") or "").strip()
    return Path(raw).expanduser() if raw else DEFAULT_DATA_FILE


def env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default
