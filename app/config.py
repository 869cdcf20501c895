from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
STATIC_DIR = BASE_DIR / "static"
TEMPLATES_DIR = BASE_DIR / "templates"
CONTENT_DIR = BASE_DIR / "content"

DEFAULT_MANIFEST_PATH = STATIC_DIR / "blog" / "posts.json"
DEFAULT_BLOG_STATIC_DIR = STATIC_DIR / "blog"
DEFAULT_BASE_PATH = "blog/"
DEFAULT_PAGE_SIZE = 6
DEFAULT_FETCH_TIMEOUT = 10.0


@dataclass(slots=True)
class Settings:
    manifest_url: Optional[str]
    manifest_path: Path
    blog_static_dir: Path
    base_path: str = DEFAULT_BASE_PATH
    page_size: int = DEFAULT_PAGE_SIZE
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if not raw:
        return default
    path = Path(raw).expanduser()
    return path if path.is_absolute() else BASE_DIR / path


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    if value < 1:
        logger.warning("Ignoring non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


def load_settings() -> Settings:
    """Read settings from the environment."""
    return Settings(
        manifest_url=os.getenv("BLOG_MANIFEST_URL") or None,
        manifest_path=_env_path("BLOG_MANIFEST_PATH", DEFAULT_MANIFEST_PATH),
        blog_static_dir=_env_path("BLOG_STATIC_DIR", DEFAULT_BLOG_STATIC_DIR),
        base_path=os.getenv("BLOG_BASE_PATH", DEFAULT_BASE_PATH),
        page_size=_env_int("BLOG_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        fetch_timeout=_env_float("BLOG_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
    )
