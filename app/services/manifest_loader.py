from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import httpx
import yaml

from app.config import Settings
from app.models.post import Post


logger = logging.getLogger(__name__)

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S%z")


class LoadFailure(Exception):
    """The manifest could not be fetched or does not have the expected shape."""


def parse_manifest(payload: Any) -> List[Post]:
    if not isinstance(payload, dict):
        raise LoadFailure("Manifest must be an object with a 'posts' list")
    entries = payload.get("posts")
    if not isinstance(entries, list):
        raise LoadFailure("Manifest 'posts' must be a list")

    posts: List[Post] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        post = _parse_entry(entry, index)
        if post.slug in seen:
            raise LoadFailure(f"Duplicate slug '{post.slug}' in manifest")
        seen.add(post.slug)
        posts.append(post)
    return posts


def parse_manifest_text(text: str, *, fmt: str = "json") -> List[Post]:
    try:
        if fmt in {"yaml", "yml"}:
            payload = yaml.safe_load(text)
        else:
            payload = json.loads(text)
        # An impossible YAML date such as 2024-13-45 surfaces as ValueError.
        return parse_manifest(payload)
    except (ValueError, yaml.YAMLError) as exc:
        raise LoadFailure(f"Manifest is not valid {fmt}: {exc}") from exc


class HttpManifestSource:
    """Fetch the manifest over HTTP."""

    def __init__(self, url: str, *, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client

    def __repr__(self) -> str:
        return f"HttpManifestSource({self.url!r})"

    async def fetch(self) -> List[Post]:
        try:
            if self._client is not None:
                response = await self._client.get(self.url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url)
        except httpx.HTTPError as exc:
            raise LoadFailure(f"Failed to load posts from {self.url}: {exc}") from exc

        if not response.is_success:
            raise LoadFailure(f"Failed to load posts from {self.url}: HTTP {response.status_code}")
        fmt = "yaml" if self.url.endswith((".yaml", ".yml")) else "json"
        return parse_manifest_text(response.text, fmt=fmt)


class FileManifestSource:
    """Read the manifest from the local filesystem."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FileManifestSource({str(self.path)!r})"

    async def fetch(self) -> List[Post]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadFailure(f"Failed to read manifest {self.path}: {exc}") from exc
        fmt = self.path.suffix.lstrip(".").lower() or "json"
        return parse_manifest_text(text, fmt=fmt)


def source_from_settings(settings: Settings):
    if settings.manifest_url:
        return HttpManifestSource(settings.manifest_url, timeout=settings.fetch_timeout)
    return FileManifestSource(settings.manifest_path)


def _parse_entry(entry: Any, index: int) -> Post:
    if not isinstance(entry, dict):
        raise LoadFailure(f"Post #{index} is not an object")

    slug = _required_text(entry, "slug", index)
    title = _required_text(entry, "title", index)

    raw_date = entry.get("date")
    if raw_date is None:
        raise LoadFailure(f"Post '{slug}' is missing 'date'")
    post_date = parse_date(raw_date)
    if post_date is None:
        raise LoadFailure(f"Post '{slug}' has an unrecognized date {raw_date!r}")

    return Post(
        slug=slug,
        title=title,
        excerpt=_optional_text(entry.get("excerpt")),
        author=_optional_text(entry.get("author")),
        category=_optional_text(entry.get("category")),
        date=post_date,
        tags=normalize_tags(entry.get("tags")),
        featured=bool(entry.get("featured", False)),
    )


def _required_text(entry: dict, key: str, index: int) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise LoadFailure(f"Post #{index} is missing '{key}'")
    return value.strip()


def _optional_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            logger.warning("Unrecognized date format '%s'", value)
            return None

    return None


def normalize_tags(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value.strip(),) if value.strip() else ()
    if isinstance(value, Iterable):
        tags: List[str] = []
        for item in value:
            if isinstance(item, str) and item.strip():
                tags.append(item.strip())
        return tuple(tags)
    return ()


def sort_newest_first(posts: Sequence[Post]) -> List[Post]:
    return sorted(posts, key=lambda post: post.date, reverse=True)
