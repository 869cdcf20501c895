from __future__ import annotations

import html
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import frontmatter
from markdown_it import MarkdownIt

from app.services.manifest_loader import normalize_tags, parse_date


logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "JJK Manga Blog"
EXCERPT_LENGTH = 160

_markdown = MarkdownIt("commonmark", {"html": True}).enable("table").enable("strikethrough")
_slug_pattern = re.compile(r"[^a-z0-9]+")
_tag_pattern = re.compile(r"<[^>]+>")


def build_manifest(content_dir: Path) -> Dict[str, List[Dict[str, Any]]]:
    """Collect front matter from every Markdown post under ``content_dir``."""
    entries: List[Dict[str, Any]] = []
    seen: Dict[str, Path] = {}

    if not content_dir.exists():
        logger.warning("Content directory %s does not exist", content_dir)
        return {"posts": []}

    for path in sorted(content_dir.rglob("*.md")):
        try:
            entry = _load_entry(path)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Failed to load post %s: %s", path, exc)
            continue

        if entry is None:
            continue

        if entry["slug"] in seen:
            logger.warning("Skipping %s: slug '%s' already used by %s", path, entry["slug"], seen[entry["slug"]])
            continue
        seen[entry["slug"]] = path
        entries.append(entry)

    entries.sort(key=lambda item: item["date"], reverse=True)
    return {"posts": entries}


def write_manifest(manifest: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(manifest, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _load_entry(path: Path) -> Optional[Dict[str, Any]]:
    parsed = frontmatter.load(path)
    meta = parsed.metadata or {}
    content = parsed.content.strip()

    if not content:
        logger.warning("Skipping empty post: %s", path)
        return None

    if meta.get("draft") or meta.get("published") is False:
        return None

    post_date = parse_date(meta.get("date"))
    if post_date is None:
        logger.warning("Skipping %s: missing or invalid date", path)
        return None

    title = str(meta.get("title") or "").strip()
    if not title:
        logger.warning("Skipping %s: missing title", path)
        return None

    slug = str(meta.get("slug") or slugify(path.stem))

    return {
        "slug": slug,
        "title": title,
        "excerpt": _extract_excerpt(meta, content),
        "author": str(meta.get("author") or DEFAULT_AUTHOR).strip(),
        "category": str(meta.get("category") or "").strip(),
        "tags": list(normalize_tags(meta.get("tags"))),
        "date": post_date.isoformat(),
        "featured": bool(meta.get("featured")),
    }


def slugify(value: str) -> str:
    normalized = value.strip().lower()
    normalized = _slug_pattern.sub("-", normalized)
    normalized = normalized.strip("-")
    return normalized or "post"


def _extract_excerpt(meta: dict, content: str) -> str:
    excerpt = meta.get("excerpt") or meta.get("summary") or meta.get("description")
    if isinstance(excerpt, str) and excerpt.strip():
        return excerpt.strip()

    rendered = _markdown.render(content)
    closing_index = rendered.find("</p>")
    if closing_index != -1:
        rendered = rendered[:closing_index]
    plain = html.unescape(_tag_pattern.sub("", rendered))
    plain = re.sub(r"\s+", " ", plain).strip()
    if len(plain) <= EXCERPT_LENGTH:
        return plain
    return f"{plain[:EXCERPT_LENGTH].rstrip()}..."
