from __future__ import annotations

import argparse
import asyncio
import logging
import shutil
import sys
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

BASE_DIR = Path(__file__).resolve().parent.parent

sys.path.insert(0, str(BASE_DIR))

from app.config import STATIC_DIR, load_settings
from app.models.post import ALL_CATEGORIES
from app.services.manifest_builder import slugify
from app.services.manifest_loader import FileManifestSource
from app.services.post_list import PostListController
from app.services.renderer import TemplateRenderer, prepare_environment

DEFAULT_OUTPUT = BASE_DIR / "site"

logger = logging.getLogger(__name__)


def category_dirs(categories: Iterable[str]) -> Dict[str, str]:
    """Map each category to a folder name, suffixing slugs that collide."""
    dirs: Dict[str, str] = {}
    used: set[str] = set()
    for category in categories:
        if category == ALL_CATEGORIES or category in dirs:
            continue
        base = slugify(category)
        candidate = base
        counter = 2
        while candidate in used:
            candidate = f"{base}-{counter}"
            counter += 1
        used.add(candidate)
        dirs[category] = candidate
    return dirs


def build_url_factory(base_url: str, dirs: Optional[Dict[str, str]] = None) -> Callable[[str, int], str]:
    base = "/" if not base_url else f"/{base_url.strip('/')}/"
    dirs = dirs or {}

    def builder(category: str, page: int) -> str:
        if category == ALL_CATEGORIES:
            path = ""
        else:
            path = f"category/{dirs.get(category) or slugify(category)}/"
        if page != 1:
            path = f"{path}page/{page}/"
        return f"{base}{path}"

    return builder


def ensure_output_dir(output: Path, blog_dir: Path) -> None:
    if output.exists():
        shutil.rmtree(output)
    output.mkdir(parents=True, exist_ok=True)
    if STATIC_DIR.exists():
        shutil.copytree(STATIC_DIR, output / "static", dirs_exist_ok=True)
    if blog_dir.exists():
        shutil.copytree(blog_dir, output / "blog", dirs_exist_ok=True)
    (output / ".nojekyll").write_text("", encoding="utf-8")


def build_site(output_dir: Path, base_url: str, manifest: Path) -> int:
    """Render every category/page combination; returns the number of pages written."""
    settings = load_settings()
    controller = PostListController(page_size=settings.page_size)
    asyncio.run(controller.load(FileManifestSource(manifest)))

    url_builder = build_url_factory(base_url, category_dirs(controller.list_categories()))
    renderer = TemplateRenderer(prepare_environment(url_builder))
    base = url_builder(ALL_CATEGORIES, 1)

    ensure_output_dir(output_dir, settings.blog_static_dir)
    manifest_copy = output_dir / "blog" / manifest.name
    if manifest.exists() and not manifest_copy.exists():
        manifest_copy.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(manifest, manifest_copy)

    written = 0
    for category in controller.list_categories():
        controller.set_category(category)
        # An empty listing still gets its first page.
        for page in range(1, max(controller.page_count(), 1) + 1):
            controller.set_page(page)
            view = controller.listing_view(base_path=f"{base}blog/")
            destination = output_dir / url_builder(category, page)[len(base):] / "index.html"
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(
                renderer.render_page(view, static_prefix=f"{base}static/"),
                encoding="utf-8",
            )
            written += 1
    logger.info("Wrote %d listing pages to %s", written, output_dir)
    return written


def parse_args() -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Build static HTML listing pages for the blog.")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT, help="Output directory (default: ./site)")
    parser.add_argument("--base-url", type=str, default="", help="Sub-path the site is served from, e.g. the repo name.")
    parser.add_argument("--manifest", type=Path, default=settings.manifest_path, help="Path to posts.json")
    return parser.parse_args()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args()
    build_site(args.output.resolve(), args.base_url, args.manifest.resolve())


if __name__ == "__main__":
    main()
