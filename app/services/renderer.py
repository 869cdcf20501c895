from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional, Protocol
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import TEMPLATES_DIR
from app.models.post import ALL_CATEGORIES, PAGE_GAP, ListingView


ListingUrlBuilder = Callable[[str, int], str]

FRAGMENTS = {
    "categories": "partials/categories.html",
    "posts": "partials/posts.html",
    "pagination": "partials/pagination.html",
}


class Renderer(Protocol):
    def render(self, view: ListingView) -> None:
        ...


def query_string_urls(category: str, page: int) -> str:
    params: Dict[str, object] = {}
    if category != ALL_CATEGORIES:
        params["category"] = category
    if page != 1:
        params["page"] = page
    return f"?{urlencode(params)}" if params else "?"


def prepare_environment(
    listing_url: ListingUrlBuilder = query_string_urls,
    templates_dir: Path = TEMPLATES_DIR,
) -> Environment:
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=select_autoescape(["html"]),
    )
    env.globals["listing_url"] = listing_url
    env.globals["PAGE_GAP"] = PAGE_GAP
    return env


class TemplateRenderer:
    """Render a listing view into the three HTML fragments of the blog page."""

    def __init__(self, env: Optional[Environment] = None) -> None:
        self.env = env or prepare_environment()
        self.fragments: Dict[str, str] = {}

    def render_fragments(self, view: ListingView) -> Dict[str, str]:
        return {
            name: self.env.get_template(template).render(view=view)
            for name, template in FRAGMENTS.items()
        }

    def render(self, view: ListingView) -> None:
        self.fragments = self.render_fragments(view)

    def render_page(self, view: ListingView, template: str = "index.html", **context) -> str:
        """Render a full page without touching ``fragments``."""
        fragments = self.render_fragments(view)
        return self.env.get_template(template).render(view=view, fragments=fragments, **context)
