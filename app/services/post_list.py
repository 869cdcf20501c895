"""
Post listing state: category filter, current page and the views derived from them.

The controller owns the loaded posts and the two pieces of user-driven state
(current category and current page). Every query is recomputed from that state
on each call; nothing is cached.
"""
from __future__ import annotations

import logging
import math
from typing import Any, List, Sequence, Union

from app.models.actions import SelectCategory, SelectPage
from app.models.post import (
    ALL_CATEGORIES,
    PAGE_GAP,
    CategoryOption,
    ListingView,
    PageLink,
    Pagination,
    PaginationItem,
    Post,
    PostCard,
)
from app.services.manifest_loader import LoadFailure, sort_newest_first


logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 6
FEATURED_LIMIT = 3


class PostListController:
    def __init__(self, posts: Sequence[Post] = (), *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be a positive integer")
        self.page_size = page_size
        self.all_posts: List[Post] = sort_newest_first(posts)
        self.current_category = ALL_CATEGORIES
        self.current_page = 1

    async def load(self, source: Any) -> int:
        """
        Replace the post set with the manifest behind ``source``.

        ``source`` is either an object with an async ``fetch()`` or an async
        callable. A LoadFailure leaves an empty post set behind instead of
        propagating.
        """
        fetch = getattr(source, "fetch", source)
        try:
            posts = await fetch()
        except LoadFailure as exc:
            logger.error("Error loading blog posts from %r: %s", source, exc)
            self.all_posts = []
            return 0

        self.all_posts = sort_newest_first(posts)
        logger.info("Loaded %d blog posts from %r", len(self.all_posts), source)
        return len(self.all_posts)

    def list_categories(self) -> List[str]:
        categories = [ALL_CATEGORIES]
        for post in self.all_posts:
            if post.category not in categories:
                categories.append(post.category)
        return categories

    def set_category(self, category: str) -> None:
        self.current_category = category
        self.current_page = 1

    def set_page(self, page: int) -> None:
        # Upper bound is the caller's concern; past the end yields an empty page.
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValueError(f"page must be a positive integer, got {page!r}")
        self.current_page = page

    def handle_action(self, action: Any) -> None:
        if isinstance(action, SelectCategory):
            self.set_category(action.category)
        elif isinstance(action, SelectPage):
            self.set_page(action.page)
        else:
            raise TypeError(f"Unsupported listing action: {action!r}")

    def filtered_posts(self) -> List[Post]:
        if self.current_category == ALL_CATEGORIES:
            return list(self.all_posts)
        return [post for post in self.all_posts if post.category == self.current_category]

    def page_count(self) -> int:
        return math.ceil(len(self.filtered_posts()) / self.page_size)

    def current_page_items(self) -> List[Post]:
        start = (self.current_page - 1) * self.page_size
        return self.filtered_posts()[start : start + self.page_size]

    def pagination_window(self) -> List[Union[int, object]]:
        """Page numbers to offer around the current page, with PAGE_GAP for skipped runs."""
        total = self.page_count()
        current = self.current_page
        window: List[Union[int, object]] = []
        for page in range(1, total + 1):
            if page == 1 or page == total or current - 1 <= page <= current + 1:
                window.append(page)
            elif page == current - 2 or page == current + 2:
                window.append(PAGE_GAP)
        return window

    def pagination(self) -> Pagination:
        total = self.page_count()
        if total <= 1:
            return Pagination()
        current = self.current_page
        items: List[PaginationItem] = [
            item if item is PAGE_GAP else PageLink(page=item, active=item == current)
            for item in self.pagination_window()
        ]
        return Pagination(
            items=items,
            previous_page=current - 1 if current > 1 else None,
            next_page=current + 1 if current < total else None,
            visible=True,
        )

    def featured_posts(self) -> List[Post]:
        return [post for post in self.all_posts if post.featured][:FEATURED_LIMIT]

    def recent_posts(self, count: int = 5) -> List[Post]:
        return self.all_posts[:count]

    def search_posts(self, query: str) -> List[Post]:
        return [post for post in self.all_posts if post.matches(query)]

    def listing_view(self, base_path: str = "") -> ListingView:
        return ListingView(
            categories=[
                CategoryOption(value=category, active=category == self.current_category)
                for category in self.list_categories()
            ],
            cards=[PostCard.from_post(post, base_path) for post in self.current_page_items()],
            pagination=self.pagination(),
            current_category=self.current_category,
            current_page=self.current_page,
            page_count=self.page_count(),
        )

    def render(self, renderer: Any, base_path: str = "") -> ListingView:
        view = self.listing_view(base_path)
        renderer.render(view)
        return view
