from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple, Union


ALL_CATEGORIES = "all"


@dataclass(frozen=True, slots=True)
class Post:
    slug: str
    title: str
    excerpt: str
    author: str
    category: str
    date: date
    tags: Tuple[str, ...] = ()
    featured: bool = False

    @property
    def display_date(self) -> str:
        return f"{self.date:%B} {self.date.day}, {self.date.year}"

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on title, excerpt or any tag."""
        needle = term.lower()
        return (
            needle in self.title.lower()
            or needle in self.excerpt.lower()
            or any(needle in tag.lower() for tag in self.tags)
        )


class _PageGap:
    """Ellipsis marker between page numbers in a pagination window."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "PAGE_GAP"


PAGE_GAP = _PageGap()


@dataclass(frozen=True, slots=True)
class PostCard:
    slug: str
    url: str
    title: str
    excerpt: str
    author: str
    category: str
    tags: Tuple[str, ...]
    display_date: str
    iso_date: str
    featured: bool

    @classmethod
    def from_post(cls, post: Post, base_path: str = "") -> "PostCard":
        return cls(
            slug=post.slug,
            url=f"{base_path}{post.slug}",
            title=post.title,
            excerpt=post.excerpt,
            author=post.author,
            category=post.category,
            tags=post.tags,
            display_date=post.display_date,
            iso_date=post.date.isoformat(),
            featured=post.featured,
        )


@dataclass(frozen=True, slots=True)
class CategoryOption:
    value: str
    active: bool = False

    @property
    def label(self) -> str:
        return "All Posts" if self.value == ALL_CATEGORIES else self.value


@dataclass(frozen=True, slots=True)
class PageLink:
    page: int
    active: bool = False


PaginationItem = Union[PageLink, _PageGap]


@dataclass(frozen=True, slots=True)
class Pagination:
    items: List[PaginationItem] = field(default_factory=list)
    previous_page: Optional[int] = None
    next_page: Optional[int] = None
    visible: bool = False


@dataclass(frozen=True, slots=True)
class ListingView:
    categories: List[CategoryOption]
    cards: List[PostCard]
    pagination: Pagination
    current_category: str
    current_page: int
    page_count: int

    @property
    def is_empty(self) -> bool:
        return not self.cards
