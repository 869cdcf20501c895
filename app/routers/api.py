from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, Request

from app.config import Settings
from app.dependencies import get_controller, get_settings, load_posts
from app.models.actions import SelectCategory, SelectPage
from app.models.post import ALL_CATEGORIES, PAGE_GAP, ListingView, Post, PostCard
from app.services.post_list import PostListController


router = APIRouter(prefix="/api")


def _cards(posts: List[Post], base_path: str) -> List[Dict[str, Any]]:
    return [asdict(PostCard.from_post(post, base_path)) for post in posts]


def listing_payload(view: ListingView) -> Dict[str, Any]:
    pagination = view.pagination
    return {
        "category": view.current_category,
        "page": view.current_page,
        "page_count": view.page_count,
        "categories": [
            {"value": option.value, "label": option.label, "active": option.active}
            for option in view.categories
        ],
        "posts": [asdict(card) for card in view.cards],
        "pagination": {
            "visible": pagination.visible,
            "previous": pagination.previous_page,
            "next": pagination.next_page,
            # None marks an ellipsis between page numbers.
            "items": [None if item is PAGE_GAP else asdict(item) for item in pagination.items],
        },
    }


@router.get("/posts", name="api_posts")
def list_posts(
    category: str = Query(ALL_CATEGORIES),
    page: int = Query(1, ge=1),
    controller: PostListController = Depends(get_controller),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    controller.handle_action(SelectCategory(category))
    controller.handle_action(SelectPage(page))
    return listing_payload(controller.listing_view(base_path=settings.base_path))


@router.get("/posts/search", name="api_search")
def search_posts(
    q: str = Query(""),
    controller: PostListController = Depends(get_controller),
    settings: Settings = Depends(get_settings),
) -> List[Dict[str, Any]]:
    return _cards(controller.search_posts(q), settings.base_path)


@router.get("/posts/featured", name="api_featured")
def featured_posts(
    controller: PostListController = Depends(get_controller),
    settings: Settings = Depends(get_settings),
) -> List[Dict[str, Any]]:
    return _cards(controller.featured_posts(), settings.base_path)


@router.get("/posts/recent", name="api_recent")
def recent_posts(
    count: int = Query(5, ge=0),
    controller: PostListController = Depends(get_controller),
    settings: Settings = Depends(get_settings),
) -> List[Dict[str, Any]]:
    return _cards(controller.recent_posts(count), settings.base_path)


@router.post("/reload", name="api_reload")
async def reload_posts(request: Request) -> Dict[str, int]:
    count = await load_posts(request.app)
    return {"posts": count}
