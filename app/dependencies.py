from __future__ import annotations

from fastapi import FastAPI, Request

from app.config import Settings
from app.services import manifest_loader
from app.services.post_list import PostListController


async def load_posts(app: FastAPI) -> int:
    """Load the manifest into ``app.state.posts``; an unreadable manifest leaves it empty."""
    settings: Settings = app.state.settings
    controller = PostListController(page_size=settings.page_size)
    count = await controller.load(manifest_loader.source_from_settings(settings))
    app.state.posts = controller.all_posts
    return count


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_controller(request: Request) -> PostListController:
    settings = get_settings(request)
    return PostListController(request.app.state.posts, page_size=settings.page_size)
