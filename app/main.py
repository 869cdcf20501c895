from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import STATIC_DIR, Settings, load_settings
from .dependencies import load_posts
from .routers import api, pages


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await load_posts(app)
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="JJK Manga Blog", lifespan=lifespan)
    app.state.settings = settings or load_settings()
    app.state.posts = []

    app.include_router(pages.router)
    app.include_router(api.router)

    app.mount("/static", StaticFiles(directory=STATIC_DIR, check_dir=False), name="static")
    app.mount(
        "/blog",
        StaticFiles(directory=app.state.settings.blog_static_dir, html=True, check_dir=False),
        name="blog",
    )

    @app.get("/health")
    async def healthcheck() -> dict:
        return {"status": "ok", "posts": len(app.state.posts)}

    return app


app = create_app()
