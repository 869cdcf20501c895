from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from app.config import Settings
from app.dependencies import get_controller, get_settings
from app.models.actions import SelectCategory, SelectPage
from app.models.post import ALL_CATEGORIES
from app.services.post_list import PostListController
from app.services.renderer import TemplateRenderer


router = APIRouter()
renderer = TemplateRenderer()


@router.get("/", response_class=HTMLResponse, name="homepage")
def homepage(
    category: str = Query(ALL_CATEGORIES),
    page: int = Query(1, ge=1),
    controller: PostListController = Depends(get_controller),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    controller.handle_action(SelectCategory(category))
    controller.handle_action(SelectPage(page))
    view = controller.listing_view(base_path=settings.base_path)
    return HTMLResponse(renderer.render_page(view))
