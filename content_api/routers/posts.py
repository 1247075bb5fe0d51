"""Static Markdown post endpoints."""

from typing import Literal

from fastapi import APIRouter, Path, Query, Response
from fastapi.responses import JSONResponse

from content_api.config import get_settings
from content_api.deps import DETAIL_CACHE_CONTROL, LIST_CACHE_CONTROL, get_static_posts
from content_api.models.blog import BlogDetail, BlogList, ErrorBody
from content_api.services.normalize import static_detail
from content_api.services.pagination import paginate, teaser
from content_api.services.static_content import get_static_repository

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=BlogList, response_model_exclude_none=True)
async def list_posts(
    response: Response,
    page: int = Query(default=1, ge=1),
    mode: Literal["full", "teaser"] = Query(
        default="full",
        description="'teaser' always returns the newest posts, ignoring page",
    ),
):
    """Get static posts, paginated, newest first."""
    settings = get_settings()
    posts = get_static_posts()
    if mode == "teaser":
        window = teaser(posts, settings.teaser_size)
    else:
        window = paginate(posts, settings.list_page_size, page)
    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return BlogList(data=window.items, meta=window.meta())


@router.get(
    "/{slug:path}",
    response_model=BlogDetail,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorBody}},
)
async def get_post(
    response: Response,
    slug: str = Path(..., min_length=1, max_length=200),
):
    """Get a single static post, including its Markdown body."""
    settings = get_settings()
    post = get_static_repository(settings.content_dir).get(slug)
    if post is None:
        return JSONResponse(status_code=404, content={"error": "Post not found"})
    response.headers["Cache-Control"] = DETAIL_CACHE_CONTROL
    return BlogDetail(data=static_detail(post, settings.static_locale))
