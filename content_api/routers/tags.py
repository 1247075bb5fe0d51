"""Tag facet endpoints."""

from fastapi import APIRouter, Path, Query, Response
from fastapi.responses import JSONResponse

from content_api.config import get_settings
from content_api.deps import LIST_CACHE_CONTROL, get_static_posts
from content_api.models.blog import BlogList, ErrorBody, TagCount, TagList
from content_api.services.pagination import paginate
from content_api.services.tags import (
    count_tags,
    filter_by_tag,
    is_active_tag,
    sorted_tags,
    tag_slug,
)

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=TagList)
async def list_tags(
    response: Response,
    active: str | None = Query(
        default=None, max_length=100, description="Slug of the selected tag"
    ),
):
    """Get every tag with its post count, most used first."""
    counts = count_tags(get_static_posts())
    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return TagList(
        data=[
            TagCount(
                name=name,
                slug=tag_slug(name),
                count=count,
                active=is_active_tag(name, active),
            )
            for name, count in sorted_tags(counts)
        ]
    )


@router.get(
    "/{tag}",
    response_model=BlogList,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorBody}},
)
async def list_posts_for_tag(
    response: Response,
    tag: str = Path(..., min_length=1, max_length=100),
    page: int = Query(default=1, ge=1),
):
    """Get static posts carrying the tag whose slug is *tag*."""
    posts = filter_by_tag(get_static_posts(), tag)
    if not posts:
        return JSONResponse(status_code=404, content={"error": "Tag not found"})
    window = paginate(posts, get_settings().list_page_size, page)
    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return BlogList(data=window.items, meta=window.meta())
