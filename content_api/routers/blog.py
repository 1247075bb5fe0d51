"""CMS blog endpoints."""

from fastapi import APIRouter, Depends, Path, Query, Response
from fastapi.responses import JSONResponse

from content_api.config import get_settings
from content_api.deps import DETAIL_CACHE_CONTROL, LIST_CACHE_CONTROL, get_cms_client
from content_api.models.blog import BlogDetail, BlogList, ErrorBody
from content_api.services.cms import RemoteContentClient

router = APIRouter(prefix="/blog", tags=["blog"])


@router.get("", response_model=BlogList, response_model_exclude_none=True)
async def list_blog_posts(
    response: Response,
    lang: str | None = Query(default=None, max_length=20),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    cms: RemoteContentClient = Depends(get_cms_client),
):
    """Get one page of published CMS posts in the requested language."""
    locale = lang or get_settings().default_locale
    posts, meta = await cms.list_posts(locale, page, limit)
    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return BlogList(data=posts, meta=meta)


@router.get(
    "/{slug}",
    response_model=BlogDetail,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorBody}},
)
async def get_blog_post(
    response: Response,
    slug: str = Path(..., min_length=1, max_length=200),
    lang: str | None = Query(default=None, max_length=20),
    cms: RemoteContentClient = Depends(get_cms_client),
):
    """Get a single CMS post by slug. Counts as a view."""
    locale = lang or get_settings().default_locale
    post = await cms.get_post(locale, slug)
    if post is None:
        return JSONResponse(status_code=404, content={"error": "Post not found"})
    response.headers["Cache-Control"] = DETAIL_CACHE_CONTROL
    return BlogDetail(data=post)
