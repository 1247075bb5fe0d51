"""Merged static + CMS feed endpoint."""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response

from content_api.config import get_settings
from content_api.deps import (
    LIST_CACHE_CONTROL,
    get_optional_cms_client,
    get_static_posts,
)
from content_api.models.blog import BlogList
from content_api.services.cms import RemoteContentClient
from content_api.services.feed import build_feed
from content_api.services.pagination import paginate, teaser

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=BlogList, response_model_exclude_none=True)
async def get_feed(
    response: Response,
    lang: str | None = Query(default=None, max_length=20),
    page: int = Query(default=1, ge=1),
    mode: Literal["full", "teaser"] = Query(default="full"),
    cms: RemoteContentClient | None = Depends(get_optional_cms_client),
):
    """Get static and CMS posts as one feed, newest first.

    CMS failures degrade to the static posts alone.
    """
    settings = get_settings()
    locale = lang or settings.default_locale
    posts = await build_feed(
        get_static_posts(), cms, locale, settings.feed_remote_limit
    )
    if mode == "teaser":
        window = teaser(posts, settings.teaser_size)
    else:
        window = paginate(posts, settings.list_page_size, page)
    response.headers["Cache-Control"] = LIST_CACHE_CONTROL
    return BlogList(data=window.items, meta=window.meta())
