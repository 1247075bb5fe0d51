"""Sitemap endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import Response

from content_api.config import get_settings
from content_api.deps import SITEMAP_CACHE_CONTROL, get_static_posts
from content_api.services.sitemap import build_sitemap

router = APIRouter(tags=["sitemap"])


@router.get("/sitemap.xml")
async def sitemap() -> Response:
    """Serve the XML sitemap of section pages and published posts."""
    today = datetime.now(timezone.utc).date()
    body = build_sitemap(get_settings().site_url, get_static_posts(), today)
    return Response(
        content=body,
        media_type="application/xml",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )
