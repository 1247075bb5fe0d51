"""
Agency Content API

Thin FastAPI backend serving the agency site's blog: static Markdown posts
and Directus CMS posts, normalized into one shape.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from content_api.config import get_settings
from content_api.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    configure_logging,
)
from content_api.routers import blog, feed, posts, sitemap, tags
from content_api.services.cms import CMSAuthError, CMSConfigError, CMSFetchError
from content_api.services.http_client import close_shared_client

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    if not settings.cms_configured:
        logger.warning("DIRECTUS_URL / DIRECTUS_TOKEN not set; CMS endpoints will fail")
    yield
    await close_shared_client()


app = FastAPI(
    title="Agency Content API",
    description="Blog content aggregated from Markdown files and a headless CMS",
    version=VERSION,
    lifespan=lifespan,
)

# Request IDs and security headers
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Routers
app.include_router(blog.router, prefix="/api")
app.include_router(posts.router, prefix="/api")
app.include_router(tags.router, prefix="/api")
app.include_router(feed.router, prefix="/api")
app.include_router(sitemap.router)


@app.exception_handler(CMSConfigError)
async def cms_config_error(request: Request, exc: CMSConfigError) -> JSONResponse:
    logger.error("CMS misconfigured: %s", exc)
    return JSONResponse(
        status_code=500, content={"error": "Server configuration error"}
    )


@app.exception_handler(CMSAuthError)
async def cms_auth_error(request: Request, exc: CMSAuthError) -> JSONResponse:
    logger.error("CMS rejected credentials: %s", exc)
    return JSONResponse(status_code=401, content={"error": "Authentication failed"})


@app.exception_handler(CMSFetchError)
async def cms_fetch_error(request: Request, exc: CMSFetchError) -> JSONResponse:
    logger.error(
        "CMS fetch failed for %s (upstream status %s): %s",
        request.url.path,
        exc.status_code,
        exc,
    )
    what = "post" if "slug" in request.path_params else "posts"
    return JSONResponse(
        status_code=500, content={"error": f"Failed to fetch blog {what}"}
    )


def _run_health_checks() -> dict[str, Any]:
    """Run all health checks, returning the full response body."""
    s = get_settings()
    checks = {
        "config": "ok" if s.cms_configured else "fail",
        "content": "ok" if Path(s.content_dir).is_dir() else "fail",
    }
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded: failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    return {
        "status": overall,
        "service": "agency-content-api",
        "version": VERSION,
        "checks": checks,
    }


@app.get("/api/health")
async def health_check() -> JSONResponse:
    """Health check verifying configuration and content directory."""
    return JSONResponse(content=_run_health_checks())
