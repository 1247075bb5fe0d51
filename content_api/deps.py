"""Request-scoped dependencies shared by the routers."""

from content_api.config import get_settings
from content_api.models.blog import BlogPost
from content_api.services.cms import RemoteContentClient
from content_api.services.http_client import get_shared_client
from content_api.services.normalize import from_static
from content_api.services.static_content import get_static_repository

# Cache-Control hints; advisory only, nothing here caches in-process
LIST_CACHE_CONTROL = "public, s-maxage=300, stale-while-revalidate=600"
DETAIL_CACHE_CONTROL = "public, s-maxage=600, stale-while-revalidate=1200"
SITEMAP_CACHE_CONTROL = "public, s-maxage=3600"


def get_cms_client() -> RemoteContentClient:
    """CMS client bound to the current settings.

    Raises:
        CMSConfigError: If the Directus URL or token is missing.
    """
    settings = get_settings()
    return RemoteContentClient(settings, get_shared_client(settings.http_timeout))


def get_optional_cms_client() -> RemoteContentClient | None:
    """CMS client, or None when the CMS is not configured."""
    if not get_settings().cms_configured:
        return None
    return get_cms_client()


def get_static_posts() -> list[BlogPost]:
    """All published static posts as list-view BlogPosts, newest first."""
    settings = get_settings()
    repo = get_static_repository(settings.content_dir)
    return [from_static(p, settings.static_locale) for p in repo.all_posts()]
