"""XML sitemap for the public site."""

import html
from collections.abc import Iterable
from datetime import date

from content_api.models.blog import BlogPost

SECTION_ROUTES = ["", "blog", "projects", "tags"]


def _url_entry(loc: str, lastmod: str, changefreq: str, priority: float) -> str:
    return (
        "<url>"
        f"<loc>{html.escape(loc)}</loc>"
        f"<lastmod>{lastmod}</lastmod>"
        f"<changefreq>{changefreq}</changefreq>"
        f"<priority>{priority}</priority>"
        "</url>"
    )


def build_sitemap(site_url: str, posts: Iterable[BlogPost], today: date) -> str:
    """Render the sitemap: section pages first, then every published post."""
    base = site_url.rstrip("/")
    entries = [
        _url_entry(f"{base}/{route}", today.isoformat(), "daily", 0.7)
        for route in SECTION_ROUTES
    ]
    entries.extend(
        _url_entry(
            f"{base}/blog/{post.slug}",
            post.date_updated.date().isoformat(),
            "monthly",
            0.8,
        )
        for post in posts
        if post.status != "draft"
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        + "".join(entries)
        + "</urlset>"
    )
