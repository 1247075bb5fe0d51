"""Map static and CMS post records onto the shared BlogPost shape.

Listing and detail code only ever sees ``BlogPost``; these constructors are
the one place that knows where a post came from.
"""

from datetime import datetime, timezone
from typing import Any

from content_api.models.blog import AvailableLanguage, BlogPost, BlogPostDetail
from content_api.services.static_content import StaticPost


def from_static(
    post: StaticPost, language: str, *, include_content: bool = False
) -> BlogPost:
    """Normalize a Markdown post. Static posts never track views."""
    return BlogPost(
        slug=post.slug,
        title=post.title,
        summary=post.summary or "",
        content=post.body if include_content else None,
        tags=list(post.tags),
        date_published=post.date,
        date_updated=post.lastmod or post.date,
        reading_time=post.reading_time or 0,
        views=0,
        images=list(post.images),
        language=language,
        status="draft" if post.draft else "published",
    )


def static_detail(post: StaticPost, language: str) -> BlogPostDetail:
    """Detail view of a static post; its only variant is itself."""
    base = from_static(post, language, include_content=True)
    return BlogPostDetail(
        **base.model_dump(),
        available_languages=[
            AvailableLanguage(code=language, slug=post.slug, title=post.title)
        ],
    )


def _parse_cms_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # Directus "datetime" fields carry no offset; they are stored as UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def from_remote(
    entry: dict[str, Any],
    translation: dict[str, Any],
    tags: list[str],
    images: list[str],
    *,
    include_content: bool = False,
) -> BlogPost:
    """Normalize a CMS ``blog_posts`` entry in the language of *translation*.

    *tags* and *images* must already be resolved to names and URLs.

    Raises:
        ValueError: If the entry carries no usable publish or creation date.
    """
    published = _parse_cms_datetime(entry.get("date_published")) or _parse_cms_datetime(
        entry.get("date_created")
    )
    if published is None:
        raise ValueError(f"CMS entry {entry.get('id')!r} has no publish date")
    updated = _parse_cms_datetime(entry.get("date_updated")) or published

    return BlogPost(
        slug=(translation.get("slug") or "").strip(),
        title=translation.get("title") or "",
        summary=translation.get("summary") or "",
        content=translation.get("content") if include_content else None,
        tags=tags,
        date_published=published,
        date_updated=updated,
        reading_time=entry.get("reading_time") or 0,
        views=entry.get("views") or 0,
        images=images,
        language=translation.get("languages_code") or "",
        status=entry.get("status") or "published",
    )
