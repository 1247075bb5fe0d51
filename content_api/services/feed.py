"""Merged feed of static and CMS posts."""

import logging
from collections.abc import Iterable

from content_api.models.blog import BlogPost
from content_api.services.cms import CMSError, RemoteContentClient

logger = logging.getLogger(__name__)


async def build_feed(
    static_posts: Iterable[BlogPost],
    remote: RemoteContentClient | None,
    locale: str,
    remote_limit: int = 100,
) -> list[BlogPost]:
    """Combine both content sources into one list, newest first.

    The CMS side is optional: when it is unconfigured (*remote* is None) or
    fails, the feed holds the static posts alone.
    """
    posts = [p for p in static_posts if p.status != "draft"]
    if remote is not None:
        try:
            remote_posts, _meta = await remote.list_posts(locale, 1, remote_limit)
            posts.extend(remote_posts)
        except CMSError as exc:
            logger.warning("CMS unavailable, serving static feed only: %s", exc)
    posts.sort(key=lambda p: p.date_published, reverse=True)
    return posts
