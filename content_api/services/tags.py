"""Tag facets: occurrence counts and slug matching over the post collection."""

import re
from collections.abc import Iterable

from content_api.models.blog import BlogPost

# Anything that is not a word character, whitespace or hyphen is dropped
_STRIP_RE = re.compile(r"[^\w\s-]", re.UNICODE)
_SPACE_RE = re.compile(r"\s")


def tag_slug(name: str) -> str:
    """Return the URL form of a tag name: ``"Next.js Tips"`` -> ``"nextjs-tips"``.

    Mirrors github-slugger: lowercase, punctuation removed, each whitespace
    character replaced by a hyphen.
    """
    text = name.strip().lower()
    text = _STRIP_RE.sub("", text)
    return _SPACE_RE.sub("-", text)


def count_tags(posts: Iterable[BlogPost]) -> dict[str, int]:
    """Count tag occurrences across all published posts in a single pass.

    Tags are grouped by slug, so "React" and "react" form one facet listed
    under the first spelling seen.
    """
    names: dict[str, str] = {}
    counts: dict[str, int] = {}
    for post in posts:
        if post.status == "draft":
            continue
        for tag in post.tags:
            name = names.setdefault(tag_slug(tag), tag)
            counts[name] = counts.get(name, 0) + 1
    return counts


def sorted_tags(counts: dict[str, int]) -> list[tuple[str, int]]:
    """Order tags by count, most used first. Ties keep first-seen order."""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def is_active_tag(name: str, active_slug: str | None) -> bool:
    """True if *name* is the tag currently selected by *active_slug*."""
    if not active_slug:
        return False
    return tag_slug(name) == active_slug.strip().lower()


def filter_by_tag(posts: Iterable[BlogPost], slug: str) -> list[BlogPost]:
    """Published posts carrying a tag whose slug form equals *slug*."""
    return [
        p
        for p in posts
        if p.status != "draft" and any(is_active_tag(t, slug) for t in p.tags)
    ]
