"""Static Markdown post loader.

Reads ``*.md`` / ``*.mdx`` files with YAML front-matter from the content
directory into typed records. The parsed collection is cached and only
re-read when a file is added, removed or modified on disk.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

import frontmatter
import yaml

logger = logging.getLogger(__name__)

POST_SUFFIXES = (".md", ".mdx")

# Average adult silent reading speed
WORDS_PER_MINUTE = 200


@dataclass
class StaticPost:
    """A post compiled from a Markdown file."""

    slug: str
    title: str
    date: datetime
    body: str
    lastmod: datetime | None = None
    tags: list[str] = field(default_factory=list)
    summary: str | None = None
    images: list[str] = field(default_factory=list)
    draft: bool = False
    reading_time: float | None = None
    path: str = ""


def _coerce_datetime(value: Any) -> datetime | None:
    """Accept YAML dates, datetimes and ISO strings; always return UTC-aware."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def estimate_reading_time(body: str) -> float:
    """Minutes needed to read *body*, rounded up to one decimal place."""
    words = len(body.split())
    return math.ceil(words / WORDS_PER_MINUTE * 10) / 10


def parse_post(path: Path, root: Path) -> StaticPost:
    """Parse a single Markdown file into a StaticPost.

    Raises:
        ValueError: If the front-matter lacks a title or date.
        yaml.YAMLError: If the front-matter is not valid YAML.
    """
    post = frontmatter.load(str(path))
    meta = post.metadata

    title = meta.get("title")
    published = _coerce_datetime(meta.get("date"))
    if not title or published is None:
        raise ValueError(f"{path}: front-matter requires 'title' and 'date'")

    slug = path.relative_to(root).with_suffix("").as_posix()
    return StaticPost(
        slug=slug,
        title=str(title),
        date=published,
        body=post.content,
        lastmod=_coerce_datetime(meta.get("lastmod")),
        tags=_as_list(meta.get("tags")),
        summary=meta.get("summary"),
        images=_as_list(meta.get("images")),
        draft=bool(meta.get("draft", False)),
        reading_time=estimate_reading_time(post.content),
        path=str(path),
    )


class StaticContentRepository:
    """Build-time style collection of Markdown posts, newest first, no drafts."""

    def __init__(self, content_dir: str | Path) -> None:
        self._root = Path(content_dir)
        self._posts: list[StaticPost] = []
        self._snapshot: dict[str, float] | None = None

    def _scan(self) -> dict[str, float]:
        if not self._root.is_dir():
            return {}
        return {
            str(p): p.stat().st_mtime
            for p in self._root.rglob("*")
            if p.is_file() and p.suffix in POST_SUFFIXES
        }

    def _load(self) -> list[StaticPost]:
        """Return every parseable post, drafts included, sorted newest first."""
        snapshot = self._scan()
        if snapshot == self._snapshot:
            return self._posts

        posts: list[StaticPost] = []
        for path_str in sorted(snapshot):
            try:
                posts.append(parse_post(Path(path_str), self._root))
            except (ValueError, yaml.YAMLError) as exc:
                logger.warning("Skipping unparseable post %s: %s", path_str, exc)

        posts.sort(key=lambda p: p.date, reverse=True)
        logger.info("Loaded %d static posts from %s", len(posts), self._root)
        self._posts = posts
        self._snapshot = snapshot
        return posts

    def all_posts(self) -> list[StaticPost]:
        """Published posts, most recent first."""
        return [p for p in self._load() if not p.draft]

    def get(self, slug: str) -> StaticPost | None:
        """Look up a published post by slug."""
        for post in self.all_posts():
            if post.slug == slug:
                return post
        return None


# Lazy singleton; lives for the process lifetime
_repository: StaticContentRepository | None = None


def get_static_repository(content_dir: str | Path) -> StaticContentRepository:
    """Return the shared repository, recreating it if the directory changed."""
    global _repository
    if _repository is None or _repository._root != Path(content_dir):
        _repository = StaticContentRepository(content_dir)
    return _repository
