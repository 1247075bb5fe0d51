"""Blog post data models shared by the static and CMS content sources."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PostStatus = Literal["draft", "published"]


class BlogPost(BaseModel):
    """Normalized blog post, identical in shape for every content source.

    ``content`` is only populated for detail views; list responses omit it.
    """

    slug: str
    title: str
    summary: str = ""
    content: str | None = None
    tags: list[str] = []
    date_published: datetime
    date_updated: datetime
    reading_time: float = 0
    views: int = Field(default=0, ge=0)
    images: list[str] = []
    language: str
    status: PostStatus = "published"


class AvailableLanguage(BaseModel):
    """One localized variant of a post."""

    code: str
    slug: str
    title: str


class BlogPostDetail(BlogPost):
    """Blog post with its body and the list of its language variants."""

    model_config = ConfigDict(populate_by_name=True)

    available_languages: list[AvailableLanguage] = Field(
        default=[], alias="availableLanguages"
    )


class PageMeta(BaseModel):
    """Pagination metadata for list responses."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")


class BlogList(BaseModel):
    """Paginated list response."""

    data: list[BlogPost]
    meta: PageMeta


class BlogDetail(BaseModel):
    """Single post response."""

    data: BlogPostDetail


class TagCount(BaseModel):
    """A tag with its number of published posts."""

    name: str
    slug: str
    count: int
    active: bool = False


class TagList(BaseModel):
    data: list[TagCount]


class ErrorBody(BaseModel):
    error: str
