"""Directus CMS client for localized, paginated blog entries.

Entries live in ``blog_posts`` with per-language rows in
``blog_posts_translations``. Tags and images are many-to-many relations:
the entry stores junction row ids, which resolve through
``blog_posts_tags`` -> ``tags`` and ``blog_posts_files`` -> a file id served
from ``/assets/<id>``.
"""

import asyncio
import json
import logging
from typing import Any

import httpx

from content_api.config import Settings
from content_api.models.blog import (
    AvailableLanguage,
    BlogPost,
    BlogPostDetail,
    PageMeta,
)
from content_api.services.http_client import cms_headers
from content_api.services.normalize import from_remote
from content_api.services.pagination import Page

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid user credentials."

_ENTRY_FIELDS = [
    "id",
    "status",
    "date_created",
    "date_updated",
    "date_published",
    "reading_time",
    "tags",
    "views",
    "images",
]
_TRANSLATION_FIELDS = ["id", "title", "slug", "summary", "languages_code"]

LIST_FIELDS = _ENTRY_FIELDS + [f"translations.{f}" for f in _TRANSLATION_FIELDS]
DETAIL_FIELDS = LIST_FIELDS + ["translations.content"]

PUBLISHED_FILTER = {"status": {"_eq": "published"}}


class CMSError(Exception):
    """Base class for CMS failures."""


class CMSConfigError(CMSError):
    """Directus URL or token is not configured."""


class CMSAuthError(CMSError):
    """Directus rejected the access token."""


class CMSFetchError(CMSError):
    """Any other upstream failure: transport, status or payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RelationResolutionError(CMSFetchError):
    """An entry references a tag or file junction row that does not exist."""


def _error_message(resp: httpx.Response) -> str:
    """Extract the first Directus error message from a response, if any."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    errors = body.get("errors") if isinstance(body, dict) else None
    if errors and isinstance(errors, list):
        return str(errors[0].get("message", ""))
    return ""


def pick_translation(
    translations: list[dict[str, Any]] | None,
    locale: str,
    slug: str | None = None,
) -> dict[str, Any] | None:
    """Choose the variant for *locale*, else the one matching *slug*, else the first."""
    if not translations:
        return None
    for t in translations:
        if t.get("languages_code") == locale:
            return t
    if slug is not None:
        for t in translations:
            if (t.get("slug") or "").strip() == slug:
                return t
    return translations[0]


class RemoteContentClient:
    """Read blog entries from Directus and normalize them to BlogPost.

    One instance per request; the underlying httpx client is shared.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        if not settings.cms_configured:
            raise CMSConfigError("DIRECTUS_URL and DIRECTUS_TOKEN must be set")
        self._base_url = settings.directus_url.rstrip("/")
        self._headers = cms_headers(settings)
        self._client = client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send one Directus request and return the decoded JSON object.

        Raises:
            CMSAuthError: On 401 or an invalid-credentials error body.
            CMSFetchError: On transport errors, other non-2xx statuses or
                a body that is not a JSON object.
        """
        url = f"{self._base_url}{path}"
        try:
            resp = await self._client.request(
                method, url, headers=self._headers, params=params, json=body
            )
        except httpx.HTTPError as exc:
            raise CMSFetchError(f"{method} {path}: {exc!r}") from exc

        if not resp.is_success:
            message = _error_message(resp)
            if resp.status_code == 401 or message == INVALID_CREDENTIALS:
                raise CMSAuthError(f"{method} {path}: {message or resp.status_code}")
            raise CMSFetchError(
                f"{method} {path}: {resp.status_code} {message}".rstrip(),
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as exc:
            raise CMSFetchError(
                f"{method} {path}: invalid JSON", status_code=resp.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise CMSFetchError(
                f"{method} {path}: unexpected payload", status_code=resp.status_code
            )
        return payload

    async def _read_items(
        self, collection: str, fields: list[str], **params: str
    ) -> list[dict[str, Any]]:
        payload = await self._request(
            "GET",
            f"/items/{collection}",
            params={"fields": ",".join(fields), "limit": "-1", **params},
        )
        data = payload.get("data")
        if not isinstance(data, list):
            raise CMSFetchError(f"GET /items/{collection}: 'data' is not a list")
        return data

    async def _fetch_relations(
        self,
    ) -> tuple[dict[Any, Any], dict[Any, str], dict[Any, Any]]:
        """Fetch tag and file lookup tables concurrently.

        Returns (tag junction id -> tag id, tag id -> name,
        file junction id -> file id).
        """
        try:
            async with asyncio.TaskGroup() as tg:
                post_tags = tg.create_task(
                    self._read_items(
                        "blog_posts_tags", ["id", "blog_posts_id", "tags_id"]
                    )
                )
                tags = tg.create_task(self._read_items("tags", ["id", "name", "slug"]))
                post_files = tg.create_task(
                    self._read_items(
                        "blog_posts_files", ["id", "blog_posts_id", "directus_files_id"]
                    )
                )
        except ExceptionGroup as group:
            # Remaining lookups are cancelled; report the first failure
            raise group.exceptions[0]

        try:
            return (
                {r["id"]: r.get("tags_id") for r in post_tags.result()},
                {r["id"]: r.get("name") for r in tags.result()},
                {r["id"]: r.get("directus_files_id") for r in post_files.result()},
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise CMSFetchError(f"malformed relation row: {exc!r}") from exc

    def _resolve(
        self,
        entry: dict[str, Any],
        relations: tuple[dict[Any, Any], dict[Any, str], dict[Any, Any]],
    ) -> tuple[list[str], list[str]]:
        """Turn an entry's junction ids into tag names and asset URLs.

        Raises:
            RelationResolutionError: If any id has no matching row.
        """
        tag_junctions, tag_names, file_junctions = relations
        entry_id = entry.get("id")

        tags: list[str] = []
        for junction_id in entry.get("tags") or []:
            tag_id = tag_junctions.get(junction_id)
            name = tag_names.get(tag_id) if tag_id is not None else None
            if name is None:
                raise RelationResolutionError(
                    f"blog_posts {entry_id}: unresolved tag relation {junction_id!r}"
                )
            tags.append(name)

        images: list[str] = []
        for junction_id in entry.get("images") or []:
            file_id = file_junctions.get(junction_id)
            if file_id is None:
                raise RelationResolutionError(
                    f"blog_posts {entry_id}: unresolved file relation {junction_id!r}"
                )
            images.append(f"{self._base_url}/assets/{file_id}")

        return tags, images

    async def list_posts(
        self, locale: str, page: int = 1, limit: int = 10
    ) -> tuple[list[BlogPost], PageMeta]:
        """Fetch one page of published posts, newest first, in *locale*.

        Entries without the requested translation fall back to their first
        translation; entries with no translation at all are skipped.

        Raises:
            ValueError: If page or limit is less than 1.
            CMSError: On any upstream failure, including unresolved relations.
        """
        if page < 1 or limit < 1:
            raise ValueError(f"page and limit must be >= 1, got {page}, {limit}")

        payload = await self._request(
            "GET",
            "/items/blog_posts",
            params={
                "filter": json.dumps(PUBLISHED_FILTER),
                "sort": "-date_published",
                "limit": str(limit),
                "offset": str((page - 1) * limit),
                "fields": ",".join(LIST_FIELDS),
                "meta": "filter_count",
            },
        )
        entries = payload.get("data")
        if not isinstance(entries, list):
            raise CMSFetchError("GET /items/blog_posts: 'data' is not a list")
        try:
            total = int((payload.get("meta") or {}).get("filter_count", 0))
        except (TypeError, ValueError) as exc:
            raise CMSFetchError("GET /items/blog_posts: bad filter_count") from exc

        relations = await self._fetch_relations()

        posts: list[BlogPost] = []
        for entry in entries:
            try:
                translation = pick_translation(entry.get("translations"), locale)
                if translation is None:
                    continue
                tags, images = self._resolve(entry, relations)
                posts.append(from_remote(entry, translation, tags, images))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise CMSFetchError(f"malformed blog_posts entry: {exc!r}") from exc

        meta = Page(current_page=page, page_size=limit, total_items=total).meta()
        logger.info(
            "Fetched %d CMS posts (locale=%s page=%d/%d)",
            len(posts),
            locale,
            page,
            meta.total_pages,
        )
        return posts, meta

    async def _candidate_entry_ids(self, locale: str, slug: str) -> list[Any]:
        """Ids of entries with a variant slugged *slug*, *locale* matches first."""
        variants = await self._read_items(
            "blog_posts_translations",
            ["blog_posts_id", "languages_code"],
            filter=json.dumps({"slug": {"_eq": slug}}),
        )
        try:
            variants.sort(key=lambda v: v.get("languages_code") != locale)
            ids = [v["blog_posts_id"] for v in variants]
        except (AttributeError, KeyError, TypeError) as exc:
            raise CMSFetchError(
                f"GET /items/blog_posts_translations: malformed row: {exc!r}"
            ) from exc
        return list(dict.fromkeys(i for i in ids if i is not None))

    async def _read_published_entry(self, entry_id: Any) -> dict[str, Any] | None:
        """Fetch one entry with content; None if unreadable or unpublished."""
        try:
            payload = await self._request(
                "GET",
                f"/items/blog_posts/{entry_id}",
                params={"fields": ",".join(DETAIL_FIELDS)},
            )
        except CMSFetchError as exc:
            if exc.status_code in (403, 404):
                logger.info("CMS entry %s is not readable", entry_id)
                return None
            raise

        entry = payload.get("data")
        if not isinstance(entry, dict) or entry.get("status") != "published":
            return None
        return entry

    async def _increment_views(self, entry_id: Any, views: int) -> int:
        """Bump the view counter. Best-effort: failure keeps the old count."""
        try:
            await self._request(
                "PATCH", f"/items/blog_posts/{entry_id}", body={"views": views + 1}
            )
        except CMSError as exc:
            logger.warning("Failed to update view count for %s: %s", entry_id, exc)
            return views
        return views + 1

    async def get_post(self, locale: str, slug: str) -> BlogPostDetail | None:
        """Fetch one published post by slug, in *locale* when available.

        Returns None when no published entry has a variant with that slug.
        A successful read increments the entry's view counter.

        Raises:
            CMSError: On upstream failure, including unresolved relations.
        """
        # A draft may share the slug with a published entry
        for entry_id in await self._candidate_entry_ids(locale, slug):
            entry = await self._read_published_entry(entry_id)
            if entry is not None:
                break
        else:
            return None

        relations = await self._fetch_relations()
        translations = entry.get("translations") or []
        try:
            translation = pick_translation(translations, locale, slug)
            if translation is None:
                return None
            tags, images = self._resolve(entry, relations)
            post = from_remote(entry, translation, tags, images, include_content=True)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise CMSFetchError(f"malformed blog_posts entry: {exc!r}") from exc

        views = await self._increment_views(entry_id, post.views)
        return BlogPostDetail(
            **post.model_dump(exclude={"views"}),
            views=views,
            available_languages=[
                AvailableLanguage(
                    code=t.get("languages_code") or "",
                    slug=(t.get("slug") or "").strip(),
                    title=t.get("title") or "",
                )
                for t in translations
            ],
        )
