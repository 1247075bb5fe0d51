"""Shared fixtures for content API tests."""

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from _cms_helpers import CMS_URL, FakeDirectus


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from content_api.config import get_settings

    get_settings.cache_clear()

    # 2. HTTP client singleton
    import content_api.services.http_client as http_mod

    http_mod._client = None

    # 3. Static content repository singleton
    import content_api.services.static_content as static_mod

    static_mod._repository = None


@pytest.fixture
def content_dir(tmp_path) -> Path:
    """Empty directory for static Markdown posts."""
    path = tmp_path / "blog"
    path.mkdir()
    return path


@pytest.fixture
def write_post(content_dir) -> Callable[..., Path]:
    """Write a Markdown post with front-matter into the content directory."""

    def _write(
        slug: str,
        *,
        title: str | None = None,
        date: str = "2024-01-01",
        tags: list[str] | None = None,
        summary: str | None = "Summary",
        draft: bool = False,
        lastmod: str | None = None,
        body: str = "Body text.",
    ) -> Path:
        lines = ["---", f"title: {json.dumps(title or slug.title())}", f"date: {date}"]
        if lastmod:
            lines.append(f"lastmod: {lastmod}")
        if tags is not None:
            lines.append(f"tags: {json.dumps(tags)}")
        if summary is not None:
            lines.append(f"summary: {json.dumps(summary)}")
        if draft:
            lines.append("draft: true")
        lines += ["---", "", body, ""]
        path = content_dir / f"{slug}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def mock_settings(monkeypatch, content_dir):
    """Provide a Settings object with safe test defaults."""
    from content_api.config import Settings, get_settings

    test_settings = Settings(
        directus_url=CMS_URL,
        directus_token="test-token",
        site_url="https://www.example.com",
        content_dir=str(content_dir),
        default_locale="en-US",
        static_locale="id-ID",
        teaser_size=5,
        list_page_size=5,
        feed_remote_limit=100,
    )

    get_settings.cache_clear()
    monkeypatch.setattr("content_api.config.get_settings", lambda: test_settings)

    # Patch get_settings in every module that imports it directly
    # (from content_api.config import get_settings creates a local binding
    # that the content_api.config monkeypatch above does not affect)
    for mod_path in [
        "content_api.deps",
        "content_api.main",
        "content_api.routers.blog",
        "content_api.routers.posts",
        "content_api.routers.tags",
        "content_api.routers.feed",
        "content_api.routers.sitemap",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def fake_cms() -> FakeDirectus:
    """Directus fake wired into the shared httpx client."""
    import content_api.services.http_client as http_mod

    fake = FakeDirectus()
    http_mod._client = httpx.AsyncClient(transport=httpx.MockTransport(fake.handler))
    return fake
