"""Tests for the static post, tag, feed and sitemap endpoints."""

import httpx
from httpx import ASGITransport, AsyncClient

from _cms_helpers import translation


async def _get(path: str, **params) -> httpx.Response:
    from content_api.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        return await client.get(path, params=params)


def _seven_posts(write_post):
    for day in range(1, 8):
        write_post(f"post-{day}", date=f"2024-01-0{day}", tags=["react"])


class TestStaticPosts:
    async def test_full_list_paginates(self, mock_settings, write_post):
        _seven_posts(write_post)

        first = await _get("/api/posts", page=1)
        second = await _get("/api/posts", page=2)

        assert first.status_code == 200
        assert [p["slug"] for p in first.json()["data"]] == [
            "post-7",
            "post-6",
            "post-5",
            "post-4",
            "post-3",
        ]
        assert first.json()["meta"]["totalPages"] == 2
        assert first.json()["meta"]["hasNext"] is True
        assert [p["slug"] for p in second.json()["data"]] == ["post-2", "post-1"]
        assert second.json()["meta"]["hasNext"] is False

    async def test_page_past_end_is_empty(self, mock_settings, write_post):
        _seven_posts(write_post)

        response = await _get("/api/posts", page=9)

        assert response.status_code == 200
        assert response.json()["data"] == []

    async def test_teaser_ignores_page(self, mock_settings, write_post):
        _seven_posts(write_post)

        response = await _get("/api/posts", mode="teaser", page=2)

        data = response.json()["data"]
        assert len(data) == 5
        assert data[0]["slug"] == "post-7"
        assert response.json()["meta"]["page"] == 1

    async def test_teaser_with_few_posts(self, mock_settings, write_post):
        write_post("only", date="2024-01-01")

        response = await _get("/api/posts", mode="teaser")

        assert len(response.json()["data"]) == 1

    async def test_static_posts_shape(self, mock_settings, write_post):
        write_post("hello", tags=["react"], summary="Hi")
        write_post("hidden", draft=True)

        data = (await _get("/api/posts")).json()["data"]

        assert [p["slug"] for p in data] == ["hello"]
        assert data[0]["views"] == 0
        assert data[0]["language"] == "id-ID"
        assert data[0]["status"] == "published"
        assert "content" not in data[0]

    async def test_empty_collection(self, mock_settings):
        body = (await _get("/api/posts")).json()
        assert body["data"] == []
        assert body["meta"]["totalPages"] == 0

    async def test_get_post_includes_content(self, mock_settings, write_post):
        write_post("hello", title="Hello", body="Full **markdown** body.")

        response = await _get("/api/posts/hello")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["content"].strip() == "Full **markdown** body."
        assert data["availableLanguages"] == [
            {"code": "id-ID", "slug": "hello", "title": "Hello"}
        ]

    async def test_get_draft_is_404(self, mock_settings, write_post):
        write_post("hidden", draft=True)

        response = await _get("/api/posts/hidden")

        assert response.status_code == 404
        assert response.json() == {"error": "Post not found"}


class TestTags:
    async def test_tag_counts(self, mock_settings, write_post):
        write_post("a", date="2024-01-01", tags=["react"])
        write_post("b", date="2024-01-02", tags=["react", "TypeScript"])
        write_post("c", date="2024-01-03", tags=["TypeScript", "Next.js"])
        write_post("d", date="2024-01-04", tags=["react"], draft=True)

        response = await _get("/api/tags", active="typescript")

        data = response.json()["data"]
        assert {t["name"]: t["count"] for t in data} == {
            "react": 2,
            "TypeScript": 2,
            "Next.js": 1,
        }
        assert data[-1] == {
            "name": "Next.js",
            "slug": "nextjs",
            "count": 1,
            "active": False,
        }
        assert [t["name"] for t in data if t["active"]] == ["TypeScript"]

    async def test_mixed_case_tags_are_one_facet(self, mock_settings, write_post):
        write_post("a", date="2024-01-01", tags=["React"])
        write_post("b", date="2024-01-02", tags=["react"])

        response = await _get("/api/tags", active="react")

        assert response.json()["data"] == [
            {"name": "react", "slug": "react", "count": 2, "active": True}
        ]

    async def test_posts_for_tag(self, mock_settings, write_post):
        write_post("a", date="2024-01-01", tags=["Web Design"])
        write_post("b", date="2024-01-02", tags=["react"])

        response = await _get("/api/tags/web-design")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()["data"]] == ["a"]

    async def test_unknown_tag_is_404(self, mock_settings, write_post):
        write_post("a", tags=["react"])

        response = await _get("/api/tags/vue")

        assert response.status_code == 404
        assert response.json() == {"error": "Tag not found"}


class TestFeed:
    async def test_merges_sources_newest_first(
        self, mock_settings, write_post, fake_cms
    ):
        write_post("static-old", date="2024-01-01")
        write_post("static-new", date="2024-05-01")
        fake_cms.add_post(
            1, [translation("remote")], date_published="2024-03-01T00:00:00Z"
        )

        data = (await _get("/api/feed")).json()["data"]

        assert [(p["slug"], p["language"]) for p in data] == [
            ("static-new", "id-ID"),
            ("remote", "en-US"),
            ("static-old", "id-ID"),
        ]

    async def test_offset_less_cms_dates_merge_with_static(
        self, mock_settings, write_post, fake_cms
    ):
        write_post("static-one", date="2024-01-01")
        fake_cms.add_post(
            1, [translation("remote-one")], date_published="2024-03-01T10:00:00"
        )

        response = await _get("/api/feed")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()["data"]] == [
            "remote-one",
            "static-one",
        ]

    async def test_cms_failure_degrades_to_static(
        self, mock_settings, write_post, fake_cms
    ):
        write_post("static-only")
        fake_cms.fail["/items/blog_posts"] = httpx.Response(500, text="down")

        response = await _get("/api/feed")

        assert response.status_code == 200
        assert [p["slug"] for p in response.json()["data"]] == ["static-only"]

    async def test_unconfigured_cms_serves_static(
        self, mock_settings, write_post, fake_cms
    ):
        mock_settings.directus_url = ""
        write_post("static-only")

        response = await _get("/api/feed")

        assert [p["slug"] for p in response.json()["data"]] == ["static-only"]
        assert fake_cms.requests == []

    async def test_teaser_mode(self, mock_settings, write_post, fake_cms):
        _seven_posts(write_post)

        response = await _get("/api/feed", mode="teaser", page=3)

        assert len(response.json()["data"]) == 5


class TestSitemap:
    async def test_sitemap_lists_sections_and_published_posts(
        self, mock_settings, write_post
    ):
        write_post("hello", date="2024-01-01", lastmod="2024-02-03")
        write_post("hidden", draft=True)

        response = await _get("/sitemap.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        body = response.text
        assert "<loc>https://www.example.com/blog</loc>" in body
        assert "<loc>https://www.example.com/blog/hello</loc>" in body
        assert "<lastmod>2024-02-03</lastmod>" in body
        assert "hidden" not in body


class TestAppPlumbing:
    async def test_health_ok(self, mock_settings):
        response = await _get("/api/health")

        assert response.status_code == 200
        assert response.json()["checks"] == {"config": "ok", "content": "ok"}
        assert response.json()["status"] == "ok"

    async def test_health_degraded_without_cms(self, mock_settings):
        mock_settings.directus_token = ""

        response = await _get("/api/health")

        assert response.json()["status"] == "degraded"
        assert response.json()["checks"]["config"] == "fail"

    async def test_request_id_and_security_headers(self, mock_settings):
        from content_api.main import app

        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.get(
                "/api/posts", headers={"X-Request-ID": "req-123"}
            )

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
