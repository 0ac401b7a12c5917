"""Tests for the /stories endpoint.

The loader itself is replaced with an ``AsyncMock`` so no request ever leaves
the process; the loader's own behaviour is covered in ``test_loader.py``.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from storyloader.config import Settings, get_settings
from storyloader.main import app
from storyloader.models.story import LoadResult, StoryRecord

client = TestClient(app)

_RECORD = StoryRecord(
    id="uuid-1",
    slug="blog/hello",
    content={"component": "post"},
    name="Hello",
    created_at="2024-01-01T10:00:00.000Z",
    published_at="2024-01-02T10:00:00.000Z",
    editable="marker",
    full_slug="blog/hello",
    language="en",
)


@pytest.fixture(autouse=True)
def reset_state():
    """Clear rate limits and use predictable settings for every test."""
    app.state.limiter._storage.reset()
    app.dependency_overrides[get_settings] = lambda: Settings(
        STORYBLOK_ACCESS_TOKEN="env-token",
        STORYBLOK_REGION="eu",
    )
    yield
    app.dependency_overrides.clear()


def _post(**payload):
    return client.post("/stories", json=payload)


class TestStoriesEndpoint:
    def test_returns_normalized_stories(self):
        loader = AsyncMock(return_value=LoadResult(stories=[_RECORD]))
        with patch("storyloader.routers.stories.load_stories", new=loader):
            resp = _post(content_type="blog")

        assert resp.status_code == 200
        data = resp.json()
        assert data["count"] == 1
        assert data["error"] is None
        story = data["stories"][0]
        assert story["id"] == "uuid-1"
        assert story["slug"] == story["full_slug"] == "blog/hello"
        assert story["_editable"] == "marker"
        assert story["language"] == "en"

    def test_body_overrides_environment_defaults(self):
        loader = AsyncMock(return_value=LoadResult())
        with patch("storyloader.routers.stories.load_stories", new=loader):
            _post(
                access_token="body-token",
                version="draft",
                region="us",
                resolve_relations=["author.posts"],
                resolve_links="story",
                max_pages=5,
            )

        options = loader.call_args.args[0]
        assert options.access_token == "body-token"
        assert options.version == "draft"
        assert options.region == "us"
        assert options.resolve_relations == ["author.posts"]
        assert options.resolve_links == "story"
        assert options.max_pages == 5

    def test_environment_defaults_are_used(self):
        loader = AsyncMock(return_value=LoadResult())
        with patch("storyloader.routers.stories.load_stories", new=loader):
            _post()

        options = loader.call_args.args[0]
        assert options.access_token == "env-token"
        assert options.region == "eu"
        assert options.version == "published"
        assert options.language is None

    def test_failure_is_an_empty_list_by_default(self):
        loader = AsyncMock(return_value=LoadResult(error="Storyblok API returned 401: Unauthorized"))
        with patch("storyloader.routers.stories.load_stories", new=loader):
            resp = _post()

        assert resp.status_code == 200
        assert resp.json() == {
            "count": 0,
            "stories": [],
            "error": "Storyblok API returned 401: Unauthorized",
        }

    def test_strict_failure_is_bad_gateway(self):
        loader = AsyncMock(return_value=LoadResult(error="connection refused"))
        with patch("storyloader.routers.stories.load_stories", new=loader):
            resp = _post(strict=True)

        assert resp.status_code == 502
        assert resp.json()["detail"] == "connection refused"

    def test_missing_token_is_bad_request(self):
        app.dependency_overrides[get_settings] = lambda: Settings(STORYBLOK_ACCESS_TOKEN="")
        loader = AsyncMock(side_effect=AssertionError("loader must not be called"))
        with patch("storyloader.routers.stories.load_stories", new=loader):
            resp = _post()

        assert resp.status_code == 400
        assert "STORYBLOK_ACCESS_TOKEN" in resp.json()["detail"]

    def test_invalid_resolve_links_is_rejected(self):
        resp = _post(resolve_links="everything")
        assert resp.status_code == 422


class TestHealth:
    def test_root(self):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Hello from storyloader"}
