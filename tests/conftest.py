"""
Pytest configuration and fixtures for the PhimAPI adapter tests.
"""
import asyncio
import copy

import httpx
import pytest
from fastapi.testclient import TestClient

from phimchannels.config import Settings, get_settings
from phimchannels.main import app
from phimchannels.routers.movies import get_phim_client
from phimchannels.services.phimapi import PhimApiClient

UPSTREAM_BASE = "https://phimapi.test"


def make_summary(slug: str, **overrides) -> dict:
    """Listing item as PhimAPI returns it."""
    item = {
        "_id": f"id-{slug}",
        "slug": slug,
        "name": f"Phim {slug}",
        "origin_name": f"Movie {slug}",
        "poster_url": f"https://img.test/{slug}-poster.jpg",
        "thumb_url": f"https://img.test/{slug}-thumb.jpg",
        "year": 2024,
        "quality": "FHD",
        "lang": "Vietsub",
        "episode_current": "Full",
        "type": "single",
        "category": [{"id": "c1", "name": "Hành Động", "slug": "hanh-dong"}],
    }
    item.update(overrides)
    return item


def make_detail(slug: str, servers: list = None, **movie_overrides) -> dict:
    """Detail body as PhimAPI returns it."""
    movie = make_summary(slug, content=f"Nội dung {slug}")
    movie.update(movie_overrides)
    if servers is None:
        servers = [
            {
                "server_name": "#Vietsub",
                "server_data": [
                    {
                        "name": "Tập 01",
                        "slug": "tap-01",
                        "filename": f"{slug}-tap-01",
                        "link_embed": f"https://embed.test/{slug}/1",
                        "link_m3u8": f"https://stream.test/{slug}/1.m3u8",
                    },
                    {
                        "name": "Tập 02",
                        "slug": "tap-02",
                        "filename": f"{slug}-tap-02",
                        "link_embed": f"https://embed.test/{slug}/2",
                        "link_m3u8": f"https://stream.test/{slug}/2.m3u8",
                    },
                ],
            }
        ]
    return {"status": True, "movie": movie, "episodes": servers}


class FakePhimApi:
    """In-memory PhimAPI answering through httpx.MockTransport."""

    def __init__(self):
        self.listings = {}
        self.details = {}
        self.listing_status = 200
        self.detail_status = {}
        self.failing_slugs = set()
        self.timeout_slugs = set()
        self.delays = {}
        self.requests = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/danh-sach/phim-moi-cap-nhat-v3":
            if self.listing_status != 200:
                return httpx.Response(self.listing_status)
            page = request.url.params.get("page")
            return httpx.Response(200, json=self.listings.get(page, {"items": []}))

        if path.startswith("/phim/"):
            slug = path[len("/phim/"):]
            if slug in self.delays:
                await asyncio.sleep(self.delays[slug])
            if slug in self.failing_slugs:
                raise httpx.ConnectError("connection refused", request=request)
            if slug in self.timeout_slugs:
                raise httpx.ReadTimeout("read timed out", request=request)
            if slug in self.detail_status:
                return httpx.Response(self.detail_status[slug], json={"status": False})
            if slug not in self.details:
                return httpx.Response(404, json={"status": False, "msg": "not found"})
            return httpx.Response(200, json=copy.deepcopy(self.details[slug]))

        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def client(self) -> PhimApiClient:
        return PhimApiClient(UPSTREAM_BASE, timeout=2.0, transport=self.transport())


@pytest.fixture
def fake_api():
    """Fresh fake upstream per test."""
    return FakePhimApi()


@pytest.fixture
def make_test_client(fake_api):
    """Build a TestClient wired to the fake upstream with the given settings."""

    def _make(**settings_overrides) -> TestClient:
        settings = Settings(phimapi_base=UPSTREAM_BASE, **settings_overrides)

        async def _client():
            async with fake_api.client() as client:
                yield client

        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_phim_client] = _client
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
