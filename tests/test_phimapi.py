"""
Tests for the PhimAPI client.
"""
import httpx
import pytest

from conftest import make_detail, make_summary
from phimchannels.config import Settings
from phimchannels.routers.movies import get_phim_client
from phimchannels.services.exceptions import MalformedUpstreamBody, UpstreamUnavailable
from phimchannels.services.phimapi import DetailResult, PhimApiClient


class TestFetchListing:
    """Test the newest-movies listing call."""

    @pytest.mark.asyncio
    async def test_page_is_forwarded_verbatim(self, fake_api):
        fake_api.listings["abc"] = {"items": [make_summary("phim-a")]}

        async with fake_api.client() as client:
            listing = await client.fetch_listing("abc")

        assert [item["slug"] for item in listing.items] == ["phim-a"]
        assert fake_api.requests[0].url.path == "/danh-sach/phim-moi-cap-nhat-v3"
        assert fake_api.requests[0].url.params["page"] == "abc"

    @pytest.mark.asyncio
    async def test_non_success_status_raises_with_reason(self, fake_api):
        fake_api.listing_status = 503

        async with fake_api.client() as client:
            with pytest.raises(UpstreamUnavailable) as exc_info:
                await client.fetch_listing("1")

        assert exc_info.value.status_code == 500
        assert "Service Unavailable" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_missing_items_is_malformed(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"status": True}))

        async with PhimApiClient("https://phimapi.test", transport=transport) as client:
            with pytest.raises(MalformedUpstreamBody):
                await client.fetch_listing("1")

    @pytest.mark.asyncio
    async def test_empty_items_is_accepted(self, fake_api):
        async with fake_api.client() as client:
            listing = await client.fetch_listing("7")

        assert listing.items == []

    @pytest.mark.asyncio
    async def test_transport_error_raises_upstream_unavailable(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        async with PhimApiClient("https://phimapi.test", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(UpstreamUnavailable) as exc_info:
                await client.fetch_listing("1")

        assert "timed out" in exc_info.value.details


class TestFetchDetail:
    """Test the per-title detail call."""

    @pytest.mark.asyncio
    async def test_success_returns_payload(self, fake_api):
        fake_api.details["phim-a"] = make_detail("phim-a")

        async with fake_api.client() as client:
            result = await client.fetch_detail("phim-a")

        assert result.ok
        payload = result.payload()
        assert payload.movie.slug == "phim-a"
        assert payload.episodes[0].server_name == "#Vietsub"

    @pytest.mark.asyncio
    async def test_not_found_is_a_result_not_an_error(self, fake_api):
        async with fake_api.client() as client:
            result = await client.fetch_detail("ghost-slug")

        assert not result.ok
        assert result.status_code == 404
        assert result.slug == "ghost-slug"

    def test_payload_without_movie_is_malformed(self):
        result = DetailResult("phim-a", 200, body={"status": False, "episodes": []})

        with pytest.raises(MalformedUpstreamBody):
            result.payload()

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, fake_api):
        fake_api.failing_slugs.add("phim-a")

        async with fake_api.client() as client:
            with pytest.raises(UpstreamUnavailable):
                await client.fetch_detail("phim-a")

    @pytest.mark.asyncio
    async def test_redirect_is_followed(self):
        body = make_detail("new-slug")

        def handler(request):
            if request.url.path == "/phim/old-slug":
                return httpx.Response(301, headers={"Location": "/phim/new-slug"})
            if request.url.path == "/phim/new-slug":
                return httpx.Response(200, json=body)
            return httpx.Response(404)

        async with PhimApiClient("https://phimapi.test", transport=httpx.MockTransport(handler)) as client:
            result = await client.fetch_detail("old-slug")

        assert result.ok
        assert result.payload().movie.slug == "new-slug"

    def test_empty_movie_object_is_accepted(self):
        result = DetailResult("phim-a", 200, body={"movie": {}})

        payload = result.payload()

        assert payload.movie.slug == ""
        assert payload.movie.content is None
        assert payload.episodes == []


class TestClientDependency:
    """Test the request-scoped client built from settings."""

    @pytest.mark.asyncio
    async def test_settings_reach_http_client(self):
        settings = Settings(phimapi_base="https://phimapi.test", upstream_timeout_seconds=3.5)
        dependency = get_phim_client(settings)

        client = await dependency.__anext__()
        try:
            assert client.base_url == "https://phimapi.test"
            assert client._client.timeout == httpx.Timeout(3.5)
            assert client._client.follow_redirects is True
        finally:
            await dependency.aclose()

        assert client._client.is_closed
