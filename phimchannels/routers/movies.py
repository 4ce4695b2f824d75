"""
Movie listing and detail endpoints.
"""
from fastapi import APIRouter, Depends, Query, Request
from typing import AsyncIterator, Optional

from phimchannels.config import Settings, get_settings
from phimchannels.responses import PrettyJSONResponse
from phimchannels.services.envelope import build_envelope, provider_info_from_settings
from phimchannels.services.exceptions import MissingRequiredInput, UpstreamDetailError
from phimchannels.services.listing import ListingService, parse_page
from phimchannels.services.mapping import MappingOptions, map_detail_channel
from phimchannels.services.phimapi import PhimApiClient

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["movies"])


async def get_phim_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[PhimApiClient]:
    """One upstream client per request, closed once the response is built."""
    async with PhimApiClient(settings.phimapi_base, timeout=settings.upstream_timeout_seconds) as client:
        yield client


def get_mapping_options(settings: Settings = Depends(get_settings)) -> MappingOptions:
    return MappingOptions.from_settings(settings)


async def list_latest(
    request: Request,
    page: Optional[str] = Query(None, description="Listing page, forwarded to PhimAPI as-is"),
    settings: Settings = Depends(get_settings),
    client: PhimApiClient = Depends(get_phim_client),
    options: MappingOptions = Depends(get_mapping_options),
):
    """
    Newest movies as a provider envelope.

    - **page**: 1-based page number (default 1)
    """
    page = parse_page(page, strict=settings.strict_page)
    service = ListingService(client, options, limit=settings.listing_limit)
    channels = await service.channels_for_page(page, base_url=str(request.base_url))

    envelope = build_envelope(page, channels, provider_info_from_settings(settings))
    return PrettyJSONResponse(envelope.model_dump(mode="json"))


router.add_api_route(get_settings().listing_path, list_latest, methods=["GET"])


@router.get("/phim")
@router.get("/phim/", include_in_schema=False)
async def missing_slug():
    """Detail route called without a slug."""
    raise MissingRequiredInput("Thiếu Slug (tên đường dẫn) của phim.")


@router.get("/phim/{slug}")
async def get_movie_detail(
    slug: str,
    client: PhimApiClient = Depends(get_phim_client),
    options: MappingOptions = Depends(get_mapping_options),
):
    """
    Full playlist channel for one title, addressed by its PhimAPI slug.
    """
    if not slug.strip():
        raise MissingRequiredInput("Thiếu Slug (tên đường dẫn) của phim.")

    result = await client.fetch_detail(slug)
    if not result.ok:
        logger.warning(f"Detail lookup for {slug} returned HTTP {result.status_code}")
        raise UpstreamDetailError(
            f"Không tìm thấy chi tiết phim cho slug: {slug}",
            status_code=result.status_code,
        )

    payload = result.payload()
    channel = map_detail_channel(payload.movie, payload.episodes, options)
    return PrettyJSONResponse(channel.model_dump(mode="json"))
