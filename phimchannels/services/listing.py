"""
Listing pipeline.
Fetches the newest-movies page and maps each item to a channel.
"""
import asyncio
import logging
from typing import Any, Optional

from pydantic import ValidationError

from phimchannels.config import SummaryMode
from phimchannels.models.channel import Channel
from phimchannels.models.upstream import MovieSummary
from phimchannels.services.mapping import (
    MappingOptions,
    basic_channel,
    map_summary_pointer,
    map_summary_with_detail,
)
from phimchannels.services.exceptions import MissingRequiredInput
from phimchannels.services.phimapi import PhimApiClient

logger = logging.getLogger(__name__)


class ListingService:
    """Builds the channel list for one listing page."""

    def __init__(self, client: PhimApiClient, options: MappingOptions, limit: int = 10):
        self.client = client
        self.options = options
        self.limit = limit

    async def channels_for_page(self, page, base_url: str = "") -> list[Channel]:
        """
        Fetch a listing page and map its first `limit` items.

        Args:
            page: Page number, forwarded verbatim
            base_url: Absolute base URL of the incoming request

        Returns:
            Channels in listing order
        """
        listing = await self.client.fetch_listing(page)
        items = [item for item in map(self._parse_item, listing.items[:self.limit]) if item]

        if self.options.summary_mode == SummaryMode.LIGHTWEIGHT:
            return [map_summary_pointer(item, self.options, base_url) for item in items]

        # All-settle join; gather keeps results in input order
        results = await asyncio.gather(
            *[self.enrich(item) for item in items],
            return_exceptions=True,
        )

        channels = []
        for item, result in zip(items, results):
            if isinstance(result, Exception):
                logger.warning(f"Detail enrichment failed for {item.slug}: {result!r}")
                result = basic_channel(item, self.options)
            channels.append(result)
        return channels

    async def enrich(self, item: MovieSummary) -> Channel:
        """Map one listing item using its detail record; degrade on lookup failure."""
        detail = await self.client.fetch_detail(item.slug)
        if not detail.ok:
            logger.warning(f"Could not fetch detail for {item.name} ({item.slug}): HTTP {detail.status_code}")
            return basic_channel(item, self.options)

        payload = detail.payload()
        return map_summary_with_detail(item, payload.movie, payload.episodes, self.options)

    @staticmethod
    def _parse_item(raw: Any) -> Optional[MovieSummary]:
        """Validate one listing entry; None (logged) when it is unusable."""
        if not isinstance(raw, dict):
            logger.warning(f"Skipping listing item that is not an object: {raw!r}")
            return None
        try:
            item = MovieSummary.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping invalid listing item {raw.get('slug')!r}: {e}")
            return None
        if not item.slug:
            logger.warning(f"Skipping listing item without slug: {item.name!r}")
            return None
        return item


def parse_page(raw: Optional[str], strict: bool = False) -> str:
    """
    Normalize the `page` query parameter.

    Permissive mode passes the raw value through; strict mode only accepts
    positive integers.
    """
    page = raw or "1"
    if strict and not (page.isascii() and page.isdigit() and int(page) > 0):
        raise MissingRequiredInput(f"Trang không hợp lệ: {page}")
    return page
