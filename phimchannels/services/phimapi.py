"""
PhimAPI client.
Fetches the newest-movies listing and per-title detail from phimapi.com.
"""
import httpx
import logging
from typing import Optional

from pydantic import ValidationError

from phimchannels.models.upstream import DetailPayload, ListingPayload
from phimchannels.services.exceptions import MalformedUpstreamBody, UpstreamUnavailable

logger = logging.getLogger(__name__)


class DetailResult:
    """Outcome of a detail lookup. A non-success status is a value, not an error."""

    def __init__(self, slug: str, status_code: int, reason: str = "", body: Optional[dict] = None):
        self.slug = slug
        self.status_code = status_code
        self.reason = reason
        self.body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def payload(self) -> DetailPayload:
        """Validate the body; raises MalformedUpstreamBody when `movie` is missing or null."""
        if not isinstance(self.body, dict) or self.body.get("movie") is None:
            raise MalformedUpstreamBody("Dữ liệu chi tiết phim không hợp lệ.")
        try:
            return DetailPayload.model_validate(self.body)
        except ValidationError as e:
            raise MalformedUpstreamBody("Dữ liệu chi tiết phim không hợp lệ.", details=str(e))


class PhimApiClient:
    """Thin async wrapper around the two PhimAPI endpoints we consume."""

    LISTING_PATH = "/danh-sach/phim-moi-cap-nhat-v3"
    DETAIL_PATH = "/phim/{slug}"

    def __init__(
        self,
        base_url: str,
        timeout: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport)

    async def __aenter__(self) -> "PhimApiClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def fetch_listing(self, page) -> ListingPayload:
        """
        Fetch one page of newest movies.

        Args:
            page: Page number, forwarded verbatim

        Raises:
            UpstreamUnavailable: transport failure or non-success status
            MalformedUpstreamBody: body without an `items` list
        """
        url = f"{self.base_url}{self.LISTING_PATH}?page={page}"
        logger.info(f"Fetching listing from {url}")

        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch listing page {page}: {e}")
            raise UpstreamUnavailable("Lỗi nội bộ của server.", details=str(e) or repr(e))

        if not response.is_success:
            raise UpstreamUnavailable(
                "Lỗi nội bộ của server.",
                details=f"Lỗi khi fetch danh sách phim: {response.reason_phrase}",
            )

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedUpstreamBody("Không thể lấy danh sách phim.", details=str(e))

        if not isinstance(body, dict) or body.get("items") is None:
            raise MalformedUpstreamBody("Không thể lấy danh sách phim.")

        try:
            payload = ListingPayload.model_validate(body)
        except ValidationError as e:
            raise MalformedUpstreamBody("Không thể lấy danh sách phim.", details=str(e))

        logger.info(f"Fetched {len(payload.items)} items from listing page {page}")
        return payload

    async def fetch_detail(self, slug: str) -> DetailResult:
        """
        Fetch the detail record for one title.

        A non-success status comes back as a DetailResult with ok == False.

        Raises:
            UpstreamUnavailable: transport failure (timeout, connection error)
        """
        url = f"{self.base_url}{self.DETAIL_PATH.format(slug=slug)}"
        logger.info(f"Fetching detail from {url}")

        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch detail for {slug}: {e}")
            raise UpstreamUnavailable("Lỗi nội bộ của server.", details=str(e) or repr(e))

        if not response.is_success:
            return DetailResult(slug, response.status_code, reason=response.reason_phrase)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedUpstreamBody("Dữ liệu chi tiết phim không hợp lệ.", details=str(e))

        return DetailResult(slug, response.status_code, reason=response.reason_phrase, body=body)
