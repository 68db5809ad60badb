from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

import httpx

from baseline_timeline.core.config import get_settings
from baseline_timeline.core.logging import get_logger
from baseline_timeline.models.timeline import FeatureEntry
from baseline_timeline.services.feed_normalization import normalize_entries
from baseline_timeline.services.xml_tree import parse_xml_tree

logger = get_logger().bind(module="feed_fetch_service")


class TimelineError(Exception):
    """Base class for failures that abort a timeline build."""

    def __init__(self, message: str, *, url: str):
        super().__init__(message)
        self.url = url


class FeedFetchError(TimelineError):
    """
    The feed could not be retrieved: non-2xx response or transport failure.
    status_code is None for transport failures.
    """

    def __init__(self, url: str, status_code: Optional[int] = None, *, reason: str | None = None):
        detail = f"status {status_code}" if status_code is not None else (reason or "transport error")
        super().__init__(f"Failed to load feed: {url} ({detail})", url=url)
        self.status_code = status_code
        self.reason = reason


class FeedParseError(TimelineError):
    """The feed body is not well-formed XML."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to parse feed: {url} ({reason})", url=url)
        self.reason = reason


def locate_entries(tree: Dict[str, Any]) -> Any:
    """
    Find the entry node(s) in a parsed feed tree.
    Atom ``feed.entry`` is preferred over RSS ``rss.channel.item``.
    """
    feed = tree.get("feed")
    if isinstance(feed, dict) and feed.get("entry") is not None:
        return feed.get("entry")

    rss = tree.get("rss")
    if isinstance(rss, dict):
        channel = rss.get("channel")
        if isinstance(channel, dict):
            return channel.get("item")
    return None


def parse_feed_document(url: str, document: str | bytes) -> List[FeatureEntry]:
    try:
        tree = parse_xml_tree(document)
    except ET.ParseError as exc:
        raise FeedParseError(url, str(exc)) from exc
    return normalize_entries(locate_entries(tree))


class FeedFetchService:
    def __init__(
        self,
        *,
        timeout_s: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        settings = get_settings()
        self.timeout_s = timeout_s if timeout_s is not None else settings.FEED_FETCH_TIMEOUT_S
        self.user_agent = user_agent or settings.FEED_USER_AGENT
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "FeedFetchService":
        self._client = httpx.AsyncClient(
            timeout=self.timeout_s,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client:
            await self._client.aclose()

    async def _get(self, url: str) -> bytes:
        if self._client is None:
            raise RuntimeError("FeedFetchService client not initialized")
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("feed_fetch_failed", url=url, error=str(exc))
            raise FeedFetchError(url, reason=str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            logger.warning("feed_fetch_failed", url=url, status_code=response.status_code)
            raise FeedFetchError(url, response.status_code)
        return response.content

    async def fetch_feed(self, url: str) -> List[FeatureEntry]:
        """
        Retrieve one feed and return its normalized entries.

        Raises:
            FeedFetchError: transport failure or non-2xx status
            FeedParseError: body is not well-formed XML
        """
        body = await self._get(url)
        try:
            entries = parse_feed_document(url, body)
        except FeedParseError as exc:
            logger.warning("feed_parse_failed", url=url, error=exc.reason)
            raise

        logger.info("feed_fetch_success", url=url, entries=len(entries))
        return entries
