from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from functools import cmp_to_key, lru_cache
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from baseline_timeline.core.config import get_settings
from baseline_timeline.core.logging import get_logger
from baseline_timeline.models.timeline import FeatureEntry, TimelineData
from baseline_timeline.services.feed_fetch_service import FeedFetchService

logger = get_logger().bind(module="timeline_service")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an entry timestamp into an aware UTC datetime.
    ISO-8601 first (naive values are taken as UTC), RFC 2822 as a fallback.
    """
    if not value:
        return None
    value = value.strip()
    if not value:
        return None

    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    value = value.astimezone(timezone.utc)
    timespec = "milliseconds" if value.microsecond else "seconds"
    return value.isoformat(timespec=timespec).replace("+00:00", "Z")


def _compare_titles(a: str, b: str) -> int:
    key_a, key_b = (a.casefold(), a), (b.casefold(), b)
    if key_a < key_b:
        return -1
    if key_a > key_b:
        return 1
    return 0


def _compare_entries(a: FeatureEntry, b: FeatureEntry) -> int:
    time_a = parse_timestamp(a.updated)
    time_b = parse_timestamp(b.updated)

    if time_a is None and time_b is None:
        return _compare_titles(a.title, b.title)
    if time_a is None:
        return 1
    if time_b is None:
        return -1
    if time_a > time_b:
        return -1
    if time_a < time_b:
        return 1
    return 0


def sort_entries(entries: Iterable[FeatureEntry]) -> List[FeatureEntry]:
    """
    Newest first; undated entries last, ordered by title among themselves.
    The sort is stable, so full ties keep their input order.
    """
    return sorted(entries, key=cmp_to_key(_compare_entries))


def compute_last_updated(entries: Iterable[FeatureEntry]) -> str:
    timestamps = [ts for ts in (parse_timestamp(entry.updated) for entry in entries) if ts is not None]
    if not timestamps:
        return ""
    return format_timestamp(max(timestamps))


def build_timeline_data(
    widely_available: Sequence[FeatureEntry],
    newly_available: Sequence[FeatureEntry],
) -> TimelineData:
    sorted_widely = sort_entries(widely_available)
    sorted_newly = sort_entries(newly_available)
    return TimelineData(
        widely_available=tuple(sorted_widely),
        newly_available=tuple(sorted_newly),
        last_updated=compute_last_updated([*sorted_widely, *sorted_newly]),
    )


class TimelineCache:
    """
    Single-slot store for the built TimelineData.

    The slot is filled at most once, on the first successful build. Concurrent
    callers that arrive while a build is running wait for it and reuse its
    result; a failed build leaves the slot empty.
    """

    def __init__(self) -> None:
        self._value: Optional[TimelineData] = None
        self._lock = asyncio.Lock()

    @property
    def value(self) -> Optional[TimelineData]:
        return self._value

    async def get_or_build(self, build: Callable[[], Awaitable[TimelineData]]) -> TimelineData:
        if self._value is not None:
            return self._value

        async with self._lock:
            if self._value is not None:
                return self._value
            data = await build()
            self._value = data
            return data


class TimelineService:
    def __init__(
        self,
        *,
        cache: Optional[TimelineCache] = None,
        widely_available_url: Optional[str] = None,
        newly_available_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        self.cache = cache if cache is not None else TimelineCache()
        self.widely_available_url = widely_available_url or settings.WIDELY_AVAILABLE_FEED_URL
        self.newly_available_url = newly_available_url or settings.NEWLY_AVAILABLE_FEED_URL
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    async def _build(self) -> TimelineData:
        async with FeedFetchService(timeout_s=self.timeout_s, user_agent=self.user_agent) as fetcher:
            tasks = (
                asyncio.create_task(fetcher.fetch_feed(self.widely_available_url)),
                asyncio.create_task(fetcher.fetch_feed(self.newly_available_url)),
            )
            try:
                widely_available, newly_available = await asyncio.gather(*tasks)
            finally:
                # the client closes on exit; no fetch may outlive it
                for task in tasks:
                    if not task.done():
                        task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)

        data = build_timeline_data(widely_available, newly_available)
        logger.info(
            "timeline_built",
            widely_available=len(data.widely_available),
            newly_available=len(data.newly_available),
            last_updated=data.last_updated or None,
        )
        return data

    async def get_timeline_data(self) -> TimelineData:
        """Return the cached timeline, building it on first use."""
        return await self.cache.get_or_build(self._build)


@lru_cache(maxsize=1)
def get_timeline_service() -> TimelineService:
    """Process-wide service (and cache) configured from settings."""
    return TimelineService()
