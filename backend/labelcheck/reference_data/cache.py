"""
TTL-bounded in-memory mirror of one paginated upstream reference table.
Replaces the entry wholesale on refresh; serves stale data (or nothing) when the upstream fails.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# fetch_page(offset, limit) -> rows
PageFetcher = Callable[[int, int], Awaitable[list[dict]]]


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: tuple[T, ...]
    fetched_at: float


class ReferenceCache(Generic[T]):
    """
    get() returns cached rows while now - fetched_at < ttl; otherwise pages through the
    upstream until a short or empty page, converts rows with row_factory and swaps the entry.
    Concurrent refreshes are not locked: both fetch, the last assignment wins, data is identical.
    After a failed refresh the upstream is not retried for failure_cooldown_seconds; stale rows
    (or nothing) are served meanwhile.
    """

    def __init__(
        self,
        name: str,
        fetch_page: PageFetcher,
        row_factory: Callable[[dict], T],
        ttl_seconds: float,
        page_size: int = 1000,
        clock: Callable[[], float] = time.time,
        failure_cooldown_seconds: float = 60.0,
    ):
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.name = name
        self._fetch_page = fetch_page
        self._row_factory = row_factory
        self._ttl = float(ttl_seconds)
        self._page_size = page_size
        self._clock = clock
        self._entry: Optional[CacheEntry[T]] = None
        self._failure_cooldown = float(failure_cooldown_seconds)
        self._failed_at: Optional[float] = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _is_fresh(self, entry: Optional[CacheEntry[T]], now: float) -> bool:
        return entry is not None and now - entry.fetched_at < self._ttl

    async def get(self) -> list[T]:
        entry = self._entry
        now = self._clock()
        if self._is_fresh(entry, now):
            logger.debug(
                "REFERENCE_CACHE hit name=%s count=%d age=%.1fs",
                self.name, len(entry.data), now - entry.fetched_at,
            )
            return list(entry.data)

        stale = list(entry.data) if entry is not None else []
        if self._failed_at is not None and now - self._failed_at < self._failure_cooldown:
            logger.debug(
                "REFERENCE_CACHE cooldown name=%s retry_in=%.1fs serving_stale=%d",
                self.name, self._failure_cooldown - (now - self._failed_at), len(stale),
            )
            return stale

        logger.info("REFERENCE_CACHE miss name=%s (fetching)", self.name)
        try:
            rows = await self._fetch_all()
        except Exception as e:
            self._failed_at = self._clock()
            logger.error(
                "REFERENCE_CACHE fetch_failed name=%s error=%s serving_stale=%d",
                self.name, e, len(stale),
            )
            return stale

        new_entry = CacheEntry(data=tuple(rows), fetched_at=self._clock())
        self._entry = new_entry
        self._failed_at = None
        logger.info("REFERENCE_CACHE refreshed name=%s count=%d", self.name, len(new_entry.data))
        return list(new_entry.data)

    async def _fetch_all(self) -> list[T]:
        rows: list[T] = []
        offset = 0
        skipped = 0
        while True:
            page = await self._fetch_page(offset, self._page_size)
            page = page or []
            for raw in page:
                try:
                    row = self._row_factory(raw)
                except (KeyError, TypeError, ValueError) as e:
                    skipped += 1
                    logger.warning("REFERENCE_CACHE bad_row name=%s error=%s", self.name, e)
                    continue
                if getattr(row, "is_active", True):
                    rows.append(row)
            if len(page) < self._page_size:
                break
            offset += self._page_size
        if skipped:
            logger.warning("REFERENCE_CACHE skipped_rows name=%s count=%d", self.name, skipped)
        return rows

    def invalidate(self) -> None:
        logger.info("REFERENCE_CACHE invalidated name=%s", self.name)
        self._entry = None
        self._failed_at = None

    def stats(self) -> dict[str, Any]:
        entry = self._entry
        if entry is None:
            return {
                "name": self.name,
                "cached": False,
                "count": 0,
                "age_seconds": None,
                "expires_in_seconds": None,
                "ttl_seconds": self._ttl,
                "is_valid": False,
            }
        age = self._clock() - entry.fetched_at
        return {
            "name": self.name,
            "cached": True,
            "count": len(entry.data),
            "age_seconds": age,
            "expires_in_seconds": self._ttl - age,
            "ttl_seconds": self._ttl,
            "is_valid": age < self._ttl,
        }
