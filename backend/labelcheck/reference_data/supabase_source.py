"""
Paginated reads of the regulatory reference tables from Supabase.
"""
import logging
from functools import partial
from typing import Optional

from supabase import Client, create_client

from labelcheck import config
from labelcheck.errors import DataSourceError
from labelcheck.reference_data.cache import PageFetcher
from labelcheck.reference_data.retry import call_with_retries

logger = logging.getLogger(__name__)


def create_supabase_client() -> Client:
    url = config.get_supabase_url()
    key = config.get_supabase_key()
    if not url or not key:
        raise DataSourceError("supabase", "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
    return create_client(url, key)


class SupabaseReferenceSource:
    """fetch_page(table, offset, limit) against the upstream store; failures raise DataSourceError."""

    def __init__(
        self,
        client: Client,
        max_retries: int = config.FETCH_MAX_RETRIES,
        initial_backoff: float = config.FETCH_INITIAL_BACKOFF,
    ):
        self._client = client
        self._max_retries = max_retries
        self._initial_backoff = initial_backoff

    def _select_page(self, table: str, offset: int, limit: int, active_only: bool) -> list[dict]:
        query = self._client.table(table).select("*")
        if active_only:
            query = query.eq("is_active", True)
        # range() is inclusive on both ends
        response = query.range(offset, offset + limit - 1).execute()
        return list(response.data or [])

    async def fetch_page(
        self,
        table: str,
        offset: int,
        limit: int,
        active_only: Optional[bool] = None,
    ) -> list[dict]:
        if active_only is None:
            active_only = table in config.TABLES_WITH_ACTIVE_FLAG
        rows, error = await call_with_retries(
            partial(self._select_page, table, offset, limit, active_only),
            label=f"{table}[{offset}:{offset + limit}]",
            max_retries=self._max_retries,
            initial_backoff=self._initial_backoff,
        )
        if error is not None:
            raise DataSourceError(table, error)
        logger.debug("SUPABASE page table=%s offset=%d rows=%d", table, offset, len(rows))
        return rows

    def pager(self, table: str) -> PageFetcher:
        """Bind a table for ReferenceCache."""
        async def fetch(offset: int, limit: int) -> list[dict]:
            return await self.fetch_page(table, offset, limit)
        return fetch
