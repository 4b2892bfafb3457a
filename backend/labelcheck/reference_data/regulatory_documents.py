"""
Short-lived cache of active regulatory documents, read by the document-retrieval collaborator.
Same ReferenceCache pattern as the determination tables, with a 1 hour TTL.
"""
import logging
import time
from typing import Callable

from labelcheck import config
from labelcheck.models.reference import RegulatoryDocument
from labelcheck.reference_data.cache import PageFetcher, ReferenceCache

logger = logging.getLogger(__name__)

MAX_ACTIVE_DOCUMENTS = 50


def regulatory_document_cache(
    fetch_page: PageFetcher,
    clock: Callable[[], float] = time.time,
    ttl_seconds: float = config.REGULATORY_DOCUMENT_CACHE_TTL_SECONDS,
    page_size: int = config.REFERENCE_PAGE_SIZE,
    failure_cooldown_seconds: float = config.REFERENCE_FAILURE_COOLDOWN_SECONDS,
) -> ReferenceCache[RegulatoryDocument]:
    return ReferenceCache(
        name="regulatory_documents",
        fetch_page=fetch_page,
        row_factory=RegulatoryDocument.from_dict,
        ttl_seconds=ttl_seconds,
        page_size=page_size,
        clock=clock,
        failure_cooldown_seconds=failure_cooldown_seconds,
    )


async def get_active_documents(
    cache: ReferenceCache[RegulatoryDocument],
    limit: int = MAX_ACTIVE_DOCUMENTS,
) -> list[RegulatoryDocument]:
    """Newest effective date first; documents without a date sort last."""
    docs = await cache.get()
    dated = sorted((d for d in docs if d.effective_date), key=lambda d: d.effective_date, reverse=True)
    undated = [d for d in docs if not d.effective_date]
    result = (dated + undated)[:limit]
    logger.debug("REGULATORY_DOCUMENTS active count=%d", len(result))
    return result
