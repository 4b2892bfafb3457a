"""
ComplianceVerificationEngine: wires the reference caches, the domain checkers and the aggregator.

Usage:
    engine = ComplianceVerificationEngine.from_config()
    report = await engine.post_process(draft)
"""
import logging
import time
from typing import Any, Awaitable, Callable, Optional, Sequence

from labelcheck import config
from labelcheck.checkers.allergen import AllergenChecker
from labelcheck.checkers.gras import GRASChecker
from labelcheck.checkers.ndi import NDIChecker
from labelcheck.evaluation.aggregator import ComplianceAggregator, DraftInput
from labelcheck.models.reference import (
    GRASSubstance,
    GrandfatherIngredient,
    MajorAllergen,
    NDINotification,
    RegulatoryDocument,
)
from labelcheck.models.verdict import FinalReport
from labelcheck.reference_data.cache import PageFetcher, ReferenceCache
from labelcheck.reference_data.regulatory_documents import get_active_documents, regulatory_document_cache

logger = logging.getLogger(__name__)

# fetch_page(table, offset, limit) -> rows
TableFetcher = Callable[[str, int, int], Awaitable[list[dict]]]


def _bind(fetch_page: TableFetcher, table: str) -> PageFetcher:
    async def fetch(offset: int, limit: int) -> list[dict]:
        return await fetch_page(table, offset, limit)
    return fetch


class ComplianceVerificationEngine:
    def __init__(
        self,
        fetch_page: TableFetcher,
        clock: Callable[[], float] = time.time,
        ttl_seconds: float = config.REFERENCE_CACHE_TTL_SECONDS,
        document_ttl_seconds: float = config.REGULATORY_DOCUMENT_CACHE_TTL_SECONDS,
        page_size: int = config.REFERENCE_PAGE_SIZE,
        failure_cooldown_seconds: float = config.REFERENCE_FAILURE_COOLDOWN_SECONDS,
    ):
        def cache(name: str, table: str, row_factory) -> ReferenceCache:
            return ReferenceCache(
                name=name,
                fetch_page=_bind(fetch_page, table),
                row_factory=row_factory,
                ttl_seconds=ttl_seconds,
                page_size=page_size,
                clock=clock,
                failure_cooldown_seconds=failure_cooldown_seconds,
            )

        self.gras_cache: ReferenceCache[GRASSubstance] = cache("gras", config.GRAS_TABLE, GRASSubstance.from_dict)
        self.ndi_cache: ReferenceCache[NDINotification] = cache("ndi", config.NDI_TABLE, NDINotification.from_dict)
        self.grandfather_cache: ReferenceCache[GrandfatherIngredient] = cache(
            "grandfather", config.GRANDFATHER_TABLE, GrandfatherIngredient.from_dict,
        )
        self.allergen_cache: ReferenceCache[MajorAllergen] = cache(
            "allergens", config.ALLERGEN_TABLE, MajorAllergen.from_dict,
        )
        self.document_cache: ReferenceCache[RegulatoryDocument] = regulatory_document_cache(
            _bind(fetch_page, config.REGULATORY_DOCUMENT_TABLE),
            clock=clock,
            ttl_seconds=document_ttl_seconds,
            page_size=page_size,
            failure_cooldown_seconds=failure_cooldown_seconds,
        )

        self.gras = GRASChecker(self.gras_cache)
        self.ndi = NDIChecker(self.ndi_cache, self.grandfather_cache)
        self.allergen = AllergenChecker(self.allergen_cache)
        self._aggregator = ComplianceAggregator(self.gras, self.ndi, self.allergen)

    @classmethod
    def from_config(cls, **kwargs) -> "ComplianceVerificationEngine":
        """Supabase-backed engine; raises DataSourceError when credentials are missing."""
        from labelcheck.reference_data.supabase_source import SupabaseReferenceSource, create_supabase_client

        config.log_config()
        source = SupabaseReferenceSource(create_supabase_client())
        return cls(source.fetch_page, **kwargs)

    def _caches(self) -> dict[str, ReferenceCache]:
        return {
            "gras": self.gras_cache,
            "ndi": self.ndi_cache,
            "grandfather": self.grandfather_cache,
            "allergens": self.allergen_cache,
            "regulatory_documents": self.document_cache,
        }

    async def post_process(
        self,
        draft: DraftInput,
        ingredients: Optional[Sequence[str]] = None,
        category: Any = None,
    ) -> FinalReport:
        return await self._aggregator.post_process(draft, ingredients=ingredients, category=category)

    def invalidate_caches(self) -> None:
        for c in self._caches().values():
            c.invalidate()
        logger.info("ENGINE caches invalidated")

    def get_cache_stats(self) -> dict[str, dict[str, Any]]:
        return {key: c.stats() for key, c in self._caches().items()}

    async def get_active_regulatory_documents(self) -> list[RegulatoryDocument]:
        return await get_active_documents(self.document_cache)
