"""
Common shape of a domain checker: category gating plus an error boundary around the check.
"""
import logging
from abc import ABC, abstractmethod
from typing import Generic, Optional, Sequence, TypeVar

from labelcheck.models.draft import AnalysisDraft
from labelcheck.models.reference import ProductCategory
from labelcheck.models.reports import DomainReport

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=DomainReport)


class DomainChecker(ABC, Generic[R]):
    name: str = "domain"
    categories: frozenset = frozenset(ProductCategory)

    def applies_to(self, category: Optional[ProductCategory]) -> bool:
        return category is not None and category in self.categories

    async def check(
        self,
        ingredients: Sequence[str],
        draft: Optional[AnalysisDraft] = None,
    ) -> R:
        """
        Run the check. Never raises: a failure while loading reference data or matching
        is logged and a degraded, empty report is returned.
        """
        ingredients = [i for i in ingredients if i and i.strip()]
        if not ingredients:
            logger.info("%s_CHECK skipped (no ingredients)", self.name.upper())
            return self._empty_report()
        try:
            return await self._check(ingredients, draft)
        except Exception as e:
            logger.exception("%s_CHECK failed error=%s (returning empty report)", self.name.upper(), e)
            report = self._empty_report()
            report.degraded = True
            return report

    @abstractmethod
    async def _check(self, ingredients: list[str], draft: Optional[AnalysisDraft]) -> R:
        ...

    @abstractmethod
    def _empty_report(self) -> R:
        ...
