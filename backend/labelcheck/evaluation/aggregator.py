"""
Post-processing of an AI draft analysis.
Pipeline: run GRAS / NDI / allergen checks concurrently (gated by product category)
-> merge recommendations and table rows -> standing monitoring note -> status enforcement.
"""
import asyncio
import logging
from typing import Any, Optional, Sequence, Union

from pydantic import ValidationError

from labelcheck.checkers.allergen import AllergenChecker
from labelcheck.checkers.base import DomainChecker
from labelcheck.checkers.gras import GRASChecker
from labelcheck.checkers.ndi import NDIChecker
from labelcheck.errors import CheckerFailure
from labelcheck.evaluation.status_enforcer import enforce_status_consistency
from labelcheck.models.draft import AnalysisDraft, parse_category
from labelcheck.models.reference import ProductCategory
from labelcheck.models.reports import DomainReport
from labelcheck.models.verdict import (
    ComplianceStatus,
    FinalReport,
    Priority,
    Recommendation,
)

logger = logging.getLogger(__name__)

MONITORING_RECOMMENDATION = Recommendation(
    priority=Priority.LOW,
    recommendation=(
        "Continue monitoring for compliance with any new regulations or labeling requirements. "
        "FDA regulations and guidance documents are updated periodically, and maintaining ongoing "
        "awareness of regulatory changes is essential for continued compliance."
    ),
    regulation="General FDA guidelines for product labeling",
)

DraftInput = Union[AnalysisDraft, dict, None]


def coerce_draft(draft: DraftInput) -> AnalysisDraft:
    if isinstance(draft, AnalysisDraft):
        return draft
    if draft is None:
        return AnalysisDraft()
    try:
        return AnalysisDraft.model_validate(draft)
    except ValidationError as e:
        logger.warning("POST_PROCESS draft invalid error_count=%d (using empty draft)", e.error_count())
        return AnalysisDraft()


class ComplianceAggregator:
    """
    Fan-out / fan-in over the domain checkers. A checker that raises contributes nothing;
    the others are still merged and the failure is recorded in FinalReport.skipped_checks.
    """

    def __init__(self, gras: GRASChecker, ndi: NDIChecker, allergen: AllergenChecker):
        self._gras = gras
        self._ndi = ndi
        self._allergen = allergen

    async def post_process(
        self,
        draft: DraftInput,
        ingredients: Optional[Sequence[str]] = None,
        category: Any = None,
    ) -> FinalReport:
        """
        ingredients / category default to the draft's own fields.
        Never raises for checker failures.
        """
        draft = coerce_draft(draft)
        ingredient_list = list(ingredients) if ingredients is not None else draft.ingredients
        product_category: Optional[ProductCategory] = (
            parse_category(category) if category is not None else draft.category()
        )

        planned: list[DomainChecker] = []
        if ingredient_list:
            planned = [c for c in (self._gras, self._ndi, self._allergen) if c.applies_to(product_category)]
        else:
            logger.info("POST_PROCESS no ingredients found in analysis - skipping database checks")
        if product_category == ProductCategory.DIETARY_SUPPLEMENT:
            logger.info("POST_PROCESS dietary supplement - GRAS not applicable (regulated under DSHEA)")
        elif product_category is not None:
            logger.info("POST_PROCESS food/beverage - NDI not applicable (dietary supplements only)")

        logger.info(
            "POST_PROCESS start category=%s ingredients=%d checks=%s",
            product_category.value if product_category else None,
            len(ingredient_list), [c.name for c in planned],
        )
        outcomes = await asyncio.gather(
            *(c.check(ingredient_list, draft) for c in planned),
            return_exceptions=True,
        )

        final = FinalReport(
            verdict=ComplianceStatus.COMPLIANT,
            recommendations=draft.typed_recommendations(),
            compliance_table=draft.typed_table(),
        )
        reports: dict[str, DomainReport] = {}
        for checker, outcome in zip(planned, outcomes):
            if isinstance(outcome, BaseException):
                failure = CheckerFailure(checker.name, outcome)
                logger.warning("POST_PROCESS check_failed check=%s error=%s (skipped)", checker.name, failure)
                final.skipped_checks.append(checker.name)
                continue
            if outcome.degraded:
                final.skipped_checks.append(checker.name)
            reports[checker.name] = outcome
            final.recommendations.extend(outcome.recommendations)
            if outcome.table_row is not None:
                final.compliance_table.append(outcome.table_row)

        final.gras_report = reports.get(self._gras.name)
        final.ndi_report = reports.get(self._ndi.name)
        final.allergen_report = reports.get(self._allergen.name)

        final.recommendations.append(MONITORING_RECOMMENDATION)

        # Must run last: it reads the complete recommendation list
        current = draft.verdict()
        if current is None:
            logger.info("POST_PROCESS draft has no compliance status; starting from compliant")
            current = ComplianceStatus.COMPLIANT
        final.verdict = enforce_status_consistency(final.recommendations, current)

        logger.info(
            "POST_PROCESS complete verdict=%s recommendations=%d table_rows=%d skipped=%s",
            final.verdict.value, len(final.recommendations), len(final.compliance_table), final.skipped_checks,
        )
        return final
