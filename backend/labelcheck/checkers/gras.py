"""
GRAS check for conventional foods and beverages.
A missing GRAS match is not a violation: it asks for verification (self-affirmation pathway).
"""
import logging
from typing import Optional

from labelcheck.checkers.base import DomainChecker
from labelcheck.matching.matcher import TieredMatcher, gras_matcher
from labelcheck.models.draft import AnalysisDraft
from labelcheck.models.reference import FOOD_AND_BEVERAGE_CATEGORIES, GRASSubstance
from labelcheck.models.reports import GRASReport
from labelcheck.models.verdict import ComplianceTableRow, Priority, Recommendation
from labelcheck.reference_data.cache import ReferenceCache

logger = logging.getLogger(__name__)

GRAS_ELEMENT = "GRAS Ingredient Compliance"
GRAS_SELF_AFFIRMATION_CITATION = "21 CFR 170.30(b) (GRAS self-determination)"
GRAS_TABLE_CITATION = "21 CFR 170.3, 21 CFR 170.30"


def gras_recommendation(ingredient: str) -> Recommendation:
    return Recommendation(
        priority=Priority.MEDIUM,
        recommendation=(
            f'Verify GRAS status for ingredient "{ingredient}". It was not found in the FDA GRAS '
            "(Generally Recognized as Safe) database. If this ingredient is used, it must be the "
            "subject of a GRAS determination in accordance with 21 CFR 170.30(b) (industry "
            "self-affirmation is acceptable) or be approved through a food additive petition. "
            "Keep documentation of the GRAS determination on file before marketing this product."
        ),
        regulation=GRAS_SELF_AFFIRMATION_CITATION,
    )


class GRASChecker(DomainChecker[GRASReport]):
    name = "gras"
    categories = FOOD_AND_BEVERAGE_CATEGORIES

    def __init__(
        self,
        cache: ReferenceCache[GRASSubstance],
        matcher: Optional[TieredMatcher] = None,
    ):
        self._cache = cache
        self._matcher = matcher or gras_matcher()

    def _empty_report(self) -> GRASReport:
        return GRASReport()

    async def _check(self, ingredients: list[str], draft: Optional[AnalysisDraft]) -> GRASReport:
        entries = await self._cache.get()
        if not entries:
            logger.warning("GRAS_CHECK no reference data; every ingredient will require verification")

        report = GRASReport(total_ingredients=len(ingredients))
        for ingredient in ingredients:
            result = self._matcher.match(ingredient, entries)
            report.detailed_results.append(result)
            if result.matched:
                report.gras_ingredients.append(ingredient)
            else:
                report.non_gras_ingredients.append(ingredient)
                report.recommendations.append(gras_recommendation(ingredient))

        logger.info(
            "GRAS_CHECK complete total=%d matched=%d unmatched=%s",
            report.total_ingredients, report.gras_compliant_count, report.non_gras_ingredients,
        )

        if report.overall_compliant:
            report.table_row = ComplianceTableRow(
                element=GRAS_ELEMENT,
                status="Compliant",
                rationale=f"All {report.total_ingredients} ingredients found in FDA GRAS database",
                regulation=GRAS_TABLE_CITATION,
            )
        else:
            missing = report.non_gras_ingredients
            report.table_row = ComplianceTableRow(
                element=GRAS_ELEMENT,
                status="Requires Verification",
                rationale=(
                    f"{len(missing)} ingredient(s) not in FDA GRAS database: {', '.join(missing)}. "
                    "May be subject to industry self-affirmation of GRAS status."
                ),
                regulation=GRAS_TABLE_CITATION,
            )
        return report
