"""
Major food allergen check (FALCPA / FASTER Act), applied to every product category.
"""
import logging
from typing import Optional, Sequence

from labelcheck.checkers.base import DomainChecker
from labelcheck.matching.base import MatchResult
from labelcheck.matching.matcher import TieredMatcher, allergen_matcher
from labelcheck.models.draft import AnalysisDraft
from labelcheck.models.reference import DEFAULT_ALLERGEN_CITATION, MajorAllergen
from labelcheck.models.reports import AllergenReport, IngredientAllergens
from labelcheck.models.verdict import (
    ComplianceStatus,
    ComplianceTableRow,
    Priority,
    Recommendation,
)
from labelcheck.normalization.normalizer import normalize_for_allergens
from labelcheck.reference_data.cache import ReferenceCache

logger = logging.getLogger(__name__)

ALLERGEN_ELEMENT = "Food Allergen Labeling"

# Not allergens, but they resemble derivatives ("royal jelly" is a bee product, not a "jelly")
FALSE_POSITIVES = frozenset({
    "royal jelly",
    "royal gel",
    "bee jelly",
})

# Draft allergen statuses that mean the declaration is missing or incomplete
_DECLARATION_PROBLEM = frozenset({
    ComplianceStatus.POTENTIALLY_NON_COMPLIANT.value,
    ComplianceStatus.NON_COMPLIANT.value,
})


def format_allergen_results(results: Sequence[MatchResult[MajorAllergen]]) -> str:
    if not results:
        return "No allergens detected"
    labels = {"exact": "exact match", "synonym": "derivative", "fuzzy": "fuzzy match"}
    parts = []
    for r in results:
        mark = "✓" if r.confidence == "high" else "?"
        name = r.matched_entry.allergen_name if r.matched_entry else "Unknown"
        parts.append(f"{mark} {name} ({labels.get(r.match_type, r.match_type)})")
    return ", ".join(parts)


class AllergenChecker(DomainChecker[AllergenReport]):
    """
    Each allergen is matched independently (exact name, then derivative, then word-boundary
    derivative containment), so one ingredient can report several allergens but never the
    same allergen twice.
    """
    name = "allergen"

    def __init__(
        self,
        cache: ReferenceCache[MajorAllergen],
        matcher: Optional[TieredMatcher] = None,
        false_positives: frozenset = FALSE_POSITIVES,
    ):
        self._cache = cache
        self._matcher = matcher or allergen_matcher()
        self._false_positives = false_positives

    def applies_to(self, category) -> bool:
        return True

    def _empty_report(self) -> AllergenReport:
        return AllergenReport()

    def match_ingredient(self, ingredient: str, allergens: Sequence[MajorAllergen]) -> list[MatchResult[MajorAllergen]]:
        key = normalize_for_allergens(ingredient)
        if not key:
            return []
        if key in self._false_positives:
            logger.debug("ALLERGEN_CHECK false_positive skipped ingredient=%s", key)
            return []
        results = (self._matcher.match(ingredient, [allergen], normalized=key) for allergen in allergens)
        return [r for r in results if r.matched]

    async def _check(self, ingredients: list[str], draft: Optional[AnalysisDraft]) -> AllergenReport:
        allergens = await self._cache.get()
        if not allergens:
            logger.warning("ALLERGEN_CHECK no reference data; no allergens can be detected")

        report = AllergenReport(total_ingredients=len(ingredients))
        for ingredient in ingredients:
            matches = self.match_ingredient(ingredient, allergens)
            if matches:
                report.ingredients_with_allergens.append(IngredientAllergens(ingredient, matches))

        detected = [a.allergen_name for a in report.allergens_detected]
        logger.info(
            "ALLERGEN_CHECK complete total=%d ingredients_with_allergens=%d allergens=%s",
            report.total_ingredients, len(report.ingredients_with_allergens), detected,
        )

        draft_status = (draft.allergen_status or "").strip().lower() if draft else ""
        if detected and draft_status in _DECLARATION_PROBLEM:
            citation = report.allergens_detected[0].regulation_citation or DEFAULT_ALLERGEN_CITATION
            report.recommendations.append(Recommendation(
                priority=Priority.CRITICAL,
                recommendation=(
                    "CRITICAL ALLERGEN VIOLATION: Allergen database check detected the following major "
                    f"food allergens in ingredients: {', '.join(detected)}. Federal law (FALCPA Section "
                    "403(w) and FASTER Act) requires these allergens to be declared either parenthetically "
                    'after each ingredient or in a "Contains:" statement. Missing allergen declarations can '
                    "result in FDA enforcement action and mandatory recalls. Add proper allergen "
                    "declarations immediately."
                ),
                regulation=citation,
            ))
            report.table_row = ComplianceTableRow(
                element=ALLERGEN_ELEMENT,
                status="Non-Compliant",
                rationale=(
                    f"Allergens detected ({', '.join(detected)}) but declaration may be missing or "
                    "incomplete per FALCPA/FASTER Act"
                ),
                regulation=citation,
            )
        elif detected:
            report.table_row = ComplianceTableRow(
                element=ALLERGEN_ELEMENT,
                status="Declaration Required",
                rationale=(
                    f"Major food allergens detected ({', '.join(detected)}); each must be declared "
                    'parenthetically or in a "Contains:" statement'
                ),
                regulation=DEFAULT_ALLERGEN_CITATION,
            )
        else:
            report.table_row = ComplianceTableRow(
                element=ALLERGEN_ELEMENT,
                status="Compliant",
                rationale=f"No major food allergens detected in {report.total_ingredients} ingredients",
                regulation=DEFAULT_ALLERGEN_CITATION,
            )
        return report
