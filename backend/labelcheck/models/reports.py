"""
Per-domain reports produced by the checkers. Created fresh per analysis; never persisted here.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

from labelcheck.matching.base import MatchResult
from labelcheck.models.reference import (
    GRASSubstance,
    GrandfatherIngredient,
    MajorAllergen,
    NDINotification,
)
from labelcheck.models.verdict import ComplianceTableRow, Recommendation


@dataclass
class DomainReport:
    recommendations: list[Recommendation] = field(default_factory=list)
    table_row: Optional[ComplianceTableRow] = None
    degraded: bool = False  # reference data or matching failed; report is best-effort

    def _base_dict(self) -> dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "table_row": self.table_row.to_dict() if self.table_row else None,
            "degraded": self.degraded,
        }


@dataclass
class GRASReport(DomainReport):
    total_ingredients: int = 0
    gras_ingredients: list[str] = field(default_factory=list)
    non_gras_ingredients: list[str] = field(default_factory=list)
    detailed_results: list[MatchResult[GRASSubstance]] = field(default_factory=list)

    @property
    def gras_compliant_count(self) -> int:
        return len(self.gras_ingredients)

    @property
    def overall_compliant(self) -> bool:
        return not self.non_gras_ingredients

    def to_dict(self) -> dict[str, Any]:
        d = {
            "status": "compliant" if self.overall_compliant else "requires_verification",
            "total_ingredients": self.total_ingredients,
            "gras_compliant_count": self.gras_compliant_count,
            "gras_ingredients": list(self.gras_ingredients),
            "non_gras_ingredients": list(self.non_gras_ingredients),
            "detailed_results": [r.to_dict() for r in self.detailed_results],
        }
        d.update(self._base_dict())
        return d


@dataclass
class NDICheckResult:
    ingredient: str
    ndi_match: MatchResult[NDINotification]
    grandfather_match: Optional[MatchResult[GrandfatherIngredient]] = None
    compliance_note: str = ""

    @property
    def has_ndi(self) -> bool:
        return self.ndi_match.matched

    @property
    def grandfathered(self) -> bool:
        return self.grandfather_match is not None and self.grandfather_match.matched

    @property
    def requires_ndi(self) -> bool:
        return not self.has_ndi and not self.grandfathered

    def to_dict(self) -> dict[str, Any]:
        return {
            "ingredient": self.ingredient,
            "has_ndi": self.has_ndi,
            "ndi_match": self.ndi_match.to_dict() if self.has_ndi else None,
            "grandfathered": self.grandfathered,
            "requires_ndi": self.requires_ndi,
            "compliance_note": self.compliance_note,
        }


@dataclass
class NDIReport(DomainReport):
    results: list[NDICheckResult] = field(default_factory=list)

    @property
    def total_checked(self) -> int:
        return len(self.results)

    @property
    def with_ndi(self) -> int:
        return sum(1 for r in self.results if r.has_ndi)

    @property
    def without_ndi(self) -> int:
        return self.total_checked - self.with_ndi

    @property
    def requires_notification(self) -> int:
        return sum(1 for r in self.results if r.requires_ndi)

    def to_dict(self) -> dict[str, Any]:
        d = {
            "results": [r.to_dict() for r in self.results],
            "summary": {
                "total_checked": self.total_checked,
                "with_ndi": self.with_ndi,
                "without_ndi": self.without_ndi,
                "requires_notification": self.requires_notification,
            },
        }
        d.update(self._base_dict())
        return d


@dataclass
class IngredientAllergens:
    ingredient: str
    allergens: list[MatchResult[MajorAllergen]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ingredient": self.ingredient,
            "allergens": [m.to_dict() for m in self.allergens],
        }


@dataclass
class AllergenReport(DomainReport):
    total_ingredients: int = 0
    ingredients_with_allergens: list[IngredientAllergens] = field(default_factory=list)

    @property
    def allergens_detected(self) -> list[MajorAllergen]:
        """Unique allergens in first-seen order."""
        seen: dict[str, MajorAllergen] = {}
        for item in self.ingredients_with_allergens:
            for m in item.allergens:
                a = m.matched_entry
                if a is not None:
                    seen.setdefault(a.id or a.allergen_name, a)
        return list(seen.values())

    def _count(self, confidence: str) -> int:
        return sum(
            1
            for item in self.ingredients_with_allergens
            for m in item.allergens
            if m.confidence == confidence
        )

    def to_dict(self) -> dict[str, Any]:
        detected = self.allergens_detected
        d = {
            "allergens_detected": [a.to_dict() for a in detected],
            "ingredients_with_allergens": [i.to_dict() for i in self.ingredients_with_allergens],
            "summary": {
                "total_ingredients": self.total_ingredients,
                "ingredients_with_allergens": len(self.ingredients_with_allergens),
                "unique_allergens_detected": len(detected),
                "high_confidence_matches": self._count("high"),
                "medium_confidence_matches": self._count("medium"),
            },
        }
        d.update(self._base_dict())
        return d
