"""
AI draft analysis as consumed by the verification engine.
Only the fields the engine reads are modelled; anything else in the payload is ignored.
"""
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from labelcheck.models.reference import ProductCategory
from labelcheck.models.verdict import (
    ComplianceStatus,
    ComplianceTableRow,
    Priority,
    Recommendation,
)

logger = logging.getLogger(__name__)


class DraftModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DraftRecommendation(DraftModel):
    priority: str = "low"
    recommendation: str = ""
    regulation: str = ""


class DraftTableRow(DraftModel):
    element: Optional[str] = None
    section: Optional[str] = None
    status: str = ""
    rationale: Optional[str] = None
    details: Optional[str] = None
    regulation: Optional[str] = None


class IngredientLabeling(DraftModel):
    ingredients_list: List[str] = Field(default_factory=list)


class OverallAssessment(DraftModel):
    primary_compliance_status: Optional[str] = None
    summary: Optional[str] = None
    key_findings: List[str] = Field(default_factory=list)


class AllergenLabeling(DraftModel):
    status: Optional[str] = None


class AnalysisDraft(DraftModel):
    product_name: Optional[str] = None
    product_category: Optional[str] = None
    ingredient_labeling: Optional[IngredientLabeling] = None
    recommendations: List[DraftRecommendation] = Field(default_factory=list)
    overall_assessment: Optional[OverallAssessment] = None
    compliance_table: List[DraftTableRow] = Field(default_factory=list)
    allergen_labeling: Optional[AllergenLabeling] = None

    @property
    def ingredients(self) -> List[str]:
        if self.ingredient_labeling is None:
            return []
        return list(self.ingredient_labeling.ingredients_list)

    @property
    def allergen_status(self) -> Optional[str]:
        return self.allergen_labeling.status if self.allergen_labeling else None

    def category(self) -> Optional[ProductCategory]:
        return parse_category(self.product_category)

    def verdict(self) -> Optional[ComplianceStatus]:
        status = self.overall_assessment.primary_compliance_status if self.overall_assessment else None
        if not status:
            return None
        try:
            return ComplianceStatus(status.strip().lower())
        except ValueError:
            logger.warning("DRAFT unknown compliance status=%s (ignored)", status)
            return None

    def typed_recommendations(self) -> List[Recommendation]:
        """Draft recommendations with a known priority; others are dropped with a warning."""
        out: List[Recommendation] = []
        for r in self.recommendations:
            try:
                priority = Priority(r.priority.strip().lower())
            except ValueError:
                logger.warning("DRAFT unknown recommendation priority=%s (dropped)", r.priority)
                continue
            out.append(Recommendation(priority, r.recommendation, r.regulation))
        return out

    def typed_table(self) -> List[ComplianceTableRow]:
        return [
            ComplianceTableRow(
                element=row.element or row.section or "",
                status=row.status,
                rationale=row.rationale or row.details or "",
                regulation=row.regulation,
            )
            for row in self.compliance_table
        ]


def parse_category(value) -> Optional[ProductCategory]:
    if value is None or isinstance(value, ProductCategory):
        return value
    try:
        return ProductCategory(str(value).strip().upper())
    except ValueError:
        logger.warning("DRAFT unknown product_category=%s", value)
        return None
