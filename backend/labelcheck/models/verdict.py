"""
Structured compliance verdict, recommendations and the final post-processed report.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from labelcheck.models.reports import AllergenReport, GRASReport, NDIReport


class ComplianceStatus(str, Enum):
    COMPLIANT = "compliant"
    LIKELY_COMPLIANT = "likely_compliant"
    POTENTIALLY_NON_COMPLIANT = "potentially_non_compliant"
    NON_COMPLIANT = "non_compliant"


class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Recommendation:
    priority: Priority
    recommendation: str
    regulation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "priority": self.priority.value,
            "recommendation": self.recommendation,
            "regulation": self.regulation,
        }


@dataclass(frozen=True)
class ComplianceTableRow:
    element: str
    status: str  # "Compliant" | "Requires Verification" | "Non-Compliant" | ...
    rationale: str = ""
    regulation: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "element": self.element,
            "status": self.status,
            "rationale": self.rationale,
        }
        if self.regulation:
            d["regulation"] = self.regulation
        return d


@dataclass
class FinalReport:
    verdict: ComplianceStatus
    recommendations: list[Recommendation] = field(default_factory=list)
    compliance_table: list[ComplianceTableRow] = field(default_factory=list)
    gras_report: Optional["GRASReport"] = None
    ndi_report: Optional["NDIReport"] = None
    allergen_report: Optional["AllergenReport"] = None
    skipped_checks: list[str] = field(default_factory=list)  # checks that failed and contributed nothing

    def to_dict(self) -> dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "compliance_table": [row.to_dict() for row in self.compliance_table],
            "gras_compliance": self.gras_report.to_dict() if self.gras_report else None,
            "ndi_compliance": self.ndi_report.to_dict() if self.ndi_report else None,
            "allergen_database_check": self.allergen_report.to_dict() if self.allergen_report else None,
            "skipped_checks": list(self.skipped_checks),
        }
