"""
Read-only reference rows mirrored from the upstream regulatory tables.
Every variant exposes canonical_name, synonyms (ordered) and is_active for the matcher.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol


class ProductCategory(str, Enum):
    DIETARY_SUPPLEMENT = "DIETARY_SUPPLEMENT"
    CONVENTIONAL_FOOD = "CONVENTIONAL_FOOD"
    ALCOHOLIC_BEVERAGE = "ALCOHOLIC_BEVERAGE"
    NON_ALCOHOLIC_BEVERAGE = "NON_ALCOHOLIC_BEVERAGE"


FOOD_AND_BEVERAGE_CATEGORIES = frozenset({
    ProductCategory.CONVENTIONAL_FOOD,
    ProductCategory.NON_ALCOHOLIC_BEVERAGE,
    ProductCategory.ALCOHOLIC_BEVERAGE,
})


class ReferenceEntry(Protocol):
    @property
    def canonical_name(self) -> str: ...

    @property
    def synonyms(self) -> list[str]: ...

    @property
    def is_active(self) -> bool: ...


def _str_list(value) -> list[str]:
    if not value:
        return []
    return [str(v) for v in value if v]


@dataclass(frozen=True)
class GRASSubstance:
    id: str
    ingredient_name: str
    gras_status: str = "affirmed"  # affirmed | notice | scogs | pending
    cas_number: Optional[str] = None
    gras_notice_number: Optional[str] = None  # e.g. "GRN 000123"
    source_reference: Optional[str] = None
    category: Optional[str] = None
    approved_uses: list[str] = field(default_factory=list)
    limitations: Optional[str] = None
    synonyms: list[str] = field(default_factory=list)
    common_name: Optional[str] = None
    technical_name: Optional[str] = None
    is_active: bool = True

    @property
    def canonical_name(self) -> str:
        return self.ingredient_name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ingredient_name": self.ingredient_name,
            "gras_status": self.gras_status,
            "cas_number": self.cas_number,
            "gras_notice_number": self.gras_notice_number,
            "source_reference": self.source_reference,
            "category": self.category,
            "approved_uses": list(self.approved_uses),
            "limitations": self.limitations,
            "synonyms": list(self.synonyms),
            "common_name": self.common_name,
            "technical_name": self.technical_name,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "GRASSubstance":
        return cls(
            id=str(d.get("id", "")),
            ingredient_name=d["ingredient_name"],
            gras_status=d.get("gras_status") or "affirmed",
            cas_number=d.get("cas_number"),
            gras_notice_number=d.get("gras_notice_number"),
            source_reference=d.get("source_reference"),
            category=d.get("category"),
            approved_uses=_str_list(d.get("approved_uses")),
            limitations=d.get("limitations"),
            synonyms=_str_list(d.get("synonyms")),
            common_name=d.get("common_name"),
            technical_name=d.get("technical_name"),
            is_active=d.get("is_active", True) is not False,
        )


@dataclass(frozen=True)
class NDINotification:
    id: str
    notification_number: int
    ingredient_name: str
    report_number: Optional[str] = None
    firm: Optional[str] = None
    submission_date: Optional[str] = None  # ISO date
    fda_response_date: Optional[str] = None

    # ndi_ingredients has no synonym or is_active columns
    @property
    def canonical_name(self) -> str:
        return self.ingredient_name

    @property
    def synonyms(self) -> list[str]:
        return []

    @property
    def is_active(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "notification_number": self.notification_number,
            "ingredient_name": self.ingredient_name,
            "report_number": self.report_number,
            "firm": self.firm,
            "submission_date": self.submission_date,
            "fda_response_date": self.fda_response_date,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "NDINotification":
        return cls(
            id=str(d.get("id", "")),
            notification_number=int(d["notification_number"]),
            ingredient_name=d["ingredient_name"],
            report_number=d.get("report_number"),
            firm=d.get("firm"),
            submission_date=d.get("submission_date"),
            fda_response_date=d.get("fda_response_date"),
        )


@dataclass(frozen=True)
class GrandfatherIngredient:
    """Dietary ingredient marketed before October 15, 1994 (no NDI notification required)."""
    id: str
    ingredient_name: str
    synonyms: list[str] = field(default_factory=list)
    source: Optional[str] = None  # e.g. "CRN Grandfather List 2024"
    notes: Optional[str] = None
    is_active: bool = True

    @property
    def canonical_name(self) -> str:
        return self.ingredient_name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ingredient_name": self.ingredient_name,
            "synonyms": list(self.synonyms),
            "source": self.source,
            "notes": self.notes,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "GrandfatherIngredient":
        return cls(
            id=str(d.get("id", "")),
            ingredient_name=d["ingredient_name"],
            synonyms=_str_list(d.get("synonyms")),
            source=d.get("source"),
            notes=d.get("notes"),
            is_active=d.get("is_active", True) is not False,
        )


DEFAULT_ALLERGEN_CITATION = "FALCPA Section 403(w), FASTER Act"


@dataclass(frozen=True)
class MajorAllergen:
    """One of the nine FDA major food allergens with its derivative names."""
    id: str
    allergen_name: str
    allergen_category: str  # milk, egg, fish, shellfish, tree_nuts, peanuts, wheat, soybeans, sesame
    common_name: Optional[str] = None
    derivatives: list[str] = field(default_factory=list)
    scientific_names: list[str] = field(default_factory=list)
    cross_reactive_allergens: list[str] = field(default_factory=list)
    regulation_citation: str = DEFAULT_ALLERGEN_CITATION
    notes: Optional[str] = None
    is_active: bool = True

    @property
    def canonical_name(self) -> str:
        return self.allergen_name

    @property
    def synonyms(self) -> list[str]:
        return self.derivatives

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "allergen_name": self.allergen_name,
            "allergen_category": self.allergen_category,
            "common_name": self.common_name,
            "derivatives": list(self.derivatives),
            "scientific_names": list(self.scientific_names),
            "cross_reactive_allergens": list(self.cross_reactive_allergens),
            "regulation_citation": self.regulation_citation,
            "notes": self.notes,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "MajorAllergen":
        return cls(
            id=str(d.get("id", "")),
            allergen_name=d["allergen_name"],
            allergen_category=d.get("allergen_category") or "",
            common_name=d.get("common_name"),
            derivatives=_str_list(d.get("derivatives")),
            scientific_names=_str_list(d.get("scientific_names")),
            cross_reactive_allergens=_str_list(d.get("cross_reactive_allergens")),
            regulation_citation=d.get("regulation_citation") or DEFAULT_ALLERGEN_CITATION,
            notes=d.get("notes"),
            is_active=d.get("is_active", True) is not False,
        )


@dataclass(frozen=True)
class RegulatoryDocument:
    id: str
    title: str
    content: str = ""
    description: str = ""
    document_type: str = "other"  # federal_law | state_regulation | guideline | standard | policy | other
    jurisdiction: str = ""
    source: str = ""
    effective_date: Optional[str] = None
    version: str = ""
    is_active: bool = True

    @property
    def canonical_name(self) -> str:
        return self.title

    @property
    def synonyms(self) -> list[str]:
        return []

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "description": self.description,
            "document_type": self.document_type,
            "jurisdiction": self.jurisdiction,
            "source": self.source,
            "effective_date": self.effective_date,
            "version": self.version,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RegulatoryDocument":
        return cls(
            id=str(d.get("id", "")),
            title=d["title"],
            content=d.get("content") or "",
            description=d.get("description") or "",
            document_type=d.get("document_type") or "other",
            jurisdiction=d.get("jurisdiction") or "",
            source=d.get("source") or "",
            effective_date=d.get("effective_date"),
            version=d.get("version") or "",
            is_active=d.get("is_active", True) is not False,
        )
