"""
Types shared by the matcher strategies and the domain checkers.
"""
from dataclasses import dataclass
from typing import Any, Generic, Literal, Optional, TypeVar

MatchType = Literal["exact", "synonym", "fuzzy", "none"]
ConfidenceLevel = Literal["high", "medium", "none"]

T = TypeVar("T")


@dataclass(frozen=True)
class Candidate(Generic[T]):
    """A strategy hit: the entry plus how it was found."""
    entry: T
    match_type: MatchType
    confidence: ConfidenceLevel


@dataclass(frozen=True)
class MatchResult(Generic[T]):
    """At most one per ingredient per domain (per allergen in the allergen domain)."""
    ingredient: str  # raw label text
    normalized: str
    matched_entry: Optional[T] = None
    match_type: MatchType = "none"
    confidence: ConfidenceLevel = "none"

    @property
    def matched(self) -> bool:
        return self.matched_entry is not None

    def to_dict(self) -> dict[str, Any]:
        entry = self.matched_entry
        return {
            "ingredient": self.ingredient,
            "normalized": self.normalized,
            "matched_entry": entry.to_dict() if entry is not None and hasattr(entry, "to_dict") else None,
            "match_type": self.match_type,
            "confidence": self.confidence,
        }
