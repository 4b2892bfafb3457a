"""
Tiered ingredient matching: exact name, then synonym, then a domain-specific fuzzy strategy.
"""
from .base import Candidate, MatchResult, MatchType, ConfidenceLevel
from .matcher import (
    TieredMatcher,
    gras_matcher,
    ndi_matcher,
    grandfather_matcher,
    allergen_matcher,
)

__all__ = [
    "Candidate",
    "MatchResult",
    "MatchType",
    "ConfidenceLevel",
    "TieredMatcher",
    "gras_matcher",
    "ndi_matcher",
    "grandfather_matcher",
    "allergen_matcher",
]
