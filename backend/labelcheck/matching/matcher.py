"""
Tiered matcher: ordered strategies, first non-empty result wins and later tiers never run.
"""
import logging
from typing import Generic, Optional, Sequence, TypeVar

from labelcheck.matching.base import MatchResult
from labelcheck.matching.strategies import (
    ContainmentStrategy,
    DerivativeFuzzyStrategy,
    ExactNameStrategy,
    GRASFuzzyStrategy,
    MatchStrategy,
    SynonymStrategy,
)
from labelcheck.normalization.normalizer import normalize_ingredient_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TieredMatcher(Generic[T]):
    def __init__(self, domain: str, strategies: Sequence[MatchStrategy]):
        self.domain = domain
        self._strategies = tuple(strategies)

    @property
    def tiers(self) -> list[str]:
        return [s.name for s in self._strategies]

    def match(
        self,
        ingredient: str,
        entries: Sequence[T],
        normalized: Optional[str] = None,
    ) -> MatchResult[T]:
        """
        Match one label ingredient against reference entries.
        normalized defaults to normalize_ingredient_name(ingredient).
        """
        key = normalize_ingredient_name(ingredient) if normalized is None else normalized
        if key:
            for strategy in self._strategies:
                candidate = strategy.find(key, entries)
                if candidate is not None:
                    logger.debug(
                        "MATCH domain=%s tier=%s ingredient=%s entry=%s",
                        self.domain, strategy.name, key, candidate.entry.canonical_name,
                    )
                    return MatchResult(
                        ingredient=ingredient,
                        normalized=key,
                        matched_entry=candidate.entry,
                        match_type=candidate.match_type,
                        confidence=candidate.confidence,
                    )
        return MatchResult(ingredient=ingredient, normalized=key)


def gras_matcher() -> TieredMatcher:
    return TieredMatcher("gras", [ExactNameStrategy(), SynonymStrategy(), GRASFuzzyStrategy()])


def ndi_matcher() -> TieredMatcher:
    return TieredMatcher("ndi", [ExactNameStrategy(), SynonymStrategy(), ContainmentStrategy()])


def grandfather_matcher() -> TieredMatcher:
    return TieredMatcher("grandfather", [ExactNameStrategy(), SynonymStrategy(), ContainmentStrategy()])


def allergen_matcher() -> TieredMatcher:
    return TieredMatcher("allergen", [ExactNameStrategy(), SynonymStrategy(), DerivativeFuzzyStrategy()])
