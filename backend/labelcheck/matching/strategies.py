"""
Matching tiers. Each strategy scans the reference entries and returns one Candidate or None.
Entries are scanned in arrival order; the first qualifying entry wins unless a tier ranks candidates.
"""
import re
from functools import lru_cache
from typing import Optional, Protocol, Sequence, TypeVar

from labelcheck.matching.base import Candidate
from labelcheck.models.reference import ReferenceEntry
from labelcheck.normalization.normalizer import significant_tokens

T = TypeVar("T", bound=ReferenceEntry)

# Words that match too broadly to identify a GRAS substance on their own
GENERIC_TERMS = frozenset({
    "extract",
    "powder",
    "concentrate",
    "isolate",
    "blend",
    "complex",
    "root",
    "seed",
    "leaf",
    "fruit",
    "berry",
})

# Shorter derivatives/names ("egg", "soy", "tea") are never used for containment
MIN_FUZZY_LENGTH = 4


@lru_cache(maxsize=4096)
def _word_pattern(term: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(term) + r"\b")


def contains_word(text: str, term: str) -> bool:
    return bool(_word_pattern(term).search(text))


def _key(value: str) -> str:
    return (value or "").strip().lower()


class MatchStrategy(Protocol):
    name: str

    def find(self, normalized: str, entries: Sequence[T]) -> Optional[Candidate[T]]: ...


class ExactNameStrategy:
    """Tier 1: case-insensitive equality with the canonical name."""
    name = "exact"

    def find(self, normalized, entries):
        for entry in entries:
            if _key(entry.canonical_name) == normalized:
                return Candidate(entry, "exact", "high")
        return None


class SynonymStrategy:
    """Tier 2: case-insensitive equality with any synonym or derivative."""
    name = "synonym"

    def find(self, normalized, entries):
        for entry in entries:
            if any(_key(s) == normalized for s in entry.synonyms):
                return Candidate(entry, "synonym", "high")
        return None


class GRASFuzzyStrategy:
    """
    Tier 3 (GRAS): significant words, last word first ("calcium pantothenate" tries
    "pantothenate" before "calcium"), substring-searched in canonical names.
    Among candidates for a word: whole-word hit beats substring hit, then shorter name wins,
    then arrival order.
    """
    name = "gras_fuzzy"

    def __init__(self, generic_terms: frozenset = GENERIC_TERMS):
        self._generic_terms = generic_terms

    def find(self, normalized, entries):
        terms = significant_tokens(normalized, min_length=MIN_FUZZY_LENGTH, exclude=self._generic_terms)
        for term in reversed(terms):
            best = None
            best_has_word = False
            for entry in entries:
                name = _key(entry.canonical_name)
                if term not in name:
                    continue
                has_word = term in name.split()
                if best is None:
                    best, best_has_word = entry, has_word
                elif has_word and not best_has_word:
                    best, best_has_word = entry, has_word
                elif has_word == best_has_word and len(entry.canonical_name) < len(best.canonical_name):
                    best, best_has_word = entry, has_word
            if best is not None:
                return Candidate(best, "fuzzy", "medium")
        return None


class DerivativeFuzzyStrategy:
    """Tier 3 (allergens): a derivative of 4+ chars appears as whole word(s) in the ingredient."""
    name = "derivative_fuzzy"

    def find(self, normalized, entries):
        for entry in entries:
            for derivative in entry.synonyms:
                d = _key(derivative)
                if len(d) < MIN_FUZZY_LENGTH:
                    continue
                if contains_word(normalized, d):
                    return Candidate(entry, "fuzzy", "medium")
        return None


class ContainmentStrategy:
    """
    Tier 3 (NDI / grandfather list): whole-word containment in either direction between the
    ingredient and a name or synonym ("calcium pantothenate 1%" vs "calcium pantothenate").
    """
    name = "containment"

    def find(self, normalized, entries):
        if len(normalized) < MIN_FUZZY_LENGTH:
            return None
        for entry in entries:
            for name in [entry.canonical_name, *entry.synonyms]:
                n = _key(name)
                if len(n) < MIN_FUZZY_LENGTH:
                    continue
                if contains_word(normalized, n) or contains_word(n, normalized):
                    return Candidate(entry, "fuzzy", "medium")
        return None
