"""
Deterministic normalization only. No I/O, no lookup.
Produces the key every reference matcher compares against.
"""
import re
import logging

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_PARENTHETICAL = re.compile(r"\s*\([^)]*\)")
_TRAILING_CLAUSE = re.compile(r"[,;].*$")
_STEREOISOMER_PREFIX = re.compile(r"\b(?:dl|d|l)-", re.IGNORECASE)
_TRAILING_PERCENTAGES = re.compile(r"(?:\s+\d+(?:\.\d+)?\s*%)+$")
_SOURCE_INDICATORS = re.compile(r"\b(?:derived from|from|contains)\b")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize_ingredient_name(raw: str) -> str:
    """
    Normalize a raw label ingredient for reference matching. Order matters:
    - lowercase, trim, collapse whitespace
    - drop parenthetical notes: "vitamin c (ascorbic acid)" -> "vitamin c"
    - drop everything from the first comma/semicolon
    - drop stereoisomer prefixes: "calcium d-pantothenate" -> "calcium pantothenate"
    - drop trailing percentages: "caffeine 1%" -> "caffeine"
    Total and idempotent.
    """
    if not raw or not isinstance(raw, str):
        return ""
    t = _collapse(raw.lower())
    t = _PARENTHETICAL.sub("", t)
    t = _TRAILING_CLAUSE.sub("", t)
    t = _STEREOISOMER_PREFIX.sub("", t).strip()
    t = _TRAILING_PERCENTAGES.sub("", t)
    return _collapse(t)


def normalize_for_allergens(raw: str) -> str:
    """Allergen variant: also removes source indicators ("whey (from milk)", "contains soy")."""
    t = normalize_ingredient_name(raw)
    if not t:
        return ""
    return _collapse(_SOURCE_INDICATORS.sub("", t))


def significant_tokens(normalized: str, min_length: int = 4, exclude: frozenset = frozenset()) -> list[str]:
    """Words of at least min_length chars, in label order, minus generic terms."""
    return [w for w in normalized.split(" ") if len(w) >= min_length and w not in exclude]
