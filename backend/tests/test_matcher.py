"""
Unit tests for the tiered matcher and its strategies.
Run from backend: python -m pytest tests/test_matcher.py -v
"""
import pytest


def _gras(*names, synonyms=None):
    from labelcheck.models.reference import GRASSubstance
    synonyms = synonyms or {}
    return [
        GRASSubstance(id=f"g{i}", ingredient_name=n, synonyms=synonyms.get(n, []))
        for i, n in enumerate(names)
    ]


def test_exact_match_is_high_confidence():
    from labelcheck.matching.matcher import gras_matcher
    res = gras_matcher().match("Citric Acid", _gras("Ascorbic acid", "Citric acid"))
    assert res.matched
    assert res.matched_entry.ingredient_name == "Citric acid"
    assert (res.match_type, res.confidence) == ("exact", "high")


def test_exact_beats_earlier_synonym():
    """Tiers run in order over all entries: a canonical hit later in the list wins over a synonym hit."""
    from labelcheck.matching.matcher import gras_matcher
    entries = _gras("Sucrose", "Sugar", synonyms={"Sucrose": ["sugar"]})
    res = gras_matcher().match("sugar", entries)
    assert res.matched_entry.ingredient_name == "Sugar"
    assert res.match_type == "exact"


def test_exact_beats_earlier_fuzzy_candidate():
    from labelcheck.matching.matcher import gras_matcher
    from labelcheck.matching.strategies import GRASFuzzyStrategy
    entries = _gras("Acid whey", "Citric acid")
    # on its own the fuzzy tier would pick the shorter, earlier "Acid whey"
    assert GRASFuzzyStrategy().find("citric acid", entries).entry.ingredient_name == "Acid whey"
    res = gras_matcher().match("Citric Acid", entries)
    assert res.matched_entry.ingredient_name == "Citric acid"
    assert (res.match_type, res.confidence) == ("exact", "high")


def test_synonym_match():
    from labelcheck.matching.matcher import gras_matcher
    entries = _gras("Ascorbic acid", synonyms={"Ascorbic acid": ["vitamin c"]})
    res = gras_matcher().match("Vitamin C (as ascorbic acid)", entries)
    assert res.matched_entry.ingredient_name == "Ascorbic acid"
    assert (res.match_type, res.confidence) == ("synonym", "high")


def test_gras_fuzzy_tries_last_word_first():
    from labelcheck.matching.matcher import gras_matcher
    entries = _gras("Calcium carbonate", "Calcium pantothenate")
    res = gras_matcher().match("Calcium Pantothenate Granules", entries)
    assert res.matched_entry.ingredient_name == "Calcium pantothenate"
    assert (res.match_type, res.confidence) == ("fuzzy", "medium")


def test_gras_fuzzy_prefers_whole_word_over_substring():
    from labelcheck.matching.strategies import GRASFuzzyStrategy
    entries = _gras("Maltodextrin", "Dextrin from corn starch")
    cand = GRASFuzzyStrategy().find("tapioca dextrin", entries)
    assert cand.entry.ingredient_name == "Dextrin from corn starch"


def test_gras_fuzzy_prefers_shorter_name_then_arrival_order():
    from labelcheck.matching.strategies import GRASFuzzyStrategy
    strategy = GRASFuzzyStrategy()
    cand = strategy.find("fractionated lecithin", _gras("Soy lecithin", "Lecithin"))
    assert cand.entry.ingredient_name == "Lecithin"
    cand = strategy.find("buffered sodium", _gras("Sodium citrate", "Sodium sulfite"))
    assert cand.entry.ingredient_name == "Sodium citrate"


def test_gras_fuzzy_ignores_generic_terms():
    from labelcheck.matching.matcher import gras_matcher
    res = gras_matcher().match("Green Tea Extract", _gras("Rosemary extract"))
    assert not res.matched
    assert (res.match_type, res.confidence) == ("none", "none")


def test_blank_ingredient_never_matches():
    from labelcheck.matching.matcher import gras_matcher
    res = gras_matcher().match("   ", _gras("Salt"))
    assert not res.matched
    assert res.normalized == ""


def test_containment_both_directions():
    from labelcheck.matching.strategies import ContainmentStrategy
    from labelcheck.models.reference import GrandfatherIngredient
    entries = [GrandfatherIngredient(id="o1", ingredient_name="Green tea extract")]
    strategy = ContainmentStrategy()
    assert strategy.find("decaffeinated green tea extract", entries) is not None
    assert strategy.find("green tea", entries) is not None
    assert strategy.find("greentea", entries) is None


def test_derivative_fuzzy_skips_short_derivatives():
    from labelcheck.matching.matcher import allergen_matcher
    from labelcheck.models.reference import MajorAllergen
    eggs = MajorAllergen(id="a4", allergen_name="Eggs", allergen_category="egg", derivatives=["egg", "albumin"])
    assert not allergen_matcher().match("eggplant puree", [eggs]).matched
    assert not allergen_matcher().match("egg noodles", [eggs]).matched
    res = allergen_matcher().match("dried albumin powder", [eggs])
    assert (res.match_type, res.confidence) == ("fuzzy", "medium")


@pytest.mark.parametrize("factory,tiers", [
    ("gras_matcher", ["exact", "synonym", "gras_fuzzy"]),
    ("ndi_matcher", ["exact", "synonym", "containment"]),
    ("grandfather_matcher", ["exact", "synonym", "containment"]),
    ("allergen_matcher", ["exact", "synonym", "derivative_fuzzy"]),
])
def test_matcher_tier_order(factory, tiers):
    from labelcheck.matching import matcher
    assert getattr(matcher, factory)().tiers == tiers
