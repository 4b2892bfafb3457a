"""
Unit tests for the major allergen checker.
Run from backend: python -m pytest tests/test_allergen_checker.py -v
"""
import asyncio

import pytest


def _names(report):
    return [a.allergen_name for a in report.allergens_detected]


def test_exact_derivative_and_fuzzy_matches(engine):
    report = asyncio.run(engine.allergen.check([
        "Soy Lecithin",
        "Whey Protein Concentrate",
        "Enriched Wheat Flour",
        "Water",
    ]))
    assert report.total_ingredients == 4
    assert _names(report) == ["Soybeans", "Milk", "Wheat"]
    by_ingredient = {i.ingredient: i.allergens[0] for i in report.ingredients_with_allergens}
    assert by_ingredient["Soy Lecithin"].match_type == "synonym"
    assert by_ingredient["Soy Lecithin"].confidence == "high"
    assert by_ingredient["Whey Protein Concentrate"].match_type == "fuzzy"
    assert by_ingredient["Enriched Wheat Flour"].confidence == "medium"


def test_source_indicator_is_stripped(engine):
    report = asyncio.run(engine.allergen.check(["Whey (from milk)"]))
    match = report.ingredients_with_allergens[0].allergens[0]
    assert match.matched_entry.allergen_name == "Milk"
    assert match.match_type == "synonym"


def _tree_nuts():
    from labelcheck.models.reference import MajorAllergen
    return MajorAllergen(
        id="a6", allergen_name="Tree Nuts", allergen_category="tree_nuts", derivatives=["jelly", "bee jelly"],
    )


@pytest.mark.parametrize("ingredient", ["Royal Jelly", "Bee Jelly"])
def test_false_positives_never_match(ingredient):
    """'royal jelly' contains the derivative 'jelly'; only the exception list stops the match."""
    from labelcheck.checkers.allergen import AllergenChecker
    checker = AllergenChecker(cache=None)
    assert checker.match_ingredient(ingredient, [_tree_nuts()]) == []


@pytest.mark.parametrize("ingredient", ["Royal Jelly", "Bee Jelly"])
def test_same_ingredients_match_without_exception_list(ingredient):
    from labelcheck.checkers.allergen import AllergenChecker
    checker = AllergenChecker(cache=None, false_positives=frozenset())
    matches = checker.match_ingredient(ingredient, [_tree_nuts()])
    assert [m.matched_entry.allergen_name for m in matches] == ["Tree Nuts"]


def test_false_positive_is_exact_normalized_match_only():
    from labelcheck.checkers.allergen import AllergenChecker
    matches = AllergenChecker(cache=None).match_ingredient("Royal Jelly Powder", [_tree_nuts()])
    assert [(m.match_type, m.confidence) for m in matches] == [("fuzzy", "medium")]


def test_one_ingredient_can_carry_several_allergens(engine):
    report = asyncio.run(engine.allergen.check(["Whey and Soybean Oil Blend"]))
    item = report.ingredients_with_allergens[0]
    assert [m.matched_entry.allergen_name for m in item.allergens] == ["Milk", "Soybeans"]


def test_each_allergen_uses_its_own_tiers():
    """A direct hit on one allergen does not stop another allergen from matching by a lower tier."""
    from labelcheck.checkers.allergen import AllergenChecker
    from labelcheck.models.reference import MajorAllergen
    allergens = [
        MajorAllergen(id="a1", allergen_name="Milk", allergen_category="milk", derivatives=["butter"]),
        MajorAllergen(id="a5", allergen_name="Peanuts", allergen_category="peanuts", derivatives=["peanut butter"]),
    ]
    checker = AllergenChecker(cache=None)
    matches = checker.match_ingredient("Peanut Butter", allergens)
    assert [(m.matched_entry.allergen_name, m.match_type) for m in matches] == [
        ("Milk", "fuzzy"),
        ("Peanuts", "synonym"),
    ]
    matches = checker.match_ingredient("Salted Butter Blend", allergens)
    assert [m.matched_entry.allergen_name for m in matches] == ["Milk"]
    assert matches[0].match_type == "fuzzy"


def test_same_allergen_reported_once_per_ingredient(engine):
    report = asyncio.run(engine.allergen.check(["whey butter cream", "casein"]))
    assert len(report.ingredients_with_allergens[0].allergens) == 1
    assert _names(report) == ["Milk"]
    assert report.to_dict()["summary"]["unique_allergens_detected"] == 1


def test_no_allergens_row_is_compliant(engine):
    report = asyncio.run(engine.allergen.check(["Water", "Salt"]))
    assert report.recommendations == []
    assert report.table_row.status == "Compliant"


def test_detected_allergens_require_declaration(engine):
    from labelcheck.models.draft import AnalysisDraft
    draft = AnalysisDraft.model_validate({"allergen_labeling": {"status": "compliant"}})
    report = asyncio.run(engine.allergen.check(["Whey"], draft))
    assert report.recommendations == []
    assert report.table_row.status == "Declaration Required"


@pytest.mark.parametrize("status", ["non_compliant", "potentially_non_compliant"])
def test_missing_declaration_is_critical(engine, status):
    from labelcheck.models.draft import AnalysisDraft
    from labelcheck.models.verdict import Priority
    draft = AnalysisDraft.model_validate({"allergen_labeling": {"status": status}})
    report = asyncio.run(engine.allergen.check(["Whey", "Soy Lecithin"], draft))
    assert len(report.recommendations) == 1
    rec = report.recommendations[0]
    assert rec.priority == Priority.CRITICAL
    assert "Milk, Soybeans" in rec.recommendation
    assert rec.regulation == "FALCPA Section 403(w), FASTER Act"
    assert report.table_row.status == "Non-Compliant"


def test_bad_draft_status_without_allergens_is_not_critical(engine):
    from labelcheck.models.draft import AnalysisDraft
    draft = AnalysisDraft.model_validate({"allergen_labeling": {"status": "non_compliant"}})
    report = asyncio.run(engine.allergen.check(["Water"], draft))
    assert report.recommendations == []


def test_applies_to_every_category():
    from labelcheck.checkers.allergen import AllergenChecker
    from labelcheck.models.reference import ProductCategory
    checker = AllergenChecker(cache=None)
    assert all(checker.applies_to(c) for c in ProductCategory)
    assert checker.applies_to(None)


def test_format_allergen_results(engine):
    from labelcheck.checkers.allergen import format_allergen_results
    allergens = asyncio.run(engine.allergen_cache.get())
    matches = engine.allergen.match_ingredient("Whey Protein", allergens)
    assert format_allergen_results(matches) == "? Milk (fuzzy match)"
    assert format_allergen_results(engine.allergen.match_ingredient("casein", allergens)) == "✓ Milk (derivative)"
    assert format_allergen_results([]) == "No allergens detected"
