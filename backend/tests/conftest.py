"""
Shared fixtures: a controllable clock and an in-memory paginated reference source.
"""
import pytest

from labelcheck.errors import DataSourceError


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemorySource:
    """fetch_page(table, offset, limit) over lists of row dicts; records every call."""

    def __init__(self, tables=None):
        self.tables = {name: list(rows) for name, rows in (tables or {}).items()}
        self.calls = []
        self.failing = set()

    async def fetch_page(self, table, offset, limit):
        self.calls.append((table, offset, limit))
        if table in self.failing:
            raise DataSourceError(table, "upstream unavailable")
        return [dict(r) for r in self.tables.get(table, [])[offset:offset + limit]]

    def pager(self, table):
        async def fetch(offset, limit):
            return await self.fetch_page(table, offset, limit)
        return fetch

    def call_count(self, table) -> int:
        return sum(1 for t, _, _ in self.calls if t == table)


GRAS_ROWS = [
    {"id": "g1", "ingredient_name": "Ascorbic acid", "gras_status": "affirmed", "synonyms": ["vitamin c"]},
    {"id": "g2", "ingredient_name": "Calcium pantothenate", "gras_status": "affirmed"},
    {"id": "g3", "ingredient_name": "Sucrose", "gras_status": "affirmed", "synonyms": ["sugar", "cane sugar"]},
    {"id": "g4", "ingredient_name": "Citric acid", "gras_status": "affirmed"},
    {"id": "g5", "ingredient_name": "Salt", "gras_status": "affirmed", "synonyms": ["sodium chloride"]},
    {"id": "g6", "ingredient_name": "Withdrawn additive", "gras_status": "pending", "is_active": False},
]

NDI_ROWS = [
    {
        "id": "n1",
        "notification_number": 1001,
        "report_number": "RPT-1001",
        "ingredient_name": "Pterostilbene",
        "firm": "Acme Labs",
        "submission_date": "2020-01-15",
        "fda_response_date": "2020-04-01",
    },
]

GRANDFATHER_ROWS = [
    {"id": "o1", "ingredient_name": "Magnesium citrate", "synonyms": [], "source": "CRN Grandfather List"},
    {"id": "o2", "ingredient_name": "Cyanocobalamin", "synonyms": ["vitamin b12"], "source": "CRN Grandfather List"},
]

ALLERGEN_ROWS = [
    {
        "id": "a1",
        "allergen_name": "Milk",
        "allergen_category": "milk",
        "derivatives": ["whey", "casein", "butter", "lactose", "cream"],
    },
    {
        "id": "a2",
        "allergen_name": "Soybeans",
        "allergen_category": "soybeans",
        "derivatives": ["soy", "soy lecithin", "soybean oil", "tofu"],
    },
    {
        "id": "a3",
        "allergen_name": "Wheat",
        "allergen_category": "wheat",
        "derivatives": ["flour", "wheat flour", "semolina"],
    },
    {
        "id": "a4",
        "allergen_name": "Eggs",
        "allergen_category": "egg",
        "derivatives": ["egg", "albumin", "egg white"],
    },
]

DOCUMENT_ROWS = [
    {"id": "d1", "title": "FALCPA", "document_type": "federal_law", "effective_date": "2006-01-01"},
    {"id": "d2", "title": "FASTER Act", "document_type": "federal_law", "effective_date": "2023-01-01"},
    {"id": "d3", "title": "Labeling guide", "document_type": "guideline"},
    {"id": "d4", "title": "Superseded rule", "document_type": "federal_law", "is_active": False},
]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return InMemorySource({
        "gras_ingredients": GRAS_ROWS,
        "ndi_ingredients": NDI_ROWS,
        "old_dietary_ingredients": GRANDFATHER_ROWS,
        "major_allergens": ALLERGEN_ROWS,
        "regulatory_documents": DOCUMENT_ROWS,
    })


@pytest.fixture
def engine(source, clock):
    from labelcheck.engine import ComplianceVerificationEngine
    return ComplianceVerificationEngine(source.fetch_page, clock=clock)
