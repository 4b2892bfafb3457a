"""
NDI (New Dietary Ingredient) check for dietary supplements.

Per DSHEA 1994:
- ingredients marketed before October 15, 1994 are grandfathered (no notification required)
- later ingredients need an NDI notification 75 days before marketing
Lookup order: NDI notifications, then the grandfather list, both through the tiered matcher.
"""
import logging
from datetime import date
from typing import Optional

from labelcheck.checkers.base import DomainChecker
from labelcheck.matching.matcher import TieredMatcher, grandfather_matcher, ndi_matcher
from labelcheck.models.draft import AnalysisDraft
from labelcheck.models.reference import GrandfatherIngredient, NDINotification, ProductCategory
from labelcheck.models.reports import NDICheckResult, NDIReport
from labelcheck.models.verdict import ComplianceTableRow, Priority, Recommendation
from labelcheck.reference_data.cache import ReferenceCache

logger = logging.getLogger(__name__)

NDI_ELEMENT = "NDI Ingredient Compliance"
NDI_CITATION = "DSHEA Section 413 (New Dietary Ingredient Notification)"

# Common pre-1994 dietary ingredients, used only when the grandfather table is unavailable
FALLBACK_GRANDFATHER_NAMES: tuple[str, ...] = (
    # Vitamins
    "vitamin a", "retinol", "beta-carotene", "beta carotene",
    "vitamin b1", "thiamin", "thiamine", "thiamine mononitrate", "thiamine hydrochloride",
    "vitamin b2", "riboflavin",
    "vitamin b3", "niacin", "nicotinic acid", "nicotinamide", "niacinamide",
    "vitamin b5", "pantothenic acid", "calcium pantothenate",
    "vitamin b6", "pyridoxine", "pyridoxine hydrochloride", "pyridoxal",
    "vitamin b7", "biotin",
    "vitamin b9", "folic acid", "folate", "methylfolate",
    "vitamin b12", "cobalamin", "cyanocobalamin", "methylcobalamin", "adenosylcobalamin",
    "vitamin c", "ascorbic acid", "sodium ascorbate", "calcium ascorbate",
    "vitamin d", "vitamin d2", "vitamin d3", "ergocalciferol", "cholecalciferol",
    "vitamin e", "tocopherol", "alpha-tocopherol",
    "vitamin k", "vitamin k1", "vitamin k2", "phylloquinone", "menaquinone",
    # Minerals
    "calcium", "calcium carbonate", "calcium citrate", "calcium phosphate",
    "iron", "ferrous sulfate", "ferrous fumarate", "iron chelate",
    "magnesium", "magnesium oxide", "magnesium citrate", "magnesium glycinate",
    "zinc", "zinc oxide", "zinc gluconate", "zinc citrate", "zinc picolinate",
    "iodine", "potassium iodide", "sodium iodide", "kelp",
    "selenium", "sodium selenite", "sodium selenate", "selenomethionine",
    "copper", "copper gluconate", "copper sulfate",
    "manganese", "manganese gluconate", "manganese sulfate",
    "chromium", "chromium picolinate", "chromium polynicotinate",
    "molybdenum", "sodium molybdate",
    "potassium", "potassium chloride", "potassium citrate",
    "phosphorus", "phosphate",
    "sodium", "sodium chloride", "salt",
    # Herbs and botanicals
    "ginseng", "panax ginseng",
    "ginkgo", "ginkgo biloba",
    "echinacea",
    "garlic", "allium sativum",
    "ginger", "zingiber officinale",
    "green tea", "camellia sinensis", "green tea extract", "green tea leaf extract",
    "chamomile",
    "valerian", "valerian root",
    "st. john's wort", "st john's wort", "st johns wort",
    "saw palmetto",
    "milk thistle", "silymarin",
    "black cohosh",
    # Amino acids (stereoisomer prefixes are stripped by normalization)
    "lysine", "arginine", "glutamine", "carnitine", "tryptophan", "tyrosine",
    # Other
    "protein", "whey protein", "soy protein", "casein",
    "fiber", "psyllium", "inulin",
    "lecithin", "soy lecithin",
    "omega-3", "fish oil", "dha", "epa",
    "coenzyme q10", "coq10", "ubiquinone",
    "glucosamine", "glucosamine sulfate", "glucosamine hydrochloride",
    "chondroitin", "chondroitin sulfate",
    "msm", "methylsulfonylmethane",
    # Food-based
    "coffee", "caffeine", "arabica", "robusta",
    "tea", "black tea", "oolong tea",
    "cocoa", "cacao",
    "spirulina", "chlorella",
)

FALLBACK_GRANDFATHER_LIST: tuple[GrandfatherIngredient, ...] = tuple(
    GrandfatherIngredient(id=f"fallback-{i}", ingredient_name=name, source="built-in pre-1994 list")
    for i, name in enumerate(FALLBACK_GRANDFATHER_NAMES)
)


def _format_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10]).strftime("%m/%d/%Y")
    except ValueError:
        return str(value)


def format_ndi_info(notification: NDINotification) -> str:
    """One-line display form, e.g. 'NDI Notification #1234 (RPT-9) - Firm: Acme - Submitted: 01/15/2020'."""
    submitted = _format_date(notification.submission_date)
    responded = _format_date(notification.fda_response_date)
    parts = [
        f"NDI Notification #{notification.notification_number}",
        f"({notification.report_number})" if notification.report_number else "",
        f"- Firm: {notification.firm}" if notification.firm else "",
        f"- Submitted: {submitted}" if submitted else "",
        f"- FDA Response: {responded}" if responded else "",
    ]
    return " ".join(p for p in parts if p)


def ndi_recommendation(result: NDICheckResult) -> Recommendation:
    return Recommendation(
        priority=Priority.MEDIUM,
        recommendation=f'Verify NDI compliance for ingredient "{result.ingredient}". {result.compliance_note}',
        regulation=NDI_CITATION,
    )


class NDIChecker(DomainChecker[NDIReport]):
    name = "ndi"
    categories = frozenset({ProductCategory.DIETARY_SUPPLEMENT})

    def __init__(
        self,
        ndi_cache: ReferenceCache[NDINotification],
        grandfather_cache: ReferenceCache[GrandfatherIngredient],
        matcher: Optional[TieredMatcher] = None,
        grandfather: Optional[TieredMatcher] = None,
    ):
        self._ndi_cache = ndi_cache
        self._grandfather_cache = grandfather_cache
        self._matcher = matcher or ndi_matcher()
        self._grandfather_matcher = grandfather or grandfather_matcher()

    def _empty_report(self) -> NDIReport:
        return NDIReport()

    async def _grandfather_entries(self) -> list[GrandfatherIngredient]:
        entries = await self._grandfather_cache.get()
        if entries:
            return entries
        logger.warning(
            "NDI_CHECK grandfather list unavailable; using built-in fallback count=%d",
            len(FALLBACK_GRANDFATHER_LIST),
        )
        return list(FALLBACK_GRANDFATHER_LIST)

    async def _check(self, ingredients: list[str], draft: Optional[AnalysisDraft]) -> NDIReport:
        notifications = await self._ndi_cache.get()
        grandfathered: Optional[list[GrandfatherIngredient]] = None

        report = NDIReport()
        for ingredient in ingredients:
            ndi = self._matcher.match(ingredient, notifications)
            if ndi.matched:
                n = ndi.matched_entry
                result = NDICheckResult(
                    ingredient=ingredient,
                    ndi_match=ndi,
                    compliance_note=(
                        f"NDI notification #{n.notification_number} on file with FDA "
                        f"(submitted {n.submission_date or 'unknown date'})"
                    ),
                )
            else:
                if grandfathered is None:
                    grandfathered = await self._grandfather_entries()
                old = self._grandfather_matcher.match(ingredient, grandfathered, normalized=ndi.normalized)
                if old.matched:
                    note = (
                        "Common dietary ingredient marketed before October 15, 1994. "
                        "No NDI notification required (grandfathered under DSHEA)."
                    )
                else:
                    note = (
                        "No NDI notification found and ingredient not recognized as a pre-1994 "
                        "dietary ingredient. If this ingredient was NOT marketed before October 15, "
                        "1994, an NDI notification is required 75 days before marketing per DSHEA. "
                        "Verify the ingredient was on the market pre-1994 or has a valid NDI notification."
                    )
                result = NDICheckResult(
                    ingredient=ingredient,
                    ndi_match=ndi,
                    grandfather_match=old,
                    compliance_note=note,
                )
            report.results.append(result)
            if result.requires_ndi:
                report.recommendations.append(ndi_recommendation(result))

        logger.info(
            "NDI_CHECK complete total=%d with_ndi=%d without_ndi=%d requires_notification=%d",
            report.total_checked, report.with_ndi, report.without_ndi, report.requires_notification,
        )

        pending = [r.ingredient for r in report.results if r.requires_ndi]
        if pending:
            report.table_row = ComplianceTableRow(
                element=NDI_ELEMENT,
                status="Requires Verification",
                rationale=(
                    f"{len(pending)} ingredient(s) without NDI notification or pre-1994 marketing "
                    f"record: {', '.join(pending)}"
                ),
                regulation=NDI_CITATION,
            )
        else:
            report.table_row = ComplianceTableRow(
                element=NDI_ELEMENT,
                status="Compliant",
                rationale=(
                    f"All {report.total_checked} ingredients have an NDI notification on file "
                    "or are grandfathered (marketed before October 15, 1994)"
                ),
                regulation=NDI_CITATION,
            )
        return report
