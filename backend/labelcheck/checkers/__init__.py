from .base import DomainChecker
from .gras import GRASChecker
from .ndi import NDIChecker, format_ndi_info
from .allergen import AllergenChecker, format_allergen_results

__all__ = [
    "DomainChecker",
    "GRASChecker",
    "NDIChecker",
    "format_ndi_info",
    "AllergenChecker",
    "format_allergen_results",
]
