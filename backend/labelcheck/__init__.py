"""
LabelCheck ingredient compliance verification: GRAS, NDI and major-allergen checks
over an AI draft analysis, reconciled into one verdict.
"""
from .engine import ComplianceVerificationEngine

__all__ = ["ComplianceVerificationEngine"]
