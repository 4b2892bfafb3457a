"""
Reconcile the overall verdict with the priorities of the final recommendation list.
"""
import logging
from collections import Counter
from typing import Iterable

from labelcheck.models.verdict import ComplianceStatus, Priority, Recommendation

logger = logging.getLogger(__name__)

_OPTIMISTIC = frozenset({ComplianceStatus.COMPLIANT, ComplianceStatus.LIKELY_COMPLIANT})
_PESSIMISTIC = frozenset({ComplianceStatus.NON_COMPLIANT, ComplianceStatus.POTENTIALLY_NON_COMPLIANT})


def enforce_status_consistency(
    recommendations: Iterable[Recommendation],
    current: ComplianceStatus,
) -> ComplianceStatus:
    """
    1. any critical/high            -> non_compliant
    2. else any medium, and current is compliant/likely_compliant -> potentially_non_compliant
    3. else only low, and current is non_compliant/potentially_non_compliant -> likely_compliant
    4. otherwise unchanged (including an empty list)
    """
    counts = Counter(r.priority for r in recommendations)
    blocking = counts[Priority.CRITICAL] + counts[Priority.HIGH]
    medium = counts[Priority.MEDIUM]
    low = counts[Priority.LOW]

    if blocking:
        if current != ComplianceStatus.NON_COMPLIANT:
            logger.info(
                "STATUS_ENFORCER non_compliant critical=%d high=%d (was %s)",
                counts[Priority.CRITICAL], counts[Priority.HIGH], current.value,
            )
        return ComplianceStatus.NON_COMPLIANT
    if medium:
        if current in _OPTIMISTIC:
            logger.info("STATUS_ENFORCER potentially_non_compliant medium=%d (was %s)", medium, current.value)
            return ComplianceStatus.POTENTIALLY_NON_COMPLIANT
        return current
    if low and current in _PESSIMISTIC:
        logger.info("STATUS_ENFORCER likely_compliant low=%d (was %s)", low, current.value)
        return ComplianceStatus.LIKELY_COMPLIANT
    return current
