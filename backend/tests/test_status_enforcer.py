"""
Unit tests for verdict reconciliation against recommendation priorities.
Run from backend: python -m pytest tests/test_status_enforcer.py -v
"""
import pytest

from labelcheck.models.verdict import ComplianceStatus as S, Priority as P


def _recs(*priorities):
    from labelcheck.models.verdict import Recommendation
    return [Recommendation(p, f"{p.value} item", "21 CFR 101") for p in priorities]


@pytest.mark.parametrize("priorities,current,expected", [
    # critical / high always force non_compliant
    ((P.CRITICAL,), S.COMPLIANT, S.NON_COMPLIANT),
    ((P.HIGH, P.LOW), S.LIKELY_COMPLIANT, S.NON_COMPLIANT),
    ((P.HIGH,), S.POTENTIALLY_NON_COMPLIANT, S.NON_COMPLIANT),
    ((P.CRITICAL, P.MEDIUM), S.NON_COMPLIANT, S.NON_COMPLIANT),
    # medium downgrades optimistic statuses only
    ((P.MEDIUM, P.LOW), S.COMPLIANT, S.POTENTIALLY_NON_COMPLIANT),
    ((P.MEDIUM,), S.LIKELY_COMPLIANT, S.POTENTIALLY_NON_COMPLIANT),
    ((P.MEDIUM,), S.NON_COMPLIANT, S.NON_COMPLIANT),
    ((P.MEDIUM,), S.POTENTIALLY_NON_COMPLIANT, S.POTENTIALLY_NON_COMPLIANT),
    # only low upgrades pessimistic statuses
    ((P.LOW,), S.NON_COMPLIANT, S.LIKELY_COMPLIANT),
    ((P.LOW, P.LOW), S.POTENTIALLY_NON_COMPLIANT, S.LIKELY_COMPLIANT),
    ((P.LOW,), S.COMPLIANT, S.COMPLIANT),
    # empty list leaves the status alone
    ((), S.NON_COMPLIANT, S.NON_COMPLIANT),
    ((), S.COMPLIANT, S.COMPLIANT),
])
def test_enforce_status_consistency(priorities, current, expected):
    from labelcheck.evaluation.status_enforcer import enforce_status_consistency
    assert enforce_status_consistency(_recs(*priorities), current) == expected


@pytest.mark.parametrize("current", list(S))
def test_enforcement_is_idempotent(current):
    from labelcheck.evaluation.status_enforcer import enforce_status_consistency
    for priorities in [(P.CRITICAL,), (P.MEDIUM,), (P.LOW,), ()]:
        recs = _recs(*priorities)
        once = enforce_status_consistency(recs, current)
        assert enforce_status_consistency(recs, once) == once
