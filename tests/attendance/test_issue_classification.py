from decimal import Decimal

import pytest

from src.deduction_engine.deduction_engine.attendance.materializer import classify_issues
from src.deduction_engine.deduction_engine.core.actor import Actor
from src.deduction_engine.deduction_engine.core.enums import IssueType, ProcessType


def classify(**overrides):
    kwargs = dict(
        deduction_amount=Decimal("0.00"),
        late_minutes=0,
        early_exit_minutes=0,
        has_in_time=True,
        has_out_time=True,
        process_type=ProcessType.EVENING,
    )
    kwargs.update(overrides)
    return classify_issues(**kwargs)


def test_clean_day_has_no_issues():
    assert classify() == (False, None)


def test_deduction_takes_precedence_over_everything():
    assert classify(deduction_amount=Decimal("5.00"), late_minutes=40, early_exit_minutes=10, has_out_time=False) == (
        True,
        IssueType.DEDUCTION,
    )


def test_late_needs_more_than_threshold():
    assert classify(late_minutes=15) == (False, None)
    assert classify(late_minutes=16) == (True, IssueType.LATE)
    assert classify(late_minutes=16, late_threshold_minutes=20) == (False, None)


def test_early_exit_before_missing_times():
    assert classify(early_exit_minutes=1, has_out_time=False) == (True, IssueType.EARLY_EXIT)


def test_missing_in_before_missing_out():
    assert classify(has_in_time=False, has_out_time=False) == (True, IssueType.MISSING_IN)


def test_missing_out_only_counts_in_the_evening():
    assert classify(has_out_time=False) == (True, IssueType.MISSING_OUT)
    assert classify(has_out_time=False, process_type=ProcessType.MORNING) == (False, None)


def test_actor_variants():
    assert Actor.system().user_id is None
    assert Actor.system().is_system
    assert Actor.user(42).user_id == "42"
    with pytest.raises(ValueError):
        Actor.user("")
