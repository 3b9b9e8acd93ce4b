from src.deduction_engine.deduction_engine.deductions.model import DeductionRule
from src.deduction_engine.deduction_engine.deductions.overlap import find_overlapping_rules


def rule(rule_id, rule_type, min_minutes=None, max_minutes=None):
    return DeductionRule(
        rule_id=rule_id,
        rule_name=rule_id,
        rule_type=rule_type,
        deduction_type="fixed",
        deduction_value=10,
        min_minutes=min_minutes,
        max_minutes=max_minutes,
    )


def _ids(pairs):
    return [(a.rule_id, b.rule_id) for a, b in pairs]


def test_adjacent_half_open_ranges_do_not_overlap():
    rules = [rule("a", "late_arrival", 0, 30), rule("b", "late_arrival", 30, 60), rule("c", "late_arrival", 60)]

    assert find_overlapping_rules(rules) == []


def test_intersecting_ranges_are_reported():
    rules = [rule("a", "late_arrival", 0, 30), rule("b", "late_arrival", 15, None)]

    assert _ids(find_overlapping_rules(rules)) == [("a", "b")]


def test_different_rule_types_never_overlap():
    rules = [rule("a", "late_arrival", 0, 30), rule("b", "early_exit", 0, 30)]

    assert find_overlapping_rules(rules) == []


def test_open_bounds_overlap_everything_of_the_same_type():
    rules = [rule("any", "early_exit"), rule("b", "early_exit", 100, 200)]

    assert _ids(find_overlapping_rules(rules)) == [("any", "b")]


def test_duplicate_absence_rules_are_reported():
    rules = [rule("abs-1", "absence"), rule("abs-2", "absence")]

    assert _ids(find_overlapping_rules(rules)) == [("abs-1", "abs-2")]
