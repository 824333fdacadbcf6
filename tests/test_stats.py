from decimal import Decimal

from factories import bank, book
from match import auto_match
from models import MatchResult, ReconciliationState
from stats import compute_stats, match_rate
from store import ReconciliationStore


def _store(left, right):
    s = ReconciliationStore()
    s.initialize(auto_match(left, right))
    return s


def test_empty_state_rate_is_zero():
    stats = compute_stats(ReconciliationState())
    assert stats.total == 0
    assert stats.match_rate == 0
    assert stats.matched_value == Decimal("0")


def test_counts_and_rate():
    s = _store(
        [bank("100.00", "2024-01-05"), bank("50", "2024-01-01"), bank("9", "2024-01-01")],
        [book("100.00", "2024-01-05"), book("50", "2024-01-03"), book("1", "2024-01-01")],
    )
    stats = compute_stats(s.state)
    assert stats.total == 3
    assert stats.matched == 2
    assert stats.unmatched_left == 1
    assert stats.unmatched_right == 1
    assert stats.match_rate == 67
    assert stats.exact_matches == 1
    assert stats.fuzzy_matches == 1
    assert stats.manual_matches == 0
    assert stats.matched_value == Decimal("150.00")
    assert stats.unmatched_left_value == Decimal("9")


def test_recomputed_after_manual_operations():
    s = _store([bank("9", "2024-01-01")], [book("1", "2024-01-01")])
    assert compute_stats(s.state).match_rate == 0

    match = s.manual_match(s.unmatched_left[0].id, s.unmatched_right[0].id)
    stats = compute_stats(s.state)
    assert stats.manual_matches == 1
    assert stats.match_rate == 100
    assert stats.matched_value == Decimal("9")

    s.unmatch(match.id)
    assert compute_stats(s.state).matched == 0


def test_nan_amounts_count_as_zero_and_are_flagged():
    s = ReconciliationStore()
    s.initialize(MatchResult(unmatched_left=[bank("n/a", "2024-01-01"), bank("5", "2024-01-01")],
                             unmatched_right=[book("5", "2024-01-01")]))
    s.manual_match(s.unmatched_left[0].id, s.unmatched_right[0].id)
    stats = compute_stats(s.state)
    assert stats.matched_value == Decimal("0")
    assert stats.unparsed_matched_amounts == 1
    assert stats.unmatched_left_value == Decimal("5")


def test_match_rate_rounds_half_up():
    assert match_rate(1, 8) == 13
    assert match_rate(1, 3) == 33
    assert match_rate(0, 0) == 0


def test_to_dict_is_json_friendly():
    d = compute_stats(ReconciliationState()).to_dict()
    assert d["matched_value"] == "0"
    assert d["match_rate"] == 0
