import logging
import math
from typing import Optional, Sequence

from models import AnyRecord, Confidence, MatchResult, Pairing
from normalize import amounts_within, as_decimal, day_distance

logger = logging.getLogger(__name__)

DEFAULT_AMOUNT_TOLERANCE = "0.01"
DEFAULT_DAY_TOLERANCE = 3


def _best_candidate(left: AnyRecord,
                    right: Sequence[AnyRecord],
                    used_right: set,
                    amount_tolerance,
                    day_tolerance) -> Optional[int]:
    best_j = None
    best_dd = math.inf
    for j, r in enumerate(right):
        if j in used_right:
            continue
        if not amounts_within(left.amount, r.amount, amount_tolerance):
            continue
        dd = day_distance(left.date, r.date)
        # strict '<' keeps the earliest right record on ties
        if dd <= day_tolerance and dd < best_dd:
            best_dd = dd
            best_j = j
    return best_j


def auto_match(left: Sequence[AnyRecord],
               right: Sequence[AnyRecord],
               amount_tolerance=DEFAULT_AMOUNT_TOLERANCE,
               day_tolerance=DEFAULT_DAY_TOLERANCE) -> MatchResult:
    """
    Greedy nearest-date pass, left priority.

    Each left record, in order, claims the unconsumed right record whose amount
    is within amount_tolerance and whose date is closest (and within
    day_tolerance). Unparseable amounts or dates never satisfy either check, so
    those records always end up unmatched.
    """
    amount_tolerance = as_decimal(amount_tolerance)
    if amount_tolerance.is_nan() or amount_tolerance < 0:
        raise ValueError(f"amount_tolerance must be >= 0, got {amount_tolerance}")
    if not day_tolerance >= 0:
        raise ValueError(f"day_tolerance must be >= 0, got {day_tolerance}")

    used_left = set()
    used_right = set()
    pairs = []

    for i, l in enumerate(left):
        j = _best_candidate(l, right, used_right, amount_tolerance, day_tolerance)
        if j is None:
            continue
        r = right[j]
        dd = day_distance(l.date, r.date)
        used_left.add(i)
        used_right.add(j)
        pairs.append(Pairing(
            left=l,
            right=r,
            confidence=Confidence.EXACT if dd == 0 else Confidence.FUZZY,
            day_distance=dd,
            amount_diff=abs(l.amount - r.amount),
        ))
        logger.debug("auto-matched left #%d with right #%d (%s day(s))", i, j, dd)

    result = MatchResult(
        matched_pairs=pairs,
        unmatched_left=[l for i, l in enumerate(left) if i not in used_left],
        unmatched_right=[r for j, r in enumerate(right) if j not in used_right],
    )
    logger.info("auto-match: %d pair(s), %d unmatched left, %d unmatched right",
                len(result.matched_pairs), len(result.unmatched_left), len(result.unmatched_right))
    return result
