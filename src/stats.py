from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from models import Confidence, ReconciliationState


@dataclass(frozen=True)
class ReconStats:
    total: int
    matched: int
    unmatched_left: int
    unmatched_right: int
    match_rate: int
    exact_matches: int
    fuzzy_matches: int
    manual_matches: int
    matched_value: Decimal
    unmatched_left_value: Decimal
    unparsed_matched_amounts: int

    def to_dict(self) -> dict:
        out = asdict(self)
        out["matched_value"] = str(self.matched_value)
        out["unmatched_left_value"] = str(self.unmatched_left_value)
        return out


def _sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    # NaN amounts count as zero
    return sum((a for a in amounts if not a.is_nan()), Decimal("0"))


def match_rate(matched: int, total: int) -> int:
    if total == 0:
        return 0
    pct = Decimal(100 * matched) / Decimal(total)
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_stats(state: ReconciliationState) -> ReconStats:
    """Recomputed from scratch on every call; nothing is cached."""
    pairs = state.matched_pairs
    total = len(pairs) + len(state.unmatched_left)
    by_conf = {c: 0 for c in Confidence}
    for p in pairs:
        by_conf[p.confidence] += 1

    return ReconStats(
        total=total,
        matched=len(pairs),
        unmatched_left=len(state.unmatched_left),
        unmatched_right=len(state.unmatched_right),
        match_rate=match_rate(len(pairs), total),
        exact_matches=by_conf[Confidence.EXACT],
        fuzzy_matches=by_conf[Confidence.FUZZY],
        manual_matches=by_conf[Confidence.MANUAL],
        matched_value=_sum_amounts(p.left.amount for p in pairs),
        unmatched_left_value=_sum_amounts(r.amount for r in state.unmatched_left),
        unparsed_matched_amounts=sum(1 for p in pairs if p.left.amount.is_nan()),
    )
