import math
from typing import List

from errors import InvalidOperation
from models import IdentifiedRecord
from normalize import day_distance, normalize_text
from rules import Rules
from store import MATCHED, UNMATCHED_LEFT, ReconciliationStore


def _opposite_pool(store: ReconciliationStore, selected_id: str) -> List[IdentifiedRecord]:
    # get_record raises NotFound for unknown ids
    store.get_record(selected_id)
    where = store.locate(selected_id)
    if where == MATCHED:
        raise InvalidOperation(f"{selected_id!r} is already matched")
    return store.unmatched_right if where == UNMATCHED_LEFT else store.unmatched_left


def search_candidates(store: ReconciliationStore, selected_id: str, query: str = "") -> List[IdentifiedRecord]:
    """Opposite-side unmatched records whose description or raw amount contains query."""
    pool = _opposite_pool(store, selected_id)
    q = normalize_text(query)
    if not q:
        return pool
    return [
        r for r in pool
        if q in normalize_text(r.description) or q in normalize_text(r.record.amount_raw)
    ]


def suggest_candidates(store: ReconciliationStore, selected_id: str, rules: Rules) -> List[dict]:
    selected = store.get_record(selected_id)
    pool = _opposite_pool(store, selected_id)

    rows = []
    for pos, c in enumerate(pool):
        if selected.amount.is_nan() or c.amount.is_nan():
            amount_diff = math.inf
        else:
            amount_diff = abs(selected.amount - c.amount)
        rows.append((amount_diff, day_distance(selected.date, c.date), pos, c))

    rows.sort(key=lambda t: (t[0], t[1], t[2]))

    out = []
    for rank, (amount_diff, dd, _, c) in enumerate(rows[:rules.top_k_suggestions], start=1):
        reason_parts = [
            "amt_diff=n/a" if amount_diff == math.inf else f"amt_diff={amount_diff:.2f}",
            "date_diff=n/a" if dd == math.inf else f"date_diff={int(dd)}d",
        ]
        out.append({
            "rank": rank,
            "candidate_id": c.id,
            "candidate": c,
            "amount_diff": amount_diff,
            "date_diff_days": dd,
            "reason": "; ".join(reason_parts),
        })
    return out
