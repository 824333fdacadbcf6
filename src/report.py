import math
import os
import json
from decimal import Decimal
from typing import Iterable

import pandas as pd

from models import IdentifiedRecord, ReconciliationState
from stats import ReconStats

MATCHED_COLUMNS = ["bank_date", "bank_amount", "bank_desc",
                   "book_date", "book_amount", "book_desc", "confidence",
                   "day_distance", "amount_diff"]
UNMATCHED_COLUMNS = ["date", "amount", "description"]


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def export_record(record: IdentifiedRecord) -> dict:
    """Exportable view of a record: original cell values only, no ids."""
    r = record.record
    return {"date": r.date_raw, "amount": r.amount_raw, "description": r.description}


def _audit_cell(value) -> str:
    # unknown distances (missing date or amount) export as empty cells
    if value is None or value == math.inf:
        return ""
    if isinstance(value, Decimal):
        return "" if value.is_nan() else str(value)
    return str(int(value))


def matched_rows(state: ReconciliationState) -> pd.DataFrame:
    rows = []
    for p in state.matched_pairs:
        bank, book = export_record(p.left), export_record(p.right)
        rows.append({
            "bank_date": bank["date"],
            "bank_amount": bank["amount"],
            "bank_desc": bank["description"],
            "book_date": book["date"],
            "book_amount": book["amount"],
            "book_desc": book["description"],
            "confidence": p.confidence.value,
            "day_distance": _audit_cell(p.day_distance),
            "amount_diff": _audit_cell(p.amount_diff),
        })
    return pd.DataFrame(rows, columns=MATCHED_COLUMNS)


def unmatched_rows(records: Iterable[IdentifiedRecord]) -> pd.DataFrame:
    return pd.DataFrame([export_record(r) for r in records], columns=UNMATCHED_COLUMNS)


def write_outputs(outputs_dir: str,
                  state: ReconciliationState,
                  exceptions: pd.DataFrame,
                  stats: ReconStats) -> None:
    ensure_dir(outputs_dir)

    matched_rows(state).to_csv(os.path.join(outputs_dir, "matched.csv"), index=False)
    unmatched_rows(state.unmatched_left).to_csv(os.path.join(outputs_dir, "unmatched_bank.csv"), index=False)
    unmatched_rows(state.unmatched_right).to_csv(os.path.join(outputs_dir, "unmatched_books.csv"), index=False)
    exceptions.to_csv(os.path.join(outputs_dir, "exceptions.csv"), index=False)

    summary = stats.to_dict()
    summary["exceptions_rows"] = int(len(exceptions))

    with open(os.path.join(outputs_dir, "recon_summary.json"), "w") as f:
        json.dump(summary, f, indent=2, default=str)
