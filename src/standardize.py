import logging
from typing import List, Tuple

import pandas as pd

from models import Record, Side

logger = logging.getLogger(__name__)

EXCEPTION_COLUMNS = ["side", "row", "date", "amount", "description", "exception_reason"]


def standardize(df: pd.DataFrame, side: Side) -> Tuple[List[Record], pd.DataFrame]:
    """
    Build Records from a mapped frame. Rows whose date or amount does not parse
    are kept as records (they simply never auto-match) and also reported in the
    exceptions frame.
    """
    side = Side(side)
    records = []
    bad = []
    for i, row in enumerate(df.to_dict(orient="records")):
        rec = Record.from_row(side, row)
        records.append(rec)

        reason = ""
        if not rec.date_ok:
            reason += "bad_date;"
        if not rec.amount_ok:
            reason += "bad_amount;"
        if reason:
            logger.debug("%s row %d flagged: %s", side.value, i, reason)
            bad.append({
                "side": side.value,
                "row": i + 1,
                "date": rec.date_raw,
                "amount": rec.amount_raw,
                "description": rec.description,
                "exception_reason": reason,
            })

    exceptions = pd.DataFrame(bad, columns=EXCEPTION_COLUMNS)
    return records, exceptions
