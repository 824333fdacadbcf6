import json
import pandas as pd
from typing import Dict, List, Optional, Union

REQUIRED = ["date", "amount"]
OPTIONAL = ["description"]

FieldRef = Union[str, List[str]]


def _norm(s: str) -> str:
    return str(s).strip().lower()


def load_column_map(path: str = "config/column_map.json") -> dict:
    with open(path, "r") as f:
        return json.load(f)


def _find_column(df: pd.DataFrame, candidates: FieldRef) -> Optional[str]:
    if isinstance(candidates, str):
        candidates = [candidates]
    cols = {_norm(c): c for c in df.columns}
    for cand in candidates or []:
        key = _norm(cand)
        if key in cols:
            return cols[key]
    return None


def apply_mapping(df: pd.DataFrame, side: str, column_map: Dict) -> pd.DataFrame:
    """
    Returns a new DF with the standard fields (date, amount, description) pulled
    from whatever headers the caller's mapping names for this side. A mapping
    value is either one header or a list of candidate headers; the first one
    present in the export wins.
    """
    side_map = column_map.get(side)
    if not side_map:
        raise ValueError(f"No column mapping found for side='{side}'")

    out = pd.DataFrame(index=df.index)

    missing_required = []
    for std in REQUIRED:
        found = _find_column(df, side_map.get(std, []))
        if not found:
            missing_required.append(std)
        else:
            out[std] = df[found]
    if missing_required:
        raise ValueError(f"Missing required fields for {side}: {missing_required}. "
                         f"Check the column map against the input headers {list(df.columns)}.")

    for std in OPTIONAL:
        found = _find_column(df, side_map.get(std, []))
        out[std] = df[found] if found else ""

    return out.reset_index(drop=True)
