import json
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Union

from normalize import as_decimal

@dataclass(frozen=True)
class Rules:
    amount_tolerance: Decimal = Decimal("0.01")   # same currency units as the input
    day_tolerance: Union[int, float] = 3
    top_k_suggestions: int = 3

    def __post_init__(self) -> None:
        # callers may pass floats, ints or strings; normalize before validating
        try:
            amount_tolerance = as_decimal(self.amount_tolerance)
        except (InvalidOperation, TypeError, ValueError):
            raise ValueError(f"amount_tolerance is not a number: {self.amount_tolerance!r}")
        try:
            day_tolerance = float(self.day_tolerance)
            top_k = int(self.top_k_suggestions)
        except (TypeError, ValueError):
            raise ValueError(f"day_tolerance and top_k_suggestions must be numbers, got "
                             f"{self.day_tolerance!r} and {self.top_k_suggestions!r}")

        if amount_tolerance.is_nan() or amount_tolerance < 0:
            raise ValueError(f"amount_tolerance must be >= 0, got {self.amount_tolerance}")
        if not day_tolerance >= 0:
            raise ValueError(f"day_tolerance must be >= 0, got {self.day_tolerance}")
        if top_k < 0:
            raise ValueError(f"top_k_suggestions must be >= 0, got {self.top_k_suggestions}")

        object.__setattr__(self, "amount_tolerance", amount_tolerance)
        object.__setattr__(self, "day_tolerance", day_tolerance)
        object.__setattr__(self, "top_k_suggestions", top_k)

def load_rules(path: str = "config/recon_config.json") -> Rules:
    if not os.path.exists(path):
        return Rules()
    with open(path, "r") as f:
        raw: Dict[str, Any] = json.load(f)

    return Rules(
        amount_tolerance=raw.get("amount_tolerance", "0.01"),
        day_tolerance=raw.get("day_tolerance", 3),
        top_k_suggestions=raw.get("top_k_suggestions", 3),
    )
