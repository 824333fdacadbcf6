from dataclasses import dataclass, field
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Union

from normalize import normalize_amount, normalize_date


class Side(str, Enum):
    LEFT = "left"     # bank statement
    RIGHT = "right"   # accounting books


class Confidence(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    MANUAL = "manual"


@dataclass(frozen=True)
class Record:
    """One ledger entry, raw cell values kept next to their normalized form."""
    side: Side
    amount_raw: str
    date_raw: str
    description: str = ""
    amount: Decimal = field(init=False, compare=False)
    date: Optional[dt.date] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", normalize_amount(self.amount_raw))
        object.__setattr__(self, "date", normalize_date(self.date_raw))

    @classmethod
    def from_row(cls, side: Side, row: dict) -> "Record":
        return cls(
            side=Side(side),
            amount_raw="" if row.get("amount") is None else str(row.get("amount")),
            date_raw="" if row.get("date") is None else str(row.get("date")),
            description="" if row.get("description") is None else str(row.get("description")),
        )

    @property
    def amount_ok(self) -> bool:
        return not self.amount.is_nan()

    @property
    def date_ok(self) -> bool:
        return self.date is not None


@dataclass(frozen=True)
class IdentifiedRecord:
    id: str
    record: Record

    @property
    def side(self) -> Side:
        return self.record.side

    @property
    def amount(self) -> Decimal:
        return self.record.amount

    @property
    def date(self) -> Optional[dt.date]:
        return self.record.date

    @property
    def description(self) -> str:
        return self.record.description


AnyRecord = Union[Record, IdentifiedRecord]


@dataclass(frozen=True)
class Pairing:
    """Engine output for one automatic pair, before the store assigns ids."""
    left: AnyRecord
    right: AnyRecord
    confidence: Confidence
    day_distance: float = 0
    amount_diff: Decimal = Decimal("0")


@dataclass(frozen=True)
class Match:
    id: str
    left: IdentifiedRecord
    right: IdentifiedRecord
    confidence: Confidence
    day_distance: Optional[float] = None
    amount_diff: Optional[Decimal] = None


@dataclass
class MatchResult:
    matched_pairs: List[Pairing] = field(default_factory=list)
    unmatched_left: List[AnyRecord] = field(default_factory=list)
    unmatched_right: List[AnyRecord] = field(default_factory=list)


@dataclass(frozen=True)
class ReconciliationState:
    matched_pairs: List[Match] = field(default_factory=list)
    unmatched_left: List[IdentifiedRecord] = field(default_factory=list)
    unmatched_right: List[IdentifiedRecord] = field(default_factory=list)
