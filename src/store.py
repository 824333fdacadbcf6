import itertools
import logging
import uuid
from typing import Callable, List, Optional

from errors import InvalidOperation, NotFound, ReconciliationError
from models import (AnyRecord, Confidence, IdentifiedRecord, Match, MatchResult,
                    ReconciliationState, Side)
from normalize import day_distance

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

MATCHED = "matched"
UNMATCHED_LEFT = "unmatched_left"
UNMATCHED_RIGHT = "unmatched_right"


class SequentialIds:
    """Monotonic ids: r1, r2, ... Never rewinds, so ids are never recycled."""

    def __init__(self, prefix: str = "r", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


class RandomIds:
    def __call__(self) -> str:
        return uuid.uuid4().hex


class ReconciliationStore:
    """
    Authoritative post-match state: matched pairs plus the two unmatched pools.

    Every mutation validates first and only then touches the lists, so a failed
    call leaves the state exactly as it was. Not thread-safe; wrap a store in a
    single lock per session if several operators can reach it.
    """

    def __init__(self, id_factory: Optional[IdFactory] = None):
        self._new_id = id_factory or SequentialIds()
        self._matched: List[Match] = []
        self._left: List[IdentifiedRecord] = []
        self._right: List[IdentifiedRecord] = []
        self._left_total = 0
        self._right_total = 0

    # ---- reads

    @property
    def state(self) -> ReconciliationState:
        return ReconciliationState(
            matched_pairs=list(self._matched),
            unmatched_left=list(self._left),
            unmatched_right=list(self._right),
        )

    @property
    def matched_pairs(self) -> List[Match]:
        return list(self._matched)

    @property
    def unmatched_left(self) -> List[IdentifiedRecord]:
        return list(self._left)

    @property
    def unmatched_right(self) -> List[IdentifiedRecord]:
        return list(self._right)

    @property
    def is_empty(self) -> bool:
        return not (self._matched or self._left or self._right)

    def locate(self, record_id: str) -> Optional[str]:
        """Return MATCHED, UNMATCHED_LEFT, UNMATCHED_RIGHT, or None if unknown."""
        if _index_of(self._left, record_id) is not None:
            return UNMATCHED_LEFT
        if _index_of(self._right, record_id) is not None:
            return UNMATCHED_RIGHT
        for m in self._matched:
            if record_id in (m.left.id, m.right.id):
                return MATCHED
        return None

    def get_record(self, record_id: str) -> IdentifiedRecord:
        for pool in (self._left, self._right):
            idx = _index_of(pool, record_id)
            if idx is not None:
                return pool[idx]
        for m in self._matched:
            if m.left.id == record_id:
                return m.left
            if m.right.id == record_id:
                return m.right
        raise NotFound(f"No record with id {record_id!r}")

    def get_match(self, match_id: str) -> Match:
        idx = _index_of(self._matched, match_id)
        if idx is None:
            raise NotFound(f"No match with id {match_id!r}")
        return self._matched[idx]

    # ---- mutations

    def initialize(self, result: MatchResult) -> None:
        matched = []
        for p in result.matched_pairs:
            matched.append(Match(
                id=self._new_id(),
                left=self._identify(p.left),
                right=self._identify(p.right),
                confidence=Confidence(p.confidence),
                day_distance=p.day_distance,
                amount_diff=p.amount_diff,
            ))
        left = [self._identify(r) for r in result.unmatched_left]
        right = [self._identify(r) for r in result.unmatched_right]

        seen = set()
        for rid in _all_ids(matched, left, right):
            if rid in seen:
                raise InvalidOperation(f"Identifier {rid!r} appears more than once")
            seen.add(rid)

        self._matched, self._left, self._right = matched, left, right
        self._left_total = len(matched) + len(left)
        self._right_total = len(matched) + len(right)
        logger.info("store initialised: %d matched, %d unmatched left, %d unmatched right",
                    len(matched), len(left), len(right))

    def manual_match(self, selected_id: str, candidate_id: str) -> Match:
        """
        Pair one unmatched-left record with one unmatched-right record.
        Argument order does not matter; sides come from pool membership.
        """
        if selected_id == candidate_id:
            raise InvalidOperation(f"Cannot match {selected_id!r} with itself")
        where_selected = self._require_unmatched(selected_id)
        where_candidate = self._require_unmatched(candidate_id)
        if where_selected == where_candidate:
            raise InvalidOperation(
                f"{selected_id!r} and {candidate_id!r} are both in {where_selected}")

        if where_selected == UNMATCHED_LEFT:
            left_id, right_id = selected_id, candidate_id
        else:
            left_id, right_id = candidate_id, selected_id
        li = _index_of(self._left, left_id)
        ri = _index_of(self._right, right_id)
        left, right = self._left[li], self._right[ri]

        match = Match(
            id=self._new_id(),
            left=left,
            right=right,
            confidence=Confidence.MANUAL,
            day_distance=day_distance(left.date, right.date),
            amount_diff=None if (left.amount.is_nan() or right.amount.is_nan())
            else abs(left.amount - right.amount),
        )
        del self._left[li]
        del self._right[ri]
        self._matched.append(match)
        logger.info("manual match %s: %s <-> %s", match.id, left.id, right.id)
        return match

    def unmatch(self, match_id: str) -> None:
        idx = _index_of(self._matched, match_id)
        if idx is None:
            raise NotFound(f"No match with id {match_id!r}")
        match = self._matched.pop(idx)
        self._left.append(match.left)
        self._right.append(match.right)
        logger.info("unmatched %s: %s and %s returned to their pools",
                    match.id, match.left.id, match.right.id)

    def reset(self) -> None:
        self._matched, self._left, self._right = [], [], []
        self._left_total = self._right_total = 0
        logger.info("store reset")

    def check_invariants(self) -> None:
        ids = list(_all_ids(self._matched, self._left, self._right))
        if len(ids) != len(set(ids)):
            raise ReconciliationError("Identifier appears in more than one place")
        if len(self._matched) + len(self._left) != self._left_total:
            raise ReconciliationError("Left side count drifted from its input total")
        if len(self._matched) + len(self._right) != self._right_total:
            raise ReconciliationError("Right side count drifted from its input total")
        for m in self._matched:
            if m.left.side != Side.LEFT or m.right.side != Side.RIGHT:
                raise ReconciliationError(f"Match {m.id} has a record on the wrong side")
        for r in self._left:
            if r.side != Side.LEFT:
                raise ReconciliationError(f"{r.id} sits in the left pool but is a right record")
        for r in self._right:
            if r.side != Side.RIGHT:
                raise ReconciliationError(f"{r.id} sits in the right pool but is a left record")

    # ---- helpers

    def _identify(self, record: AnyRecord) -> IdentifiedRecord:
        if isinstance(record, IdentifiedRecord):
            return record
        return IdentifiedRecord(id=self._new_id(), record=record)

    def _require_unmatched(self, record_id: str) -> str:
        where = self.locate(record_id)
        if where is None:
            raise NotFound(f"No record with id {record_id!r}")
        if where == MATCHED:
            raise InvalidOperation(f"{record_id!r} is already matched")
        return where


def _index_of(items, item_id: str) -> Optional[int]:
    for i, item in enumerate(items):
        if item.id == item_id:
            return i
    return None


def _all_ids(matched, left, right):
    for m in matched:
        yield m.left.id
        yield m.right.id
    for r in left:
        yield r.id
    for r in right:
        yield r.id
