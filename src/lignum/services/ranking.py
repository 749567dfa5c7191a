"""Rank and column-index arithmetic.

Cards are ordered inside a column by a floating-point ``rank_position``;
inserting between two cards takes the midpoint so no neighbour is rewritten.
Columns are ordered by a dense integer ``order_index``.
"""

from __future__ import annotations

from dataclasses import dataclass

from lignum.core.settings import settings

GAP = settings.rank_gap


def compute_rank(prev_rank: float | None, next_rank: float | None) -> float:
    """Return the rank for a card placed between two neighbours.

    Args:
        prev_rank: Rank of the card that will precede the new position.
        next_rank: Rank of the card that will follow it.

    Returns:
        A rank strictly between the neighbours when both exist.
    """
    if prev_rank is None and next_rank is None:
        return GAP
    if prev_rank is None:
        return next_rank / 2
    if next_rank is None:
        return prev_rank + GAP
    return (prev_rank + next_rank) / 2


def needs_rebalance(
    prev_rank: float | None,
    next_rank: float | None,
    min_gap: float | None = None,
) -> bool:
    """Return True when the neighbours are too close to split again.

    With no predecessor the lower bound is zero, since ``compute_rank``
    halves the successor.
    """
    if next_rank is None:
        return False
    threshold = settings.min_rank_gap if min_gap is None else min_gap
    lower = 0.0 if prev_rank is None else prev_rank
    return (next_rank - lower) < threshold


def spread_ranks(count: int) -> list[float]:
    """Evenly spaced ranks ``GAP, 2*GAP, ...`` for ``count`` cards."""
    return [(i + 1) * GAP for i in range(count)]


@dataclass(frozen=True)
class ShiftPlan:
    """Range of column indices to shift when one column moves.

    Every column whose index lies in ``[low, high]`` (excluding the moved
    column) gets ``delta`` added to its index.
    """

    low: int
    high: int
    delta: int

    @property
    def is_noop(self) -> bool:
        return self.low > self.high


def shift_plan(old_index: int, new_index: int) -> ShiftPlan:
    """Return the contiguous shift that makes room for a moved column.

    Moving forward pulls ``old < i <= new`` down by one; moving backward
    pushes ``new <= i < old`` up by one.
    """
    if old_index < new_index:
        return ShiftPlan(low=old_index + 1, high=new_index, delta=-1)
    if new_index < old_index:
        return ShiftPlan(low=new_index, high=old_index - 1, delta=1)
    return ShiftPlan(low=1, high=0, delta=0)

