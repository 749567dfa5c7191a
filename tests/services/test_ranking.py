"""Tests for rank and column-index arithmetic."""

import pytest

from lignum.services.ranking import (
    GAP,
    ShiftPlan,
    compute_rank,
    needs_rebalance,
    shift_plan,
    spread_ranks,
)


def _apply_shift(indices: dict[str, int], moved: str, new_index: int) -> list[str]:
    plan = shift_plan(indices[moved], new_index)
    for key, index in indices.items():
        if key != moved and plan.low <= index <= plan.high:
            indices[key] = index + plan.delta
    indices[moved] = new_index
    return sorted(indices, key=indices.__getitem__)


class TestComputeRank:
    def test_empty_column_gets_gap(self) -> None:
        assert GAP == 1000
        assert compute_rank(None, None) == 1000

    def test_before_first_card_halves_successor(self) -> None:
        assert compute_rank(None, 1000) == 500

    def test_after_last_card_adds_gap(self) -> None:
        assert compute_rank(3000, None) == 4000

    def test_between_neighbours_is_midpoint(self) -> None:
        assert compute_rank(1000, 2000) == 1500

    @pytest.mark.parametrize(
        ("prev_rank", "next_rank"),
        [(None, 1.0), (0.5, 0.75), (1000, 1000.001), (-10, 10)],
    )
    def test_result_lies_strictly_between(self, prev_rank, next_rank) -> None:
        rank = compute_rank(prev_rank, next_rank)
        lower = 0 if prev_rank is None else prev_rank
        assert lower < rank < next_rank


class TestNeedsRebalance:
    def test_wide_gap_is_fine(self) -> None:
        assert not needs_rebalance(1000, 2000)

    def test_open_ended_never_rebalances(self) -> None:
        assert not needs_rebalance(1e12, None)
        assert not needs_rebalance(None, None)

    def test_exhausted_gap_triggers(self) -> None:
        assert needs_rebalance(1.0, 1.0 + 1e-9)

    def test_custom_threshold(self) -> None:
        assert needs_rebalance(10, 11, min_gap=5)
        assert not needs_rebalance(10, 20, min_gap=5)

    def test_successor_near_zero_triggers(self) -> None:
        assert needs_rebalance(None, 1e-9)


def test_spread_ranks_are_gap_multiples() -> None:
    assert spread_ranks(3) == [1000, 2000, 3000]
    assert spread_ranks(0) == []


class TestShiftPlan:
    def test_forward_move_pulls_range_down(self) -> None:
        assert shift_plan(0, 2) == ShiftPlan(low=1, high=2, delta=-1)

    def test_backward_move_pushes_range_up(self) -> None:
        assert shift_plan(2, 0) == ShiftPlan(low=0, high=1, delta=1)

    def test_same_position_is_noop(self) -> None:
        assert shift_plan(1, 1).is_noop

    def test_moving_last_column_first(self) -> None:
        order = _apply_shift({"A": 0, "B": 1, "C": 2}, "C", 0)
        assert order == ["C", "A", "B"]

    def test_moving_first_column_last(self) -> None:
        order = _apply_shift({"A": 0, "B": 1, "C": 2, "D": 3}, "A", 3)
        assert order == ["B", "C", "D", "A"]

    @pytest.mark.parametrize(("old", "new"), [(0, 4), (4, 0), (1, 3), (3, 1), (2, 2)])
    def test_indices_stay_dense(self, old: int, new: int) -> None:
        indices = {name: i for i, name in enumerate("ABCDE")}
        moved = "ABCDE"[old]
        _apply_shift(indices, moved, new)
        assert sorted(indices.values()) == [0, 1, 2, 3, 4]
        assert indices[moved] == new
