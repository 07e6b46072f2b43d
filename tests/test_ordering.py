"""Tests for dense position bookkeeping and move planning."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from goalboard.kanban.errors import InvalidReferenceError
from goalboard.kanban.ordering import (
    Placement,
    changed_positions,
    clamp_position,
    compact,
    plan_move,
    renumber_around,
    resolve_placement,
)

NOW = datetime(2026, 2, 15, 12, 0, tzinfo=timezone.utc)


@dataclass
class Item:
    id: str
    position: int
    column_id: str | None = "col1"
    is_win: bool = False


def _items(*ids: str, column_id: str = "col1") -> list[Item]:
    return [Item(id=item_id, position=index, column_id=column_id) for index, item_id in enumerate(ids)]


# ---------------------------------------------------------------------------
# renumber_around
# ---------------------------------------------------------------------------

class TestRenumberAround:
    def test_move_last_to_front(self):
        a, b, c = _items("a", "b", "c")
        assert renumber_around([a, b, c], "c", 0) == {"a": 1, "b": 2}

    def test_move_front_to_last(self):
        a, b, c = _items("a", "b", "c")
        assert renumber_around([a, b, c], "a", 2) == {"b": 0, "c": 1}

    def test_move_to_middle(self):
        a, b, c, d = _items("a", "b", "c", "d")
        assert renumber_around([a, b, c, d], "d", 1) == {"a": 0, "b": 2, "c": 3}

    def test_same_slot_is_stable(self):
        a, b, c = _items("a", "b", "c")
        assert renumber_around([a, b, c], "b", 1) == {"a": 0, "c": 2}

    def test_unsorted_input_walks_in_position_order(self):
        a, b, c = _items("a", "b", "c")
        assert renumber_around([c, a, b], "x", 0) == {"a": 1, "b": 2, "c": 3}

    def test_ties_keep_first_encountered_lower(self):
        first = Item(id="first", position=0)
        second = Item(id="second", position=0)
        assert renumber_around([first, second], "x", 2) == {"first": 0, "second": 1}

    def test_gaps_are_closed(self):
        items = [Item(id="a", position=3), Item(id="b", position=7)]
        assert renumber_around(items, "x", 0) == {"a": 1, "b": 2}

    def test_empty(self):
        assert renumber_around([], "x", 0) == {}


class TestCompactAndClamp:
    def test_compact_removes_gap(self):
        a, b, c = _items("a", "b", "c")
        assert compact([a, b, c], removed_id="b") == {"a": 0, "c": 1}

    def test_compact_without_removal(self):
        items = [Item(id="a", position=2), Item(id="b", position=5)]
        assert compact(items) == {"a": 0, "b": 1}

    def test_clamp_high(self):
        assert clamp_position(10, 3) == 3

    def test_clamp_in_range(self):
        assert clamp_position(1, 3) == 1

    def test_clamp_negative(self):
        assert clamp_position(-1, 3) == 0

    def test_changed_positions_skips_unchanged(self):
        a, b = _items("a", "b")
        assert changed_positions([a, b], {"a": 0, "b": 2}) == {"b": 2}


# ---------------------------------------------------------------------------
# resolve_placement
# ---------------------------------------------------------------------------

class TestResolvePlacement:
    def test_win_flag_wins(self):
        goal = Item(id="g", position=0)
        assert resolve_placement(goal, "col2", True) == Placement(column_id=None, is_win=True)

    def test_omitted_column_keeps_current(self):
        goal = Item(id="g", position=0, column_id="col1")
        assert resolve_placement(goal, None, None) == Placement(column_id="col1", is_win=False)

    def test_target_column(self):
        goal = Item(id="g", position=0)
        assert resolve_placement(goal, "col2", None) == Placement(column_id="col2", is_win=False)

    def test_win_stays_win(self):
        goal = Item(id="g", position=0, column_id=None, is_win=True)
        assert resolve_placement(goal, None, None) == Placement(column_id=None, is_win=True)

    def test_win_back_to_column(self):
        goal = Item(id="g", position=0, column_id=None, is_win=True)
        assert resolve_placement(goal, "col1", False) == Placement(column_id="col1", is_win=False)

    def test_win_demoted_without_column(self):
        goal = Item(id="g", position=0, column_id=None, is_win=True)
        with pytest.raises(InvalidReferenceError):
            resolve_placement(goal, None, False)


# ---------------------------------------------------------------------------
# plan_move
# ---------------------------------------------------------------------------

class TestPlanMove:
    def test_same_column(self):
        a, b, c = _items("a", "b", "c")
        target = Placement(column_id="col1", is_win=False)
        plan = plan_move(c, target, 0, [a, b, c], [a, b, c], NOW)
        assert plan.goal_changes == {"position": 0, "column_id": "col1", "is_win": False}
        assert plan.sibling_positions == {"a": 1, "b": 2}

    def test_same_column_clamps_past_end(self):
        a, b, c = _items("a", "b", "c")
        target = Placement(column_id="col1", is_win=False)
        plan = plan_move(a, target, 99, [a, b, c], [a, b, c], NOW)
        assert plan.goal_changes["position"] == 2
        assert plan.sibling_positions == {"b": 0, "c": 1}

    def test_cross_column_renumbers_both_sides(self):
        a, b, c = _items("a", "b", "c")
        x, y = _items("x", "y", column_id="col2")
        target = Placement(column_id="col2", is_win=False)
        plan = plan_move(a, target, 1, [a, b, c], [x, y], NOW)
        assert plan.goal_changes == {"position": 1, "column_id": "col2", "is_win": False}
        assert plan.sibling_positions == {"b": 0, "c": 1, "y": 2}

    def test_promote_to_win_stamps_completion(self):
        a, b = _items("a", "b")
        old_win = Item(id="w", position=0, column_id=None, is_win=True)
        target = Placement(column_id=None, is_win=True)
        plan = plan_move(a, target, 0, [a, b], [old_win], NOW)
        assert plan.goal_changes == {
            "position": 0,
            "column_id": None,
            "is_win": True,
            "completed_at": NOW,
        }
        assert plan.sibling_positions == {"b": 0, "w": 1}

    def test_demote_clears_completion(self):
        win = Item(id="w", position=0, column_id=None, is_win=True)
        a, = _items("a")
        target = Placement(column_id="col1", is_win=False)
        plan = plan_move(win, target, 0, [win], [a], NOW)
        assert plan.goal_changes["completed_at"] is None
        assert plan.goal_changes["column_id"] == "col1"
        assert plan.sibling_positions == {"a": 1}

    def test_reorder_within_wins_keeps_completion(self):
        w1 = Item(id="w1", position=0, column_id=None, is_win=True)
        w2 = Item(id="w2", position=1, column_id=None, is_win=True)
        target = Placement(column_id=None, is_win=True)
        plan = plan_move(w2, target, 0, [w1, w2], [w1, w2], NOW)
        assert "completed_at" not in plan.goal_changes
        assert plan.sibling_positions == {"w1": 1}
