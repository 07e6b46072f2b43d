"""Tests for entity and request contracts."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from goalboard.kanban.models import (
    BoardUpdate,
    Goal,
    GoalMove,
    GoalType,
    GoalUpdate,
)


def _goal(**overrides) -> Goal:
    defaults = dict(
        id="goal1",
        board_id="board1",
        column_id="col1",
        title="Learn React Hooks",
        position=0,
        assignee="JD",
        created_at=datetime(2026, 2, 15, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return Goal(**defaults)


class TestGoalSerialization:
    def test_camel_case_keys(self):
        data = _goal().model_dump(mode="json", by_alias=True)
        assert data["boardId"] == "board1"
        assert data["columnId"] == "col1"
        assert data["goalType"] == "short-term"
        assert data["isWin"] is False
        assert data["completedAt"] is None

    def test_accepts_camel_case_input(self):
        goal = Goal.model_validate(
            {
                "id": "g",
                "boardId": "b",
                "columnId": None,
                "title": "t",
                "position": 0,
                "assignee": "SM",
                "isWin": True,
                "createdAt": "2026-02-15T00:00:00Z",
            }
        )
        assert goal.is_win is True
        assert goal.column_id is None

    def test_goal_type_values(self):
        for value in ("short-term", "long-term"):
            assert _goal(goal_type=value).goal_type == GoalType(value)


class TestGoalMove:
    def test_minimal(self):
        move = GoalMove.model_validate({"goalId": "g", "targetPosition": 2})
        assert move.target_column_id is None
        assert move.is_win is None

    def test_negative_position_rejected(self):
        with pytest.raises(ValidationError):
            GoalMove.model_validate({"goalId": "g", "targetPosition": -1})

    def test_position_required(self):
        with pytest.raises(ValidationError):
            GoalMove.model_validate({"goalId": "g"})


class TestPartialUpdates:
    def test_goal_update_splits_placement(self):
        update = GoalUpdate.model_validate({"title": "x", "position": 1})
        assert update.placement_changed() is True
        assert update.field_changes() == {"title": "x"}

    def test_goal_update_without_placement(self):
        update = GoalUpdate.model_validate({"completedSubtasks": 2})
        assert update.placement_changed() is False
        assert update.field_changes() == {"completed_subtasks": 2}

    def test_null_title_ignored(self):
        update = GoalUpdate.model_validate({"title": None, "description": None})
        assert update.field_changes() == {"description": None}

    def test_board_update_only_supplied_fields(self):
        assert BoardUpdate.model_validate({"title": "New"}).changes() == {"title": "New"}
