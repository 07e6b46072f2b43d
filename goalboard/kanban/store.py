"""Repository interface shared by the memory and SQL backends.

Reads return None (or an empty list) for unknown ids. Writes that reference
another entity in their payload raise NotFoundError / InvalidReferenceError.
Deletes return False when nothing was deleted.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from goalboard.kanban.models import (
    Board,
    BoardCreate,
    BoardUpdate,
    Column,
    ColumnCreate,
    ColumnUpdate,
    Comment,
    CommentCreate,
    Goal,
    GoalCreate,
    GoalMove,
    GoalUpdate,
)

# (title, color) for the columns every new board starts with
DEFAULT_COLUMNS: list[tuple[str, str]] = [
    ("To Do", "#3B82F6"),
    ("Doing", "#F59E0B"),
    ("Done", "#10B981"),
]


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def win_sort_key(goal: Goal) -> float:
    """Most recently completed first; wins with no timestamp last."""
    return -goal.completed_at.timestamp() if goal.completed_at else float("inf")


class Store(ABC):
    # -- boards --------------------------------------------------------------

    @abstractmethod
    async def list_boards(self) -> list[Board]: ...

    @abstractmethod
    async def get_board(self, board_id: str) -> Board | None: ...

    @abstractmethod
    async def create_board(self, data: BoardCreate) -> Board: ...

    @abstractmethod
    async def update_board(self, board_id: str, data: BoardUpdate) -> Board | None: ...

    @abstractmethod
    async def delete_board(self, board_id: str) -> bool: ...

    # -- columns -------------------------------------------------------------

    @abstractmethod
    async def list_columns(self, board_id: str) -> list[Column]: ...

    @abstractmethod
    async def get_column(self, column_id: str) -> Column | None: ...

    @abstractmethod
    async def create_column(self, data: ColumnCreate) -> Column: ...

    @abstractmethod
    async def update_column(self, column_id: str, data: ColumnUpdate) -> Column | None: ...

    @abstractmethod
    async def delete_column(self, column_id: str) -> bool: ...

    # -- goals ---------------------------------------------------------------

    @abstractmethod
    async def list_goals_by_board(self, board_id: str) -> list[Goal]: ...

    @abstractmethod
    async def list_goals_by_column(self, column_id: str) -> list[Goal]: ...

    @abstractmethod
    async def list_wins(self, board_id: str) -> list[Goal]: ...

    @abstractmethod
    async def get_goal(self, goal_id: str) -> Goal | None: ...

    @abstractmethod
    async def create_goal(self, data: GoalCreate) -> Goal: ...

    @abstractmethod
    async def update_goal(self, goal_id: str, data: GoalUpdate) -> Goal | None: ...

    @abstractmethod
    async def move_goal(self, data: GoalMove) -> Goal | None: ...

    @abstractmethod
    async def delete_goal(self, goal_id: str) -> bool: ...

    # -- comments ------------------------------------------------------------

    @abstractmethod
    async def list_comments(self, goal_id: str) -> list[Comment]: ...

    @abstractmethod
    async def create_comment(self, data: CommentCreate) -> Comment: ...

    @abstractmethod
    async def delete_comment(self, comment_id: str) -> bool: ...

    async def close(self) -> None:
        return None
