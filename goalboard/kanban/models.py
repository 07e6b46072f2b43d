"""Board entities and per-endpoint request contracts — Pydantic v2 models.

JSON uses camelCase field names; snake_case is accepted on input as well.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_COLUMN_COLOR = "#3B82F6"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _changes(model: BaseModel, nullable: tuple[str, ...] = (), exclude: set[str] | None = None) -> dict:
    """Fields the caller supplied. An explicit null only clears ``nullable`` fields."""
    supplied = model.model_dump(exclude_unset=True, exclude=exclude)
    return {name: value for name, value in supplied.items() if value is not None or name in nullable}


class GoalType(str, Enum):
    short_term = "short-term"
    long_term = "long-term"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class Board(CamelModel):
    id: str
    title: str
    description: str | None = None
    created_at: datetime


class Column(CamelModel):
    id: str
    board_id: str
    title: str
    position: int
    color: str = DEFAULT_COLUMN_COLOR


class Goal(CamelModel):
    """A card on the board. ``column_id`` is None exactly when ``is_win``."""

    id: str
    board_id: str
    column_id: str | None = None
    title: str
    description: str | None = None
    position: int
    goal_type: GoalType = GoalType.short_term
    assignee: str
    completed_subtasks: int = 0
    total_subtasks: int = 0
    is_win: bool = False
    created_at: datetime
    completed_at: datetime | None = None


class Comment(CamelModel):
    id: str
    goal_id: str
    author: str
    content: str
    media_url: str | None = None
    created_at: datetime


class User(CamelModel):
    id: str
    username: str
    display_name: str
    initials: str


# ---------------------------------------------------------------------------
# Request contracts
# ---------------------------------------------------------------------------


class BoardCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None


class BoardUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None

    def changes(self) -> dict:
        return _changes(self, nullable=("description",))


class ColumnCreate(CamelModel):
    board_id: str
    title: str = Field(min_length=1)
    position: int | None = Field(default=None, ge=0)  # None appends
    color: str = DEFAULT_COLUMN_COLOR


class ColumnUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    color: str | None = None

    def changes(self) -> dict:
        return _changes(self)


class GoalCreate(CamelModel):
    board_id: str
    column_id: str
    title: str = Field(min_length=1)
    description: str | None = None
    position: int | None = Field(default=None, ge=0)  # None appends
    goal_type: GoalType = GoalType.short_term
    assignee: str
    total_subtasks: int = Field(default=0, ge=0)


class GoalUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    column_id: str | None = None
    position: int | None = Field(default=None, ge=0)
    goal_type: GoalType | None = None
    assignee: str | None = None
    completed_subtasks: int | None = Field(default=None, ge=0)
    total_subtasks: int | None = Field(default=None, ge=0)
    is_win: bool | None = None
    completed_at: datetime | None = None

    def placement_changed(self) -> bool:
        return any(
            name in self.model_fields_set for name in ("column_id", "position", "is_win")
        )

    def field_changes(self) -> dict:
        """Descriptive fields the caller supplied, excluding placement fields."""
        return _changes(
            self,
            nullable=("description", "completed_at"),
            exclude={"column_id", "position", "is_win"},
        )


class GoalMove(CamelModel):
    goal_id: str
    target_column_id: str | None = None
    target_position: int = Field(ge=0)
    is_win: bool | None = None


class CommentCreate(CamelModel):
    goal_id: str
    author: str = Field(min_length=1)
    content: str = Field(min_length=1)
    media_url: str | None = None
