"""In-memory store — one dict per entity type, reset on restart.

No method awaits anything, so each call runs to completion on the event loop
before another request can touch the maps.
"""

from __future__ import annotations

import logging

from goalboard.kanban import ordering
from goalboard.kanban.errors import InvalidReferenceError, NotFoundError
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
    GoalType,
    GoalUpdate,
)
from goalboard.kanban.store import DEFAULT_COLUMNS, Store, new_id, utcnow, win_sort_key

logger = logging.getLogger(__name__)


class MemoryStore(Store):
    def __init__(self, seed: bool = False) -> None:
        self._boards: dict[str, Board] = {}
        self._columns: dict[str, Column] = {}
        self._goals: dict[str, Goal] = {}
        self._comments: dict[str, Comment] = {}
        if seed:
            self._seed()

    # -- helpers -------------------------------------------------------------

    def _board_columns(self, board_id: str) -> list[Column]:
        return ordering.in_order(c for c in self._columns.values() if c.board_id == board_id)

    def _column_goals(self, column_id: str) -> list[Goal]:
        return ordering.in_order(
            g for g in self._goals.values() if g.column_id == column_id and not g.is_win
        )

    def _board_wins(self, board_id: str) -> list[Goal]:
        return [g for g in self._goals.values() if g.board_id == board_id and g.is_win]

    def _members(self, board_id: str, placement: ordering.Placement) -> list[Goal]:
        if placement.is_win:
            return self._board_wins(board_id)
        return self._column_goals(placement.column_id)

    @staticmethod
    def _reposition(table: dict, positions: dict[str, int]) -> None:
        for item_id, position in positions.items():
            table[item_id] = table[item_id].model_copy(update={"position": position})

    def _require_column(self, column_id: str, board_id: str) -> Column:
        column = self._columns.get(column_id)
        if column is None:
            raise NotFoundError(f"Column not found: {column_id}")
        if column.board_id != board_id:
            raise InvalidReferenceError(f"Column {column_id} is not on board {board_id}")
        return column

    def _apply_move(
        self,
        goal: Goal,
        target_column_id: str | None,
        target_position: int,
        is_win: bool | None,
    ) -> Goal:
        target = ordering.resolve_placement(goal, target_column_id, is_win)
        if target.column_id is not None:
            self._require_column(target.column_id, goal.board_id)

        source = self._members(goal.board_id, ordering.current_placement(goal))
        dest = source if target == ordering.current_placement(goal) else self._members(goal.board_id, target)
        plan = ordering.plan_move(goal, target, target_position, source, dest, utcnow())

        self._reposition(self._goals, plan.sibling_positions)
        moved = goal.model_copy(update=plan.goal_changes)
        self._goals[goal.id] = moved
        return moved

    # -- boards --------------------------------------------------------------

    async def list_boards(self) -> list[Board]:
        return sorted(self._boards.values(), key=lambda b: b.created_at)

    async def get_board(self, board_id: str) -> Board | None:
        return self._boards.get(board_id)

    async def create_board(self, data: BoardCreate) -> Board:
        board = Board(id=new_id(), title=data.title, description=data.description, created_at=utcnow())
        self._boards[board.id] = board
        for position, (title, color) in enumerate(DEFAULT_COLUMNS):
            column = Column(id=new_id(), board_id=board.id, title=title, position=position, color=color)
            self._columns[column.id] = column
        return board

    async def update_board(self, board_id: str, data: BoardUpdate) -> Board | None:
        board = self._boards.get(board_id)
        if board is None:
            return None
        board = board.model_copy(update=data.changes())
        self._boards[board_id] = board
        return board

    async def delete_board(self, board_id: str) -> bool:
        if board_id not in self._boards:
            return False
        goal_ids = {g.id for g in self._goals.values() if g.board_id == board_id}
        for comment in [c for c in self._comments.values() if c.goal_id in goal_ids]:
            del self._comments[comment.id]
        for goal_id in goal_ids:
            del self._goals[goal_id]
        for column in self._board_columns(board_id):
            del self._columns[column.id]
        del self._boards[board_id]
        logger.info("Deleted board %s with %d goals", board_id, len(goal_ids))
        return True

    # -- columns -------------------------------------------------------------

    async def list_columns(self, board_id: str) -> list[Column]:
        return self._board_columns(board_id)

    async def get_column(self, column_id: str) -> Column | None:
        return self._columns.get(column_id)

    async def create_column(self, data: ColumnCreate) -> Column:
        if data.board_id not in self._boards:
            raise NotFoundError(f"Board not found: {data.board_id}")
        siblings = self._board_columns(data.board_id)
        requested = len(siblings) if data.position is None else data.position
        position = ordering.clamp_position(requested, len(siblings))

        column = Column(
            id=new_id(),
            board_id=data.board_id,
            title=data.title,
            position=position,
            color=data.color,
        )
        positions = ordering.renumber_around(siblings, column.id, position)
        self._reposition(self._columns, ordering.changed_positions(siblings, positions))
        self._columns[column.id] = column
        return column

    async def update_column(self, column_id: str, data: ColumnUpdate) -> Column | None:
        column = self._columns.get(column_id)
        if column is None:
            return None
        column = column.model_copy(update=data.changes())
        self._columns[column_id] = column
        return column

    async def delete_column(self, column_id: str) -> bool:
        column = self._columns.get(column_id)
        if column is None:
            return False
        goal_ids = {g.id for g in self._goals.values() if g.column_id == column_id}
        for comment in [c for c in self._comments.values() if c.goal_id in goal_ids]:
            del self._comments[comment.id]
        for goal_id in goal_ids:
            del self._goals[goal_id]
        del self._columns[column_id]

        siblings = self._board_columns(column.board_id)
        self._reposition(self._columns, ordering.changed_positions(siblings, ordering.compact(siblings)))
        logger.info("Deleted column %s with %d goals", column_id, len(goal_ids))
        return True

    # -- goals ---------------------------------------------------------------

    async def list_goals_by_board(self, board_id: str) -> list[Goal]:
        return ordering.in_order(
            g for g in self._goals.values() if g.board_id == board_id and not g.is_win
        )

    async def list_goals_by_column(self, column_id: str) -> list[Goal]:
        return self._column_goals(column_id)

    async def list_wins(self, board_id: str) -> list[Goal]:
        return sorted(self._board_wins(board_id), key=win_sort_key)

    async def get_goal(self, goal_id: str) -> Goal | None:
        return self._goals.get(goal_id)

    async def create_goal(self, data: GoalCreate) -> Goal:
        if data.board_id not in self._boards:
            raise NotFoundError(f"Board not found: {data.board_id}")
        self._require_column(data.column_id, data.board_id)

        siblings = self._column_goals(data.column_id)
        requested = len(siblings) if data.position is None else data.position
        position = ordering.clamp_position(requested, len(siblings))

        goal = Goal(
            id=new_id(),
            board_id=data.board_id,
            column_id=data.column_id,
            title=data.title,
            description=data.description,
            position=position,
            goal_type=data.goal_type,
            assignee=data.assignee,
            total_subtasks=data.total_subtasks,
            created_at=utcnow(),
        )
        positions = ordering.renumber_around(siblings, goal.id, position)
        self._reposition(self._goals, ordering.changed_positions(siblings, positions))
        self._goals[goal.id] = goal
        return goal

    async def update_goal(self, goal_id: str, data: GoalUpdate) -> Goal | None:
        goal = self._goals.get(goal_id)
        if goal is None:
            return None
        if data.placement_changed():
            goal = self._apply_move(
                goal,
                target_column_id=data.column_id,
                target_position=goal.position if data.position is None else data.position,
                is_win=data.is_win,
            )
        goal = goal.model_copy(update=data.field_changes())
        self._goals[goal_id] = goal
        return goal

    async def move_goal(self, data: GoalMove) -> Goal | None:
        goal = self._goals.get(data.goal_id)
        if goal is None:
            return None
        moved = self._apply_move(goal, data.target_column_id, data.target_position, data.is_win)
        logger.info(
            "Moved goal %s to %s position %d",
            goal.id,
            "wins" if moved.is_win else f"column {moved.column_id}",
            moved.position,
        )
        return moved

    async def delete_goal(self, goal_id: str) -> bool:
        goal = self._goals.get(goal_id)
        if goal is None:
            return False
        siblings = self._members(goal.board_id, ordering.current_placement(goal))
        positions = ordering.compact(siblings, removed_id=goal_id)
        for comment in [c for c in self._comments.values() if c.goal_id == goal_id]:
            del self._comments[comment.id]
        del self._goals[goal_id]
        self._reposition(self._goals, ordering.changed_positions(siblings, positions))
        logger.info("Deleted goal %s", goal_id)
        return True

    # -- comments ------------------------------------------------------------

    async def list_comments(self, goal_id: str) -> list[Comment]:
        return sorted(
            (c for c in self._comments.values() if c.goal_id == goal_id),
            key=lambda c: c.created_at,
        )

    async def create_comment(self, data: CommentCreate) -> Comment:
        if data.goal_id not in self._goals:
            raise NotFoundError(f"Goal not found: {data.goal_id}")
        comment = Comment(
            id=new_id(),
            goal_id=data.goal_id,
            author=data.author,
            content=data.content,
            media_url=data.media_url,
            created_at=utcnow(),
        )
        self._comments[comment.id] = comment
        return comment

    async def delete_comment(self, comment_id: str) -> bool:
        return self._comments.pop(comment_id, None) is not None

    # -- sample data ---------------------------------------------------------

    def _seed(self) -> None:
        now = utcnow()
        self._boards["board1"] = Board(
            id="board1",
            title="Personal Goals Board",
            description="Organize and track your short-term and long-term goals",
            created_at=now,
        )
        for position, (column_id, title, color) in enumerate(
            [("col1", "TODO", "#3B82F6"), ("col2", "DOING", "#8B5CF6"), ("col3", "DONE", "#10B981")]
        ):
            self._columns[column_id] = Column(
                id=column_id, board_id="board1", title=title, position=position, color=color
            )

        samples = [
            ("goal1", "col1", 0, "Learn React Hooks",
             "Master useState, useEffect, and custom hooks for better state management",
             GoalType.short_term, "JD", 2, 5),
            ("goal2", "col1", 1, "Build Portfolio Website",
             "Create a professional portfolio showcasing my projects and skills",
             GoalType.long_term, "SM", 0, 8),
            ("goal3", "col2", 0, "Daily Meditation Practice",
             "Establish a consistent 15-minute morning meditation routine",
             GoalType.short_term, "JD", 7, 21),
            ("goal4", "col3", 0, "Set Up GitHub Repository",
             "Initialize project repository with proper documentation",
             GoalType.short_term, "SM", 3, 3),
        ]
        for goal_id, column_id, position, title, description, goal_type, assignee, done, total in samples:
            self._goals[goal_id] = Goal(
                id=goal_id,
                board_id="board1",
                column_id=column_id,
                title=title,
                description=description,
                position=position,
                goal_type=goal_type,
                assignee=assignee,
                completed_subtasks=done,
                total_subtasks=total,
                created_at=now,
                completed_at=now if done == total else None,
            )
        logger.info("Seeded memory store with sample board board1")
