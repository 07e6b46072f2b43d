"""SQL store — async SQLAlchemy, one table per entity type.

Every write runs in a single transaction (``sessionmaker.begin()``), so a
cascading delete or a renumber pass either lands whole or not at all.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from goalboard.db import make_engine, make_sessionmaker
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
from goalboard.kanban.store import DEFAULT_COLUMNS, Store, new_id, utcnow
from goalboard.kanban.tables import BoardRow, ColumnRow, CommentRow, GoalRow

logger = logging.getLogger(__name__)


def _to_model(model_cls, row):
    return model_cls(**{name: getattr(row, name) for name in model_cls.model_fields})


def _assign(row, changes: dict[str, Any]) -> None:
    for name, value in changes.items():
        if isinstance(value, GoalType):
            value = value.value
        setattr(row, name, value)


def _reposition(rows: Sequence, positions: dict[str, int]) -> None:
    by_id = {row.id: row for row in rows}
    for row_id, position in positions.items():
        by_id[row_id].position = position


class SqlStore(Store):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions = make_sessionmaker(engine)

    @classmethod
    def from_url(cls, database_url: str) -> SqlStore:
        return cls(make_engine(database_url))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def close(self) -> None:
        await self._engine.dispose()

    # -- queries -------------------------------------------------------------

    @staticmethod
    async def _board_columns(session: AsyncSession, board_id: str) -> list[ColumnRow]:
        result = await session.execute(
            select(ColumnRow).where(ColumnRow.board_id == board_id).order_by(ColumnRow.position)
        )
        return list(result.scalars())

    @staticmethod
    async def _column_goals(session: AsyncSession, column_id: str) -> list[GoalRow]:
        result = await session.execute(
            select(GoalRow)
            .where(GoalRow.column_id == column_id, GoalRow.is_win.is_(False))
            .order_by(GoalRow.position, GoalRow.created_at)
        )
        return list(result.scalars())

    @staticmethod
    async def _board_wins(session: AsyncSession, board_id: str) -> list[GoalRow]:
        result = await session.execute(
            select(GoalRow)
            .where(GoalRow.board_id == board_id, GoalRow.is_win.is_(True))
            .order_by(GoalRow.position, GoalRow.created_at)
        )
        return list(result.scalars())

    async def _members(
        self, session: AsyncSession, board_id: str, placement: ordering.Placement
    ) -> list[GoalRow]:
        if placement.is_win:
            return await self._board_wins(session, board_id)
        return await self._column_goals(session, placement.column_id)

    @staticmethod
    async def _require_column(session: AsyncSession, column_id: str, board_id: str) -> ColumnRow:
        column = await session.get(ColumnRow, column_id)
        if column is None:
            raise NotFoundError(f"Column not found: {column_id}")
        if column.board_id != board_id:
            raise InvalidReferenceError(f"Column {column_id} is not on board {board_id}")
        return column

    async def _apply_move(
        self,
        session: AsyncSession,
        goal: GoalRow,
        target_column_id: str | None,
        target_position: int,
        is_win: bool | None,
    ) -> None:
        target = ordering.resolve_placement(goal, target_column_id, is_win)
        if target.column_id is not None:
            await self._require_column(session, target.column_id, goal.board_id)

        current = ordering.current_placement(goal)
        source = await self._members(session, goal.board_id, current)
        dest = source if target == current else await self._members(session, goal.board_id, target)
        plan = ordering.plan_move(goal, target, target_position, source, dest, utcnow())

        _reposition(source + dest, plan.sibling_positions)
        _assign(goal, plan.goal_changes)

    # -- boards --------------------------------------------------------------

    async def list_boards(self) -> list[Board]:
        async with self._sessions() as session:
            result = await session.execute(select(BoardRow).order_by(BoardRow.created_at))
            return [_to_model(Board, row) for row in result.scalars()]

    async def get_board(self, board_id: str) -> Board | None:
        async with self._sessions() as session:
            row = await session.get(BoardRow, board_id)
            return _to_model(Board, row) if row else None

    async def create_board(self, data: BoardCreate) -> Board:
        async with self._sessions.begin() as session:
            row = BoardRow(id=new_id(), title=data.title, description=data.description, created_at=utcnow())
            session.add(row)
            for position, (title, color) in enumerate(DEFAULT_COLUMNS):
                session.add(
                    ColumnRow(id=new_id(), board_id=row.id, title=title, position=position, color=color)
                )
            return _to_model(Board, row)

    async def update_board(self, board_id: str, data: BoardUpdate) -> Board | None:
        async with self._sessions.begin() as session:
            row = await session.get(BoardRow, board_id)
            if row is None:
                return None
            _assign(row, data.changes())
            return _to_model(Board, row)

    async def delete_board(self, board_id: str) -> bool:
        async with self._sessions.begin() as session:
            row = await session.get(BoardRow, board_id)
            if row is None:
                return False
            goal_ids = select(GoalRow.id).where(GoalRow.board_id == board_id)
            await session.execute(delete(CommentRow).where(CommentRow.goal_id.in_(goal_ids)))
            goals = await session.execute(delete(GoalRow).where(GoalRow.board_id == board_id))
            await session.execute(delete(ColumnRow).where(ColumnRow.board_id == board_id))
            await session.delete(row)
        logger.info("Deleted board %s with %d goals", board_id, goals.rowcount)
        return True

    # -- columns -------------------------------------------------------------

    async def list_columns(self, board_id: str) -> list[Column]:
        async with self._sessions() as session:
            return [_to_model(Column, row) for row in await self._board_columns(session, board_id)]

    async def get_column(self, column_id: str) -> Column | None:
        async with self._sessions() as session:
            row = await session.get(ColumnRow, column_id)
            return _to_model(Column, row) if row else None

    async def create_column(self, data: ColumnCreate) -> Column:
        async with self._sessions.begin() as session:
            if await session.get(BoardRow, data.board_id) is None:
                raise NotFoundError(f"Board not found: {data.board_id}")
            siblings = await self._board_columns(session, data.board_id)
            requested = len(siblings) if data.position is None else data.position
            position = ordering.clamp_position(requested, len(siblings))

            row = ColumnRow(
                id=new_id(),
                board_id=data.board_id,
                title=data.title,
                position=position,
                color=data.color,
            )
            _reposition(siblings, ordering.renumber_around(siblings, row.id, position))
            session.add(row)
            return _to_model(Column, row)

    async def update_column(self, column_id: str, data: ColumnUpdate) -> Column | None:
        async with self._sessions.begin() as session:
            row = await session.get(ColumnRow, column_id)
            if row is None:
                return None
            _assign(row, data.changes())
            return _to_model(Column, row)

    async def delete_column(self, column_id: str) -> bool:
        async with self._sessions.begin() as session:
            row = await session.get(ColumnRow, column_id)
            if row is None:
                return False
            goal_ids = select(GoalRow.id).where(GoalRow.column_id == column_id)
            await session.execute(delete(CommentRow).where(CommentRow.goal_id.in_(goal_ids)))
            goals = await session.execute(delete(GoalRow).where(GoalRow.column_id == column_id))

            siblings = await self._board_columns(session, row.board_id)
            _reposition(siblings, ordering.compact(siblings, removed_id=column_id))
            await session.delete(row)
        logger.info("Deleted column %s with %d goals", column_id, goals.rowcount)
        return True

    # -- goals ---------------------------------------------------------------

    async def list_goals_by_board(self, board_id: str) -> list[Goal]:
        async with self._sessions() as session:
            result = await session.execute(
                select(GoalRow)
                .where(GoalRow.board_id == board_id, GoalRow.is_win.is_(False))
                .order_by(GoalRow.position, GoalRow.created_at)
            )
            return [_to_model(Goal, row) for row in result.scalars()]

    async def list_goals_by_column(self, column_id: str) -> list[Goal]:
        async with self._sessions() as session:
            return [_to_model(Goal, row) for row in await self._column_goals(session, column_id)]

    async def list_wins(self, board_id: str) -> list[Goal]:
        async with self._sessions() as session:
            result = await session.execute(
                select(GoalRow)
                .where(GoalRow.board_id == board_id, GoalRow.is_win.is_(True))
                .order_by(GoalRow.completed_at.desc().nulls_last())
            )
            return [_to_model(Goal, row) for row in result.scalars()]

    async def get_goal(self, goal_id: str) -> Goal | None:
        async with self._sessions() as session:
            row = await session.get(GoalRow, goal_id)
            return _to_model(Goal, row) if row else None

    async def create_goal(self, data: GoalCreate) -> Goal:
        async with self._sessions.begin() as session:
            if await session.get(BoardRow, data.board_id) is None:
                raise NotFoundError(f"Board not found: {data.board_id}")
            await self._require_column(session, data.column_id, data.board_id)

            siblings = await self._column_goals(session, data.column_id)
            requested = len(siblings) if data.position is None else data.position
            position = ordering.clamp_position(requested, len(siblings))

            row = GoalRow(
                id=new_id(),
                board_id=data.board_id,
                column_id=data.column_id,
                title=data.title,
                description=data.description,
                position=position,
                goal_type=data.goal_type.value,
                assignee=data.assignee,
                completed_subtasks=0,
                total_subtasks=data.total_subtasks,
                is_win=False,
                created_at=utcnow(),
                completed_at=None,
            )
            _reposition(siblings, ordering.renumber_around(siblings, row.id, position))
            session.add(row)
            return _to_model(Goal, row)

    async def update_goal(self, goal_id: str, data: GoalUpdate) -> Goal | None:
        async with self._sessions.begin() as session:
            row = await session.get(GoalRow, goal_id)
            if row is None:
                return None
            if data.placement_changed():
                await self._apply_move(
                    session,
                    row,
                    target_column_id=data.column_id,
                    target_position=row.position if data.position is None else data.position,
                    is_win=data.is_win,
                )
            _assign(row, data.field_changes())
            return _to_model(Goal, row)

    async def move_goal(self, data: GoalMove) -> Goal | None:
        async with self._sessions.begin() as session:
            row = await session.get(GoalRow, data.goal_id)
            if row is None:
                return None
            await self._apply_move(session, row, data.target_column_id, data.target_position, data.is_win)
            moved = _to_model(Goal, row)
        logger.info(
            "Moved goal %s to %s position %d",
            moved.id,
            "wins" if moved.is_win else f"column {moved.column_id}",
            moved.position,
        )
        return moved

    async def delete_goal(self, goal_id: str) -> bool:
        async with self._sessions.begin() as session:
            row = await session.get(GoalRow, goal_id)
            if row is None:
                return False
            siblings = await self._members(session, row.board_id, ordering.current_placement(row))
            _reposition(siblings, ordering.compact(siblings, removed_id=goal_id))
            await session.execute(delete(CommentRow).where(CommentRow.goal_id == goal_id))
            await session.delete(row)
        logger.info("Deleted goal %s", goal_id)
        return True

    # -- comments ------------------------------------------------------------

    async def list_comments(self, goal_id: str) -> list[Comment]:
        async with self._sessions() as session:
            result = await session.execute(
                select(CommentRow).where(CommentRow.goal_id == goal_id).order_by(CommentRow.created_at)
            )
            return [_to_model(Comment, row) for row in result.scalars()]

    async def create_comment(self, data: CommentCreate) -> Comment:
        async with self._sessions.begin() as session:
            if await session.get(GoalRow, data.goal_id) is None:
                raise NotFoundError(f"Goal not found: {data.goal_id}")
            row = CommentRow(
                id=new_id(),
                goal_id=data.goal_id,
                author=data.author,
                content=data.content,
                media_url=data.media_url,
                created_at=utcnow(),
            )
            session.add(row)
            return _to_model(Comment, row)

    async def delete_comment(self, comment_id: str) -> bool:
        async with self._sessions.begin() as session:
            result = await session.execute(delete(CommentRow).where(CommentRow.id == comment_id))
            return result.rowcount > 0
