"""SQL tables — one per entity type.

board_id / column_id / goal_id are plain indexed reference columns; there is
no foreign-key enforcement, cascades are done by the store.
"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text

from goalboard.db import Base


class BoardRow(Base):
    __tablename__ = "boards"

    id = Column(String(64), primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class ColumnRow(Base):
    __tablename__ = "columns"

    id = Column(String(64), primary_key=True)
    board_id = Column(String(64), index=True, nullable=False)
    title = Column(Text, nullable=False)
    position = Column(Integer, nullable=False)
    color = Column(String(32), nullable=False, default="#3B82F6")


class GoalRow(Base):
    __tablename__ = "goals"

    id = Column(String(64), primary_key=True)
    board_id = Column(String(64), index=True, nullable=False)
    column_id = Column(String(64), index=True, nullable=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    position = Column(Integer, nullable=False)
    goal_type = Column(String(16), nullable=False, default="short-term")
    assignee = Column(Text, nullable=False)
    completed_subtasks = Column(Integer, nullable=False, default=0)
    total_subtasks = Column(Integer, nullable=False, default=0)
    is_win = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)


class CommentRow(Base):
    __tablename__ = "comments"

    id = Column(String(64), primary_key=True)
    goal_id = Column(String(64), index=True, nullable=False)
    author = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    media_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
