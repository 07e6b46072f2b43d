"""Dense position bookkeeping for columns, goals and wins.

Every ordered set (the columns of a board, the goals of a column, the wins of
a board) keeps positions 0..n-1 with no gaps and no duplicates. Functions here
are pure: they take objects exposing ``id`` and ``position`` and return the
positions to write, so both stores apply exactly the same renumbering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Protocol

from goalboard.kanban.errors import InvalidReferenceError


class Positioned(Protocol):
    id: str
    position: int


def in_order(items: Iterable[Positioned]) -> list[Positioned]:
    """Ascending position; ties keep their incoming order."""
    return sorted(items, key=lambda item: item.position)


def clamp_position(target: int, sibling_count: int) -> int:
    return max(0, min(target, sibling_count))


def renumber_around(
    siblings: Iterable[Positioned],
    moved_id: str,
    target_position: int,
) -> dict[str, int]:
    """Assign consecutive positions to siblings, leaving ``target_position`` free.

    Members are walked in ascending position order and the moved item is
    skipped wherever it currently sits. When the running slot reaches the
    target, one extra slot is skipped so the moved item can take it.
    """
    positions: dict[str, int] = {}
    slot = 0
    for item in in_order(siblings):
        if item.id == moved_id:
            continue
        if slot == target_position:
            slot += 1
        positions[item.id] = slot
        slot += 1
    return positions


def compact(siblings: Iterable[Positioned], removed_id: str | None = None) -> dict[str, int]:
    """Close the gap left by ``removed_id`` (or any other gaps)."""
    remaining = [item for item in in_order(siblings) if item.id != removed_id]
    return {item.id: index for index, item in enumerate(remaining)}


def changed_positions(items: Iterable[Positioned], positions: dict[str, int]) -> dict[str, int]:
    return {
        item.id: positions[item.id]
        for item in items
        if item.id in positions and item.position != positions[item.id]
    }


# ---------------------------------------------------------------------------
# Goal moves
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Placement:
    """Which ordered set a goal belongs to: one column, or the board's wins."""

    column_id: str | None
    is_win: bool


class MovableGoal(Positioned, Protocol):
    column_id: str | None
    is_win: bool


def current_placement(goal: MovableGoal) -> Placement:
    return Placement(column_id=goal.column_id, is_win=goal.is_win)


def resolve_placement(
    goal: MovableGoal,
    target_column_id: str | None,
    is_win: bool | None,
) -> Placement:
    """Work out the destination set of a move.

    ``is_win=True`` always lands in the wins. Naming a column, or passing
    ``is_win=False``, lands in a column; a win leaving the wins must name one.
    Otherwise the goal stays in the set it is in.
    """
    if is_win:
        return Placement(column_id=None, is_win=True)
    if is_win is False or target_column_id is not None:
        column_id = target_column_id if target_column_id is not None else goal.column_id
        if column_id is None:
            raise InvalidReferenceError("A goal leaving the wins needs a target column")
        return Placement(column_id=column_id, is_win=False)
    return current_placement(goal)


@dataclass
class MovePlan:
    goal_changes: dict[str, Any]
    sibling_positions: dict[str, int] = field(default_factory=dict)


def plan_move(
    goal: MovableGoal,
    target: Placement,
    target_position: int,
    source_siblings: list[Positioned],
    dest_siblings: list[Positioned],
    now: datetime,
) -> MovePlan:
    """Compute every field and position write for one goal move.

    ``source_siblings`` are the members of the goal's current set and
    ``dest_siblings`` the members of the target set; for a move inside one set
    pass the same list twice. The source set is compacted when the goal
    leaves it, and the destination set is renumbered around the new slot.
    """
    others = [item for item in dest_siblings if item.id != goal.id]
    position = clamp_position(target_position, len(others))

    positions = renumber_around(others, goal.id, position)
    if target != current_placement(goal):
        positions.update(compact(source_siblings, removed_id=goal.id))

    changes: dict[str, Any] = {
        "position": position,
        "column_id": target.column_id,
        "is_win": target.is_win,
    }
    if target.is_win and not goal.is_win:
        changes["completed_at"] = now
    elif goal.is_win and not target.is_win:
        changes["completed_at"] = None

    touched = list(source_siblings) + others
    return MovePlan(goal_changes=changes, sibling_positions=changed_positions(touched, positions))
