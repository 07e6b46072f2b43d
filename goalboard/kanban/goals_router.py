"""Goal HTTP router — goals, wins, moves & comments."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from goalboard.auth import verify_api_key
from goalboard.deps import get_store
from goalboard.kanban.models import (
    Comment,
    CommentCreate,
    Goal,
    GoalCreate,
    GoalMove,
    GoalUpdate,
)
from goalboard.kanban.store import Store

router = APIRouter(prefix="/api", tags=["goals"])


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


@router.get("/boards/{board_id}/goals", response_model=list[Goal])
async def board_goals(
    board_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> list[Goal]:
    return await store.list_goals_by_board(board_id)


@router.get("/columns/{column_id}/goals", response_model=list[Goal])
async def column_goals(
    column_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> list[Goal]:
    return await store.list_goals_by_column(column_id)


@router.get("/boards/{board_id}/wins", response_model=list[Goal])
async def board_wins(
    board_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> list[Goal]:
    """Wins, most recently completed first."""
    return await store.list_wins(board_id)


# ---------------------------------------------------------------------------
# /api/goals
# ---------------------------------------------------------------------------


@router.post("/goals", response_model=Goal, status_code=201)
async def goal_create(
    body: GoalCreate,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Goal:
    return await store.create_goal(body)


@router.post("/goals/move", response_model=Goal)
async def goal_move(
    body: GoalMove,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Goal:
    """Drop a goal at a position in a column, or promote it to the wins."""
    goal = await store.move_goal(body)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.patch("/goals/{goal_id}", response_model=Goal)
async def goal_update(
    goal_id: str,
    body: GoalUpdate,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Goal:
    goal = await store.update_goal(goal_id, body)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.delete("/goals/{goal_id}", status_code=204)
async def goal_delete(
    goal_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Response:
    if not await store.delete_goal(goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# /api/comments
# ---------------------------------------------------------------------------


@router.get("/goals/{goal_id}/comments", response_model=list[Comment])
async def goal_comments(
    goal_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> list[Comment]:
    return await store.list_comments(goal_id)


@router.post("/comments", response_model=Comment, status_code=201)
async def comment_create(
    body: CommentCreate,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Comment:
    return await store.create_comment(body)


@router.delete("/comments/{comment_id}", status_code=204)
async def comment_delete(
    comment_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Response:
    if not await store.delete_comment(comment_id):
        raise HTTPException(status_code=404, detail="Comment not found")
    return Response(status_code=204)
