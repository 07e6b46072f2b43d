"""Board HTTP router — boards, columns & users."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from goalboard.auth import verify_api_key
from goalboard.deps import get_store
from goalboard.kanban.models import (
    Board,
    BoardCreate,
    BoardUpdate,
    Column,
    ColumnCreate,
    ColumnUpdate,
    User,
)
from goalboard.kanban.store import Store
from goalboard.kanban.users import list_users

router = APIRouter(prefix="/api", tags=["boards"])


# ---------------------------------------------------------------------------
# /api/boards
# ---------------------------------------------------------------------------


@router.get("/boards", response_model=list[Board])
async def boards_list(
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> list[Board]:
    return await store.list_boards()


@router.get("/boards/{board_id}", response_model=Board)
async def board_detail(
    board_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Board:
    board = await store.get_board(board_id)
    if board is None:
        raise HTTPException(status_code=404, detail="Board not found")
    return board


@router.post("/boards", response_model=Board, status_code=201)
async def board_create(
    body: BoardCreate,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Board:
    return await store.create_board(body)


@router.patch("/boards/{board_id}", response_model=Board)
async def board_update(
    board_id: str,
    body: BoardUpdate,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Board:
    board = await store.update_board(board_id, body)
    if board is None:
        raise HTTPException(status_code=404, detail="Board not found")
    return board


@router.delete("/boards/{board_id}", status_code=204)
async def board_delete(
    board_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Response:
    if not await store.delete_board(board_id):
        raise HTTPException(status_code=404, detail="Board not found")
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# /api/columns
# ---------------------------------------------------------------------------


@router.get("/boards/{board_id}/columns", response_model=list[Column])
async def columns_list(
    board_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> list[Column]:
    return await store.list_columns(board_id)


@router.post("/columns", response_model=Column, status_code=201)
async def column_create(
    body: ColumnCreate,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Column:
    return await store.create_column(body)


@router.patch("/columns/{column_id}", response_model=Column)
async def column_update(
    column_id: str,
    body: ColumnUpdate,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Column:
    column = await store.update_column(column_id, body)
    if column is None:
        raise HTTPException(status_code=404, detail="Column not found")
    return column


@router.delete("/columns/{column_id}", status_code=204)
async def column_delete(
    column_id: str,
    store: Store = Depends(get_store),
    _: str = Depends(verify_api_key),
) -> Response:
    if not await store.delete_column(column_id):
        raise HTTPException(status_code=404, detail="Column not found")
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# /api/users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=list[User])
async def users_list(
    _: str = Depends(verify_api_key),
) -> list[User]:
    return list_users()
