import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from goalboard.config import settings
from goalboard.deps import build_store
from goalboard.kanban.boards_router import router as boards_router
from goalboard.kanban.errors import InvalidReferenceError, NotFoundError
from goalboard.kanban.goals_router import router as goals_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    app.state.store = await build_store(settings)
    yield
    await app.state.store.close()


app = FastAPI(title="GoalBoard", version="0.1.0", lifespan=lifespan)
app.include_router(boards_router)
app.include_router(goals_router)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(NotFoundError)
async def not_found_error(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidReferenceError)
async def invalid_reference_error(request: Request, exc: InvalidReferenceError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(SQLAlchemyError)
async def storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Storage failure"})


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": {
            "boards": "/api/boards",
            "board_detail": "/api/boards/{id}",
            "columns": "/api/boards/{boardId}/columns",
            "goals": "/api/boards/{boardId}/goals",
            "wins": "/api/boards/{boardId}/wins",
            "move": "/api/goals/move",
            "comments": "/api/goals/{goalId}/comments",
            "users": "/api/users",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
