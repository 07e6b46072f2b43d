"""Store construction and the FastAPI dependency that hands it to routes."""

from __future__ import annotations

import logging

from fastapi import Request

from goalboard.config import Settings
from goalboard.db import create_all
from goalboard.kanban.memory_store import MemoryStore
from goalboard.kanban.sql_store import SqlStore
from goalboard.kanban.store import Store

logger = logging.getLogger(__name__)


async def build_store(config: Settings) -> Store:
    if config.storage_backend == "memory":
        logger.info("Using in-memory store (seed=%s)", config.seed_sample_data)
        return MemoryStore(seed=config.seed_sample_data)

    if config.storage_backend == "sql":
        store = SqlStore.from_url(config.database_url)
        if config.create_tables:
            await create_all(store.engine)
        logger.info("Using SQL store")
        return store

    raise ValueError(f"Unknown storage backend: {config.storage_backend}")


def get_store(request: Request) -> Store:
    return request.app.state.store
