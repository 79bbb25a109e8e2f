"""Read-only routes over the data loaded at startup."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from sqlalchemy import text

from dbinit.database import get_engine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


@router.get("/health")
async def health() -> dict:
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))
    return {"status": "ok"}


@router.get("/customers")
async def list_customers() -> list[dict]:
    async with get_engine().connect() as conn:
        result = await conn.execute(
            text("SELECT id, first_name, last_name FROM customer ORDER BY id")
        )
        return [dict(row) for row in result.mappings()]
