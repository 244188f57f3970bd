"""
Admin-only reporting endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth import dependencies as auth_dependencies
from core.db import Database, get_db

from . import service

router = APIRouter(
    prefix="/admin",
    dependencies=[Depends(auth_dependencies.require_admin)],
)


@router.get("/sponsors")
async def list_sponsors(db: Database = Depends(get_db)) -> list[dict]:
    """
    Sponsors with their family-member count and names.
    """
    return await service.list_sponsors(db=db)


@router.get("/family-members")
async def list_family_members(db: Database = Depends(get_db)) -> list[dict]:
    """
    Family members with sponsor name/email and an approximate age.
    """
    return await service.list_family_members(db=db)


@router.get("/search")
async def search(
    query: str | None = Query(default=None, max_length=200),
    db: Database = Depends(get_db),
) -> list[dict]:
    return await service.search(query, db=db)
