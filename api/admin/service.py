"""
Admin reporting logic.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from core.db import Database

from . import repository

MIN_QUERY_LENGTH = 2


def validate_search_query(raw: str | None) -> str:
    # Length counts the query exactly as sent, whitespace included.
    query = raw or ""
    if len(query) < MIN_QUERY_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"query must be at least {MIN_QUERY_LENGTH} characters.",
        )
    return query


async def list_sponsors(*, db: Database) -> list[dict]:
    rows = await repository.list_sponsors(db)
    return [
        {
            **row,
            "family_member_count": int(row.get("family_member_count") or 0),
        }
        for row in rows
    ]


async def list_family_members(*, db: Database) -> list[dict]:
    return await repository.list_family_members(db)


async def search(raw_query: str | None, *, db: Database) -> list[dict]:
    query = validate_search_query(raw_query)
    return await repository.search(db, query)
