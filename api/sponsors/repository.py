"""
Sponsor and family-member persistence (raw SQL).
"""

from __future__ import annotations

from datetime import date

from core.db import Database


async def insert_sponsor(
    db: Database,
    *,
    name: str,
    email: str,
    description: str | None,
) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO sponsors (name, email, description)
        VALUES ($1, $2, $3)
        RETURNING id
        """,
        name,
        email,
        description,
    )
    if row is None:
        raise RuntimeError("Failed to insert sponsor.")
    return int(row["id"])


async def insert_family_member(
    db: Database,
    *,
    sponsor_id: int,
    name: str,
    email: str | None,
    date_of_birth: date,
) -> int:
    row = await db.fetch_one(
        """
        INSERT INTO family_members (sponsor_id, name, email, date_of_birth)
        VALUES ($1, $2, $3, $4)
        RETURNING id
        """,
        sponsor_id,
        name,
        email,
        date_of_birth,
    )
    if row is None:
        raise RuntimeError("Failed to insert family member.")
    return int(row["id"])
