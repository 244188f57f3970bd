"""
Auth persistence helpers.
"""

from __future__ import annotations

from core.db import Database


async def link_sponsor_by_email(
    db: Database,
    *,
    google_id: str,
    name: str,
    email: str,
    picture: str | None,
    is_admin: bool,
) -> int | None:
    """
    Attach a Google id to a sponsor that was created without one.
    """
    row = await db.fetch_one(
        """
        UPDATE sponsors
        SET google_id = $1,
            name = $2,
            picture = $4,
            is_admin = $5
        WHERE email = $3
          AND google_id IS NULL
        RETURNING id
        """,
        google_id,
        name,
        email,
        picture,
        is_admin,
    )
    return int(row["id"]) if row is not None else None


async def upsert_google_sponsor(
    db: Database,
    *,
    google_id: str,
    name: str,
    email: str,
    picture: str | None,
    is_admin: bool,
) -> dict:
    # xmax = 0 only for a freshly inserted row version.
    row = await db.fetch_one(
        """
        INSERT INTO sponsors (google_id, name, email, picture, is_admin)
        VALUES ($1, $2, $3, $4, $5)
        ON CONFLICT (google_id) DO UPDATE
        SET name = EXCLUDED.name,
            picture = EXCLUDED.picture,
            is_admin = EXCLUDED.is_admin
        RETURNING id, (xmax = 0) AS inserted
        """,
        google_id,
        name,
        email,
        picture,
        is_admin,
    )
    if row is None:
        raise RuntimeError("Failed to upsert sponsor.")
    return row


async def get_sponsor_id_by_google_id(db: Database, google_id: str) -> int | None:
    row = await db.fetch_one(
        """
        SELECT id
        FROM sponsors
        WHERE google_id = $1
        """,
        google_id,
    )
    return int(row["id"]) if row is not None else None
