"""
Admin reporting queries (raw SQL, read only).
"""

from __future__ import annotations

from core.db import Database

SEARCH_LIMIT = 50


async def list_sponsors(db: Database) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT s.id, s.google_id, s.name, s.email, s.picture, s.description,
               s.is_admin, s.created_at,
               COUNT(fm.id) AS family_member_count,
               STRING_AGG(fm.name, ', ') AS family_member_names
        FROM sponsors s
        LEFT JOIN family_members fm ON fm.sponsor_id = s.id
        GROUP BY s.id
        ORDER BY s.id
        """
    )


async def list_family_members(db: Database) -> list[dict]:
    # Age is days / 365, not calendar aware.
    return await db.fetch_all(
        """
        SELECT fm.id, fm.sponsor_id, fm.name, fm.email, fm.date_of_birth, fm.created_at,
               s.name AS sponsor_name,
               s.email AS sponsor_email,
               FLOOR((CURRENT_DATE - fm.date_of_birth) / 365.0)::int AS age
        FROM family_members fm
        JOIN sponsors s ON s.id = fm.sponsor_id
        ORDER BY fm.id
        """
    )


async def search(db: Database, query: str, *, limit: int = SEARCH_LIMIT) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT 'sponsor' AS type, id, name, email
        FROM sponsors
        WHERE name ILIKE $1 OR email ILIKE $1
        UNION ALL
        SELECT 'family_member' AS type, id, name, email
        FROM family_members
        WHERE name ILIKE $1 OR email ILIKE $1
        LIMIT $2
        """,
        f"%{query}%",
        limit,
    )
