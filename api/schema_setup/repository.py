"""
Idempotent DDL for the two application tables.
"""

from __future__ import annotations

from core.db import Database

SPONSORS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS sponsors (
    id SERIAL PRIMARY KEY,
    google_id VARCHAR(255) UNIQUE,
    name VARCHAR(255),
    email VARCHAR(255) UNIQUE,
    picture TEXT,
    description TEXT,
    is_admin BOOLEAN NOT NULL DEFAULT false,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""

FAMILY_MEMBERS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS family_members (
    id SERIAL PRIMARY KEY,
    sponsor_id INT NOT NULL REFERENCES sponsors(id) ON DELETE CASCADE,
    name VARCHAR(255),
    email VARCHAR(255),
    date_of_birth DATE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""

FAMILY_MEMBERS_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS family_members_sponsor_id_idx
ON family_members (sponsor_id)
"""


async def create_sponsors_table(db: Database) -> None:
    await db.execute(SPONSORS_TABLE_SQL)


async def create_family_members_table(db: Database) -> None:
    await db.execute(FAMILY_MEMBERS_TABLE_SQL)
    await db.execute(FAMILY_MEMBERS_INDEX_SQL)
