"""
Development-only schema setup endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from core import db as core_db
from core.config import Settings, get_settings
from core.db import Database, get_db

from . import repository

logger = logging.getLogger(__name__)


def require_development(settings: Settings = Depends(get_settings)) -> Settings:
    if settings.is_production:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Schema setup is disabled in production.",
        )
    return settings


router = APIRouter(dependencies=[Depends(require_development)])


@router.get("/createdb")
async def create_database(settings: Settings = Depends(get_settings)) -> dict:
    created = await core_db.create_database_if_missing(settings)
    if created:
        return {"message": "Database created"}
    return {"message": "Database already exists"}


@router.get("/create-sponsors-table")
async def create_sponsors_table(db: Database = Depends(get_db)) -> dict:
    await repository.create_sponsors_table(db)
    logger.info("sponsors table ensured.")
    return {"message": "Sponsors table created or already exists"}


@router.get("/create-family-members-table")
async def create_family_members_table(db: Database = Depends(get_db)) -> dict:
    await repository.create_family_members_table(db)
    logger.info("family_members table ensured.")
    return {"message": "Family members table created or already exists"}
