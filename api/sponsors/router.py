"""
Sponsor and family-member API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from core.db import Database, get_db

from . import schemas, service

router = APIRouter(prefix="/api")


@router.post("/sponsors")
async def create_sponsor(
    request: schemas.CreateSponsorRequest,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_session),
) -> dict:
    return await service.create_sponsor(request, db=db)


@router.post("/family-members")
async def create_family_member(
    request: schemas.CreateFamilyMemberRequest,
    db: Database = Depends(get_db),
    session: dict = Depends(auth_dependencies.get_current_session),
) -> dict:
    return await service.create_family_member(request, session=session, db=db)
