"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.config import Settings, get_settings
from core.db import Database, get_db

from . import dependencies, schemas, service

router = APIRouter(prefix="/api")


@router.post("/auth/google", response_model=schemas.AuthResponse)
async def google_login(
    payload: schemas.GoogleLoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> schemas.AuthResponse:
    return await service.login_with_google(payload, db=db, settings=settings)


@router.get("/protected")
async def protected(session: dict = Depends(dependencies.get_current_session)) -> dict:
    return {"message": "Protected data", "user": session}
