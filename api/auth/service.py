"""
Auth business logic: Google sign-in exchanged for a session token.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from core.config import Settings
from core.db import Database

from . import google, repository, schemas, security

logger = logging.getLogger(__name__)


async def _resolve_sponsor_id(
    db: Database,
    *,
    google_id: str,
    name: str,
    email: str,
    picture: str | None,
    is_admin: bool,
) -> int:
    # Sponsors added through POST /api/sponsors own the email but have no
    # Google id yet; the first sign-in claims that row.
    linked_id = await repository.link_sponsor_by_email(
        db,
        google_id=google_id,
        name=name,
        email=email,
        picture=picture,
        is_admin=is_admin,
    )
    if linked_id is not None:
        logger.info("Linked Google id to existing sponsor %s.", linked_id)
        return linked_id

    try:
        row = await repository.upsert_google_sponsor(
            db,
            google_id=google_id,
            name=name,
            email=email,
            picture=picture,
            is_admin=is_admin,
        )
    except asyncpg.UniqueViolationError as exc:
        # google_id conflicts are absorbed by ON CONFLICT; only email is left.
        logger.warning("Email %s already belongs to another Google account.", email)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already linked to another account.",
        ) from exc
    if row.get("inserted"):
        return int(row["id"])

    # Existing sponsor: look the id up by Google id.
    sponsor_id = await repository.get_sponsor_id_by_google_id(db, google_id)
    if sponsor_id is None:
        raise RuntimeError(f"Sponsor for Google id {google_id} vanished after upsert.")
    return sponsor_id


async def login_with_google(
    payload: schemas.GoogleLoginRequest,
    *,
    db: Database,
    settings: Settings,
) -> schemas.AuthResponse:
    token = (payload.token or "").strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Google token is required.",
        )

    try:
        id_info = await google.verify_id_token(token, client_id=settings.google_client_id)
    except google.GoogleTokenError as exc:
        logger.warning("Google token verification failed: %s", exc)
        detail = "Authentication failed."
        if not settings.is_production:
            detail = f"Authentication failed: {exc}"
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail) from exc

    google_id = str(id_info["sub"])
    email = str(id_info["email"])
    name = str(id_info.get("name") or email)
    picture = id_info.get("picture")
    is_admin = security.is_admin_email(email, settings)

    sponsor_id = await _resolve_sponsor_id(
        db,
        google_id=google_id,
        name=name,
        email=email,
        picture=picture,
        is_admin=is_admin,
    )
    logger.info("Sponsor %s signed in (admin=%s).", sponsor_id, is_admin)

    session_token = security.build_session_token(
        google_id=google_id,
        email=email,
        name=name,
        sponsor_id=sponsor_id,
        is_admin=is_admin,
        settings=settings,
    )
    user = schemas.SessionUser(
        google_id=google_id,
        email=email,
        name=name,
        picture=picture,
        sponsor_id=sponsor_id,
        is_admin=is_admin,
    )
    return schemas.AuthResponse(
        token=session_token,
        sponsor_id=sponsor_id,
        is_admin=is_admin,
        user=user,
    )
