"""
Sponsor / family-member business logic.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from core.db import Database

from . import repository, schemas

logger = logging.getLogger(__name__)


def can_manage_sponsor(session: dict, sponsor_id: int) -> bool:
    if session.get("isAdmin") is True:
        return True
    return session.get("sponsorId") == sponsor_id


def parse_family_member_details(
    payload: schemas.CreateFamilyMemberRequest,
) -> schemas.FamilyMemberDetails:
    try:
        return schemas.FamilyMemberDetails.model_validate(payload.model_extra or {})
    except ValidationError as exc:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
        ) from exc


def parse_date_of_birth(raw: str | None) -> date:
    value = (raw or "").strip()
    if not value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_of_birth is required.",
        )
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_of_birth must be a date in YYYY-MM-DD format.",
        ) from exc


async def create_sponsor(payload: schemas.CreateSponsorRequest, *, db: Database) -> dict:
    sponsor_id = await repository.insert_sponsor(
        db,
        name=payload.name.strip(),
        email=payload.email.strip(),
        description=payload.description,
    )
    logger.info("Sponsor %s created.", sponsor_id)
    return {"message": "Sponsor added", "sponsorId": sponsor_id}


async def create_family_member(
    payload: schemas.CreateFamilyMemberRequest,
    *,
    session: dict,
    db: Database,
) -> dict:
    if not can_manage_sponsor(session, payload.sponsor_id):
        logger.warning(
            "Sponsor %s tried to add a family member for sponsor %s.",
            session.get("sponsorId"),
            payload.sponsor_id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to add family members for this sponsor.",
        )

    details = parse_family_member_details(payload)
    date_of_birth = parse_date_of_birth(details.date_of_birth)

    member_id = await repository.insert_family_member(
        db,
        sponsor_id=payload.sponsor_id,
        name=details.name,
        email=details.email or None,
        date_of_birth=date_of_birth,
    )
    return {"message": "Family member added", "memberId": member_id}
