"""
Session token helpers.
"""

from __future__ import annotations

import time
from typing import Any

import jwt

from core.config import Settings


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def is_admin_email(email: str, settings: Settings) -> bool:
    # Exact match, no case folding.
    return bool(email) and email in settings.admin_emails


def build_session_token(
    *,
    google_id: str,
    email: str,
    name: str,
    sponsor_id: int,
    is_admin: bool,
    settings: Settings,
) -> str:
    issued_at = now_epoch_s()
    payload = {
        "sub": google_id,
        "googleId": google_id,
        "email": email,
        "name": name,
        "sponsorId": sponsor_id,
        "isAdmin": is_admin,
        "iat": issued_at,
        "exp": issued_at + settings.session_ttl_seconds,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str, settings: Settings) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Session token is empty.")

    try:
        payload = jwt.decode(
            raw,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid or expired token.") from exc

    if not isinstance(payload.get("sponsorId"), int):
        raise AuthSecurityError("Token carries no sponsor id.")
    return payload
