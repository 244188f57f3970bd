"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class GoogleLoginRequest(BaseModel):
    # Google Identity Services posts the ID token as `credential`.
    token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("token", "credential"),
    )


class SessionUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    google_id: str = Field(..., serialization_alias="googleId")
    email: str
    name: str
    picture: str | None = None
    sponsor_id: int = Field(..., serialization_alias="sponsorId")
    is_admin: bool = Field(..., serialization_alias="isAdmin")


class AuthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    sponsor_id: int = Field(..., serialization_alias="sponsorId")
    is_admin: bool = Field(..., serialization_alias="isAdmin")
    user: SessionUser
