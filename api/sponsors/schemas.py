"""
Pydantic schemas for sponsor and family-member endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class CreateSponsorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    description: str | None = None


class CreateFamilyMemberRequest(BaseModel):
    # Only the owner is read from the body up front; the remaining fields
    # stay raw in `model_extra` until the ownership check has passed.
    model_config = ConfigDict(extra="allow")

    sponsor_id: int


class FamilyMemberDetails(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: StrictStr = Field(..., min_length=1, max_length=255)
    email: StrictStr | None = Field(default=None, max_length=255)
    date_of_birth: StrictStr = Field(..., min_length=1)
