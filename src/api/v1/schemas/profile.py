"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import Profile, ProfileDraft


class ProfileUpsertRequest(BaseModel):
    """Schema for creating or updating the caller's profile.

    Blank names, blank skills and unknown availability slots are rejected by
    the service with a VALIDATION_ERROR.
    """

    name: str = Field(..., max_length=100)
    location: str | None = Field(None, max_length=255)
    skills_offered: list[str] = Field(default_factory=list, max_length=50)
    skills_wanted: list[str] = Field(default_factory=list, max_length=50)
    availability: list[str] = Field(default_factory=list)
    is_public: bool = True
    profile_picture: str | None = Field(None, max_length=500)

    def to_draft(self) -> ProfileDraft:
        return ProfileDraft(
            name=self.name,
            location=self.location,
            skills_offered=list(self.skills_offered),
            skills_wanted=list(self.skills_wanted),
            availability=list(self.availability),
            is_public=self.is_public,
            profile_picture=self.profile_picture,
        )


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "user_id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Marc Demo",
                "location": "Lisbon",
                "skills_offered": ["JavaScript", "Python"],
                "skills_wanted": ["Photoshop"],
                "availability": ["Weekend Mornings"],
                "is_public": True,
                "profile_picture": None,
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    user_id: UUID
    name: str
    location: str | None = None
    skills_offered: list[str]
    skills_wanted: list[str]
    availability: list[str]
    is_public: bool
    profile_picture: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls.model_validate(profile)


class OwnProfileResponse(ProfileResponse):
    """Profile as seen by its owner or an admin (includes contact email)."""

    email: str | None = None


class ProfileDetailResponse(BaseModel):
    """Schema for a single profile response."""

    data: ProfileResponse


class OwnProfileDetailResponse(BaseModel):
    """Schema for the caller's own profile; ``data`` is null before the first save."""

    data: OwnProfileResponse | None


class ProfileListResponse(BaseModel):
    """Schema for a page of browsable profiles."""

    data: list[ProfileResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class PictureUploadResponse(BaseModel):
    """Schema for a profile picture upload."""

    url: str
