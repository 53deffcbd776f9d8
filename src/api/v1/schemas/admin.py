"""Pydantic schemas for Admin API."""

from typing import Any

from pydantic import BaseModel, Field

from api.v1.schemas.profile import OwnProfileResponse
from api.v1.schemas.swap_request import SwapRequestResponse


class StatsResponse(BaseModel):
    """Headline platform counts."""

    total_users: int
    total_requests: int
    public_profiles: int


class AdminProfileListResponse(BaseModel):
    """All profiles, public and private."""

    data: list[OwnProfileResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class AdminSwapRequestListResponse(BaseModel):
    """All swap requests."""

    data: list[SwapRequestResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
