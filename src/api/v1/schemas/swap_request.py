"""Pydantic schemas for SwapRequest API."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.swap_request import SwapRequest


class CreateSwapRequestRequest(BaseModel):
    """Schema for sending a swap request."""

    to_user_id: UUID
    message: str | None = Field(None, max_length=1000)


class SwapRequestResponse(BaseModel):
    """Schema for SwapRequest response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "from_user_id": "456e4567-e89b-12d3-a456-426614174000",
                "from_user_name": "Marc Demo",
                "to_user_id": "789e4567-e89b-12d3-a456-426614174000",
                "to_user_name": "Joe Wills",
                "message": "Hi Joe Wills! I'd love to connect for a skill exchange.",
                "status": "pending",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    from_user_id: UUID
    from_user_name: str
    to_user_id: UUID
    to_user_name: str
    message: str
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, request: SwapRequest) -> "SwapRequestResponse":
        return cls(
            id=request.id,
            from_user_id=request.from_user_id,
            from_user_name=request.from_user_name,
            to_user_id=request.to_user_id,
            to_user_name=request.to_user_name,
            message=request.message,
            status=request.status.value,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )


class SwapRequestDetailResponse(BaseModel):
    """Schema for a single swap request response."""

    data: SwapRequestResponse


class SwapRequestListResponse(BaseModel):
    """Schema for the caller's requests, split by direction."""

    sent: list[SwapRequestResponse]
    received: list[SwapRequestResponse]
    meta: dict[str, Any] = Field(default_factory=dict)
