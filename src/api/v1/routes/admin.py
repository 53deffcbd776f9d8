"""Admin API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import AdminSession
from api.v1.dependencies import get_admin_service
from api.v1.schemas.admin import (
    AdminProfileListResponse,
    AdminSwapRequestListResponse,
    StatsResponse,
)
from api.v1.schemas.common import ERROR_RESPONSES, ErrorResponse
from api.v1.schemas.profile import OwnProfileResponse
from api.v1.schemas.swap_request import SwapRequestResponse
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.admin_service import AdminService

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={
        **ERROR_RESPONSES,
        403: {"model": ErrorResponse, "description": "Admin capability required"},
    },
)


@router.get("/stats", response_model=StatsResponse, summary="Platform statistics")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_stats(
    request: Request,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> StatsResponse:
    """Count users, requests and public profiles."""
    stats = await service.get_stats(session)
    return StatsResponse(
        total_users=stats.total_users,
        total_requests=stats.total_requests,
        public_profiles=stats.public_profiles,
    )


@router.get("/profiles", response_model=AdminProfileListResponse, summary="List all profiles")
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_profiles(
    request: Request,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> AdminProfileListResponse:
    """List every profile, public and private."""
    profiles = await service.list_profiles(session)
    data = [OwnProfileResponse.model_validate(p) for p in profiles]
    return AdminProfileListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/swap-requests",
    response_model=AdminSwapRequestListResponse,
    summary="List all swap requests",
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_swap_requests(
    request: Request,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> AdminSwapRequestListResponse:
    """List every swap request, newest first."""
    requests = await service.list_requests(session)
    data = [SwapRequestResponse.from_entity(r) for r in requests]
    return AdminSwapRequestListResponse(data=data, meta={"total": len(data)})


@router.delete(
    "/swap-requests/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete any swap request",
    responses={404: {"description": "Request not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_swap_request(
    request: Request,
    request_id: UUID,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> None:
    """Delete a swap request regardless of status."""
    await service.delete_request(session, request_id)


@router.delete(
    "/profiles/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a profile",
    responses={404: {"description": "Profile not found"}},
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_profile(
    request: Request,
    user_id: UUID,
    session: AdminSession,
    service: AdminService = Depends(get_admin_service),
) -> None:
    """Delete a profile together with every request it sent or received."""
    await service.delete_profile(session, user_id)
