"""Swap request API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentSession
from api.v1.dependencies import get_swap_request_service
from api.v1.schemas.common import ERROR_RESPONSES
from api.v1.schemas.swap_request import (
    CreateSwapRequestRequest,
    SwapRequestDetailResponse,
    SwapRequestListResponse,
    SwapRequestResponse,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.entities.swap_request import SwapRequestStatus
from domain.services.swap_request_service import SwapRequestService

router = APIRouter(
    prefix="/swap-requests", tags=["swap-requests"], responses=ERROR_RESPONSES
)


@router.post(
    "",
    response_model=SwapRequestDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a swap request",
    responses={
        201: {"description": "Request created and recipient notified"},
        400: {"description": "Cannot send a request to yourself"},
        404: {"description": "Recipient profile not found"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def create_swap_request(
    request: Request,
    body: CreateSwapRequestRequest,
    session: CurrentSession,
    service: SwapRequestService = Depends(get_swap_request_service),
) -> SwapRequestDetailResponse:
    """Send a pending request to another user. A blank message gets the default greeting."""
    swap = await service.create_request(session, body.to_user_id, body.message)
    return SwapRequestDetailResponse(data=SwapRequestResponse.from_entity(swap))


@router.get(
    "",
    response_model=SwapRequestListResponse,
    summary="List my swap requests",
    responses={
        200: {"description": "Sent and received requests, newest first"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def list_swap_requests(
    request: Request,
    session: CurrentSession,
    status_filter: SwapRequestStatus | None = Query(None, alias="status"),
    service: SwapRequestService = Depends(get_swap_request_service),
) -> SwapRequestListResponse:
    """List requests the caller sent and received."""
    sent, received = await service.list_for(session.user_id, status=status_filter)
    return SwapRequestListResponse(
        sent=[SwapRequestResponse.from_entity(r) for r in sent],
        received=[SwapRequestResponse.from_entity(r) for r in received],
        meta={"sent": len(sent), "received": len(received)},
    )


@router.get(
    "/{request_id}",
    response_model=SwapRequestDetailResponse,
    summary="Get a swap request",
    responses={
        200: {"description": "Request details"},
        404: {"description": "Request not found"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_swap_request(
    request: Request,
    request_id: UUID,
    session: CurrentSession,
    service: SwapRequestService = Depends(get_swap_request_service),
) -> SwapRequestDetailResponse:
    """Get a request the caller participates in."""
    swap = await service.get_request(request_id, session)
    return SwapRequestDetailResponse(data=SwapRequestResponse.from_entity(swap))


@router.post(
    "/{request_id}/accept",
    response_model=SwapRequestDetailResponse,
    summary="Accept a swap request",
    responses={
        200: {"description": "Request accepted and sender notified"},
        403: {"description": "Only the recipient may answer"},
        404: {"description": "Request not found"},
        409: {"description": "Request is no longer pending"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def accept_swap_request(
    request: Request,
    request_id: UUID,
    session: CurrentSession,
    service: SwapRequestService = Depends(get_swap_request_service),
) -> SwapRequestDetailResponse:
    """Accept a pending request addressed to the caller."""
    swap = await service.accept_request(request_id, session)
    return SwapRequestDetailResponse(data=SwapRequestResponse.from_entity(swap))


@router.post(
    "/{request_id}/reject",
    response_model=SwapRequestDetailResponse,
    summary="Reject a swap request",
    responses={
        200: {"description": "Request rejected and sender notified"},
        403: {"description": "Only the recipient may answer"},
        404: {"description": "Request not found"},
        409: {"description": "Request is no longer pending"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def reject_swap_request(
    request: Request,
    request_id: UUID,
    session: CurrentSession,
    service: SwapRequestService = Depends(get_swap_request_service),
) -> SwapRequestDetailResponse:
    """Reject a pending request addressed to the caller."""
    swap = await service.reject_request(request_id, session)
    return SwapRequestDetailResponse(data=SwapRequestResponse.from_entity(swap))


@router.delete(
    "/{request_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Withdraw a swap request",
    responses={
        204: {"description": "Request deleted"},
        403: {"description": "Only the sender may withdraw"},
        404: {"description": "Request not found"},
        409: {"description": "Request has already been answered"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def delete_swap_request(
    request: Request,
    request_id: UUID,
    session: CurrentSession,
    service: SwapRequestService = Depends(get_swap_request_service),
) -> None:
    """Withdraw a pending request the caller sent."""
    await service.delete_request(request_id, session)
