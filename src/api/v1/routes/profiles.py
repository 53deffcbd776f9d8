"""Profile API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from api.dependencies.auth import CurrentSession
from api.v1.dependencies import get_directory_service, get_profile_service
from api.v1.schemas.common import ERROR_RESPONSES
from api.v1.schemas.profile import (
    OwnProfileDetailResponse,
    OwnProfileResponse,
    PictureUploadResponse,
    ProfileDetailResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileUpsertRequest,
)
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.directory_service import DirectoryService
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=ProfileListResponse,
    summary="Browse profiles",
    responses={
        200: {"description": "Public profiles other than the caller's"},
        401: {"description": "Missing or invalid token"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def browse_profiles(
    request: Request,
    session: CurrentSession,
    q: str | None = Query(None, max_length=100, description="Search name, location or skills"),
    availability: str | None = Query(None, description="Part of an availability slot, or 'all'"),
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    directory: DirectoryService = Depends(get_directory_service),
) -> ProfileListResponse:
    """
    List public profiles, excluding the caller, sorted by name.

    - **q**: case-insensitive substring over name, location and skills
    - **availability**: case-insensitive substring of a slot label, e.g. `weekend`;
      `all` or empty disables the filter
    """
    page = await directory.browse(session, term=q, slot=availability, limit=limit, offset=offset)
    return ProfileListResponse(
        data=[ProfileResponse.from_entity(p) for p in page.profiles],
        meta={"total": page.total, "limit": page.limit, "offset": page.offset},
    )


@router.get(
    "/me",
    response_model=OwnProfileDetailResponse,
    summary="Get my profile",
    responses={
        200: {"description": "The caller's profile, or null if not created yet"},
        401: {"description": "Missing or invalid token"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    session: CurrentSession,
    service: ProfileService = Depends(get_profile_service),
) -> OwnProfileDetailResponse:
    """Get the caller's profile."""
    profile = await service.get_my_profile(session)
    return OwnProfileDetailResponse(
        data=OwnProfileResponse.model_validate(profile) if profile else None
    )


@router.put(
    "/me",
    response_model=OwnProfileDetailResponse,
    summary="Create or update my profile",
    responses={
        200: {"description": "Profile saved"},
        400: {"description": "Validation error"},
        401: {"description": "Missing or invalid token"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def save_my_profile(
    request: Request,
    body: ProfileUpsertRequest,
    session: CurrentSession,
    service: ProfileService = Depends(get_profile_service),
) -> OwnProfileDetailResponse:
    """Create the caller's profile, or replace its fields if it exists."""
    profile = await service.save_profile(session, body.to_draft())
    return OwnProfileDetailResponse(data=OwnProfileResponse.model_validate(profile))


@router.post(
    "/me/picture",
    response_model=PictureUploadResponse,
    summary="Upload a profile picture",
    responses={
        200: {"description": "Picture stored; the URL is recorded on an existing profile"},
        400: {"description": "Not an image, or larger than 5MB"},
        401: {"description": "Missing or invalid token"},
        503: {"description": "Storage unavailable"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def upload_picture(
    request: Request,
    session: CurrentSession,
    file: UploadFile = File(...),
    service: ProfileService = Depends(get_profile_service),
) -> PictureUploadResponse:
    """Upload an image and return its public URL."""
    service.check_picture_size(file.size)
    # At most one byte past the limit.
    data = await file.read(service.max_picture_bytes + 1)
    url = await service.upload_profile_picture(
        session,
        filename=file.filename or "",
        content_type=file.content_type,
        data=data,
    )
    return PictureUploadResponse(url=url)


@router.get(
    "/{user_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile",
    responses={
        200: {"description": "Profile details"},
        401: {"description": "Missing or invalid token"},
        404: {"description": "Profile not found or private"},
    },
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user_id: UUID,
    session: CurrentSession,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get a single profile. Private profiles are visible to their owner and admins only."""
    profile = await service.get_profile(user_id, session)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))
