# =============================================================================
# app/routers/profiles.py - Profile Endpoints
# =============================================================================
# Lists, selects, creates, edits and deletes the profiles of the signed-in
# account's family.
#
# Authentication is resolved optionally so the service layer applies one
# policy: reads return empty results to anonymous callers, writes reply 401.
# =============================================================================

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status

from app.auth import AuthUser, get_current_user_optional
from core.models.profile import (
    Profile,
    ProfileCreate,
    ProfileCreated,
    ProfileList,
    ProfileUpdate,
)
from core.services.account_service import AccountService
from core.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()

OptionalUser = Annotated[Optional[AuthUser], Depends(get_current_user_optional)]
ProfileId = Annotated[UUID, Path(description="Profile UUID")]


def _account_id(user: Optional[AuthUser]) -> Optional[UUID]:
    return user.id if user else None


@router.get("", response_model=ProfileList)
async def list_profiles(user: OptionalUser) -> ProfileList:
    """
    List the profiles of the caller's family.

    Empty when unauthenticated or while account setup is still running.
    """
    return ProfileList(profiles=ProfileService.list_profiles(_account_id(user)))


@router.get("/current", response_model=Optional[Profile])
async def get_current_profile(user: OptionalUser) -> Optional[Profile]:
    """Get the caller's selected profile, or null."""
    return ProfileService.get_current_profile(_account_id(user))


@router.delete("/current", status_code=status.HTTP_204_NO_CONTENT)
async def clear_current_profile(user: OptionalUser) -> None:
    """
    Clear the selected profile so the profile picker shows again.

    Raises:
        401: Not authenticated
    """
    AccountService.clear_profile_selection(_account_id(user))


@router.post("", response_model=ProfileCreated, status_code=status.HTTP_201_CREATED)
async def create_profile(request: ProfileCreate, user: OptionalUser) -> ProfileCreated:
    """
    Add a profile to the caller's family.

    Raises:
        401: Not authenticated
        409: Account has no family yet
        422: Blank/too long name, color outside the palette
    """
    profile_id = ProfileService.create_profile(
        _account_id(user), name=request.name, color=request.color
    )
    return ProfileCreated(profile_id=profile_id)


@router.post("/{profile_id}/select")
async def select_profile(profile_id: ProfileId, user: OptionalUser) -> dict:
    """
    Make a profile the caller's current selection.

    Raises:
        401: Not authenticated
        404: Profile not found in your family
        409: Account has no family yet
    """
    ProfileService.select_profile(_account_id(user), profile_id)
    return {"success": True, "profile_id": str(profile_id)}


@router.patch("/{profile_id}")
async def update_profile(
    profile_id: ProfileId,
    request: ProfileUpdate,
    user: OptionalUser,
) -> dict:
    """
    Rename or recolor a profile. Omitted fields are left unchanged.

    Raises:
        401: Not authenticated
        404: Profile not found in your family
        409: Account has no family yet
    """
    ProfileService.update_profile(
        _account_id(user), profile_id, name=request.name, color=request.color
    )
    return {"success": True, "profile_id": str(profile_id)}


@router.delete("/{profile_id}")
async def delete_profile(profile_id: ProfileId, user: OptionalUser) -> dict:
    """
    Delete a profile. If it was selected, another profile is selected instead.

    Raises:
        401: Not authenticated
        404: Profile not found in your family
        409: Last profile in the family, or account has no family yet
    """
    ProfileService.delete_profile(_account_id(user), profile_id)
    return {"success": True, "profile_id": str(profile_id)}
