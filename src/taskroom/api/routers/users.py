"""User profile endpoints."""

from fastapi import APIRouter

from ..dependencies import CurrentUserId, DBSession
from ..schemas import UserProfileUpdate, UserResponse
from ..services import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="Get current user profile",
)
async def get_profile(
    db: DBSession,
    user_id: CurrentUserId,
) -> UserResponse:
    """Get the profile of the authenticated user.

    Args:
        db: Database session
        user_id: Current user ID

    Returns:
        Stored profile
    """
    service = UserService(db)
    return await service.get_profile(user_id)


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Create or update current user profile",
)
async def sync_profile(
    request: UserProfileUpdate,
    db: DBSession,
    user_id: CurrentUserId,
) -> UserResponse:
    """Store the authenticated user's email and display name.

    Must be called once after sign-in so the user can create projects
    and be found by email.

    Args:
        request: Profile data
        db: Database session
        user_id: Current user ID

    Returns:
        Stored profile
    """
    service = UserService(db)
    return await service.sync_profile(user_id, request)
