"""User profile service."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskroom.db.repository import UserRepository

from ..exceptions import ConflictError, NotFoundError
from ..schemas import UserProfileUpdate, UserResponse

logger = structlog.get_logger()


class UserService:
    """Keeps the local user directory in step with the identity provider.

    Collaborator invitations resolve emails against this directory.
    """

    def __init__(self, db_session: AsyncSession) -> None:
        """Initialize user service.

        Args:
            db_session: Database session
        """
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def get_profile(self, user_id: str) -> UserResponse:
        """Get the caller's profile.

        Raises:
            NotFoundError: If the profile was never synced
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return UserResponse.model_validate(user)

    async def sync_profile(self, user_id: str, request: UserProfileUpdate) -> UserResponse:
        """Create or update the caller's profile.

        Args:
            user_id: Authenticated subject
            request: Email and display name

        Returns:
            Stored profile

        Raises:
            ConflictError: If another user already uses the email
        """
        email = str(request.email).strip().lower()
        owner = await self.user_repo.get_by_email(email)
        if owner is not None and owner.id != user_id:
            raise ConflictError("User", email, detail="Email already registered")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            user = await self.user_repo.create(id=user_id, email=email, name=request.name)
            logger.info("user_registered", user_id=user_id)
        else:
            await self.user_repo.update(user, email=email, name=request.name)
            logger.info("user_profile_updated", user_id=user_id)
        await self.db.commit()

        return UserResponse.model_validate(user)
