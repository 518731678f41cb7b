from uuid import UUID
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from watchroom.models.user import User, SiteRole
from watchroom.schemas.user import DiscordProfile
from watchroom.exceptions import UniquenessViolationException, UserNotFoundException
from watchroom.utils.logging_config import user_logger


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: UUID) -> User | None:
        return await self.db.get(User, user_id)

    async def get_user_by_discord_id(self, discord_id: str) -> User | None:
        result = await self.db.execute(select(User).where(User.discord_id == discord_id))
        return result.scalar_one_or_none()

    async def require_user(self, user_id: UUID) -> User:
        user = await self.get_user(user_id)
        if user is None:
            raise UserNotFoundException(str(user_id))
        return user

    async def register_login(self, profile: DiscordProfile) -> User:
        """Create the user on first login, refresh profile and credentials afterwards"""
        user = await self.get_user_by_discord_id(profile.discord_id)
        created = user is None
        if created:
            user = User(discord_id=profile.discord_id, site_role=SiteRole.BASIC)
            self.db.add(user)

        user.email = profile.email
        user.username = profile.username
        user.global_name = profile.global_name
        user.avatar = profile.avatar
        if profile.refresh_token is not None:
            user.refresh_token = profile.refresh_token
        if profile.session_token is not None:
            user.session_token = profile.session_token

        try:
            await self.db.flush()
        except IntegrityError as exc:
            raise UniquenessViolationException(
                "User", {"email": profile.email, "discord_id": profile.discord_id}
            ) from exc

        user_logger.info(
            "User registered" if created else "User login refreshed",
            extra={"user_id": str(user.id), "discord_id": user.discord_id}
        )
        return user

    async def set_site_role(self, user_id: UUID, role: SiteRole) -> User:
        user = await self.require_user(user_id)
        user.site_role = role
        await self.db.flush()
        user_logger.info(
            "Site role changed",
            extra={"user_id": str(user_id), "site_role": role.value}
        )
        return user
