from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from watchroom.models.video import Video
from watchroom.schemas.video import VideoCreate
from watchroom.services.user_service import UserService
from watchroom.utils.logging_config import user_logger


class VideoService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def register_video(self, video_data: VideoCreate) -> Video:
        await UserService(self.db).require_user(video_data.owner_id)
        video = Video(
            owner_id=video_data.owner_id,
            name=video_data.name,
            url=video_data.url,
            duration=video_data.duration,
        )
        self.db.add(video)
        await self.db.flush()

        user_logger.info(
            "Video registered",
            extra={"video_id": str(video.id), "owner_id": str(video.owner_id)}
        )
        return video

    async def list_user_videos(self, owner_id: UUID) -> list[Video]:
        """Videos registered by a user, oldest first"""
        result = await self.db.execute(
            select(Video)
            .where(Video.owner_id == owner_id)
            .order_by(Video.created_at, Video.id)
        )
        return list(result.scalars().all())
