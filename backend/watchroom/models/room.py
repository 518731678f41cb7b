import uuid
from enum import Enum
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from watchroom.database import Base


class RoomRole(str, Enum):
    ADMIN = "admin"
    VIEWER = "viewer"
    REMOTE = "remote"


class Room(Base):
    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    url: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    code: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    # Ordered user ids; a user may appear more than once
    members: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    # user id -> RoomRole value
    role_map: Mapped[dict[str, str]] = mapped_column(JSON, default=dict, nullable=False)
    # FIFO queue of video ids
    videos: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Every UPDATE is guarded by "WHERE version = <loaded version>"
    __mapper_args__ = {"version_id_col": version}
