import uuid
from enum import Enum
from datetime import datetime
from sqlalchemy import String, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column
from watchroom.database import Base


class SiteRole(str, Enum):
    """Global permission tier, distinct from a user's role inside a room"""
    ADMIN = "admin"
    BASIC = "basic"
    TESTER = "tester"
    PRIVILEGED = "privileged"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    # Identity provider (Discord) profile
    discord_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    global_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(String(512), nullable=True)
    # Site specific
    session_token: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    site_role: Mapped[SiteRole] = mapped_column(
        SAEnum(SiteRole, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        default=SiteRole.BASIC,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
