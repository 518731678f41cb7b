from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field


class VideoCreate(BaseModel):
    owner_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    url: str = Field(..., min_length=1, max_length=1024)
    duration: int | None = Field(None, ge=0)


class VideoResponse(BaseModel):
    id: UUID
    owner_id: UUID
    name: str
    url: str
    duration: int | None = None
    created_at: datetime

    class Config:
        from_attributes = True
