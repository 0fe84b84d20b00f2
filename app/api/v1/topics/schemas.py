from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import AuthorRole


class TopicCreate(BaseModel):
    forum_id: UUID
    author_id: UUID
    author_role: AuthorRole
    title: str = Field(..., min_length=3, max_length=255)
    content: str = Field(..., min_length=10, max_length=4000)

    class Config:
        use_enum_values = True


class TopicUpdate(BaseModel):
    """author_id and author_role are re-validated only when supplied together."""

    forum_id: Optional[UUID] = None
    author_id: Optional[UUID] = None
    author_role: Optional[AuthorRole] = None
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    content: Optional[str] = Field(None, min_length=10, max_length=4000)
    is_pinned: Optional[bool] = None
    is_locked: Optional[bool] = None

    class Config:
        use_enum_values = True


class TopicResponse(BaseModel):
    id: UUID
    forum_id: UUID
    author_id: UUID
    author_role: str
    title: str
    content: str
    is_pinned: bool
    is_locked: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
