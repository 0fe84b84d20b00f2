from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import AuthorRole


class PostCreate(BaseModel):
    topic_id: UUID
    author_id: UUID
    author_role: AuthorRole
    content: str = Field(..., min_length=1, max_length=4000)

    class Config:
        use_enum_values = True


class PostUpdate(BaseModel):
    topic_id: Optional[UUID] = None
    author_id: Optional[UUID] = None
    author_role: Optional[AuthorRole] = None
    content: Optional[str] = Field(None, min_length=1, max_length=4000)

    class Config:
        use_enum_values = True


class PostResponse(BaseModel):
    id: UUID
    topic_id: UUID
    author_id: UUID
    author_role: str
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
