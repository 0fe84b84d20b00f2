from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.core.enums import AuthorRole


class CommentCreate(BaseModel):
    post_id: UUID
    author_id: UUID
    author_role: AuthorRole
    content: str = Field(..., min_length=1, max_length=4000)

    class Config:
        use_enum_values = True


class CommentUpdate(BaseModel):
    post_id: Optional[UUID] = None
    author_id: Optional[UUID] = None
    author_role: Optional[AuthorRole] = None
    content: Optional[str] = Field(None, min_length=1, max_length=4000)

    class Config:
        use_enum_values = True


class CommentResponse(BaseModel):
    id: UUID
    post_id: UUID
    author_id: UUID
    author_role: str
    content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
