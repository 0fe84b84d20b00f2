from uuid import UUID

from pydantic import BaseModel

from app.core.enums import AuthorRole


class CurrentUser(BaseModel):
    """Authenticated person: an id inside the table selected by role."""

    id: UUID
    role: AuthorRole
