"""Forum service. Forums are containers for topics and are never deleted here."""

from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheKeys
from app.core.entity_service import EntityService
from app.core.exceptions import ServiceError
from app.core.models import Forum

from .schemas import ForumResponse


class ForumService(EntityService):
    model = Forum
    response_model = ForumResponse
    label = "Forum"
    namespace = CacheKeys.FORUMS
    order_by = Forum.name.asc()
    nullable_fields = frozenset({"description"})

    async def delete(self, db: AsyncSession, row_id: UUID) -> None:
        raise ServiceError("Forums cannot be deleted", status.HTTP_405_METHOD_NOT_ALLOWED)
