from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import ALL_ROLES, require_roles
from app.core.cache import CacheLayer
from app.core.enums import AuthorRole, NotificationType
from app.core.exceptions import ServiceError
from app.core.state import get_cache, get_notification_hub
from app.db.session import get_db
from app.realtime.notifications import Notification, NotificationHub

from .schemas import TopicCreate, TopicResponse, TopicUpdate
from .service import TopicService

router = APIRouter(prefix="/api/v1/topics", tags=["topics"])


def get_topic_service(cache: CacheLayer = Depends(get_cache)) -> TopicService:
    return TopicService(cache)


@router.post(
    "",
    response_model=TopicResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def create_topic(
    payload: TopicCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    service: TopicService = Depends(get_topic_service),
    hub: NotificationHub = Depends(get_notification_hub),
) -> TopicResponse:
    try:
        topic = await service.create(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    background_tasks.add_task(
        hub.send_to_room,
        f"forum:{topic.forum_id}",
        Notification(
            type=NotificationType.message,
            title="New topic",
            body=topic.title,
            link=f"/forums/{topic.forum_id}/topics/{topic.id}",
        ),
    )
    return topic


@router.get(
    "",
    response_model=List[TopicResponse],
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def list_topics(
    forum_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    service: TopicService = Depends(get_topic_service),
) -> List[TopicResponse]:
    return await service.list(db, forum_id)


@router.get(
    "/{topic_id}",
    response_model=TopicResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def get_topic(
    topic_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: TopicService = Depends(get_topic_service),
) -> TopicResponse:
    try:
        return await service.get(db, topic_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{topic_id}",
    response_model=TopicResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def update_topic(
    topic_id: UUID,
    payload: TopicUpdate,
    db: AsyncSession = Depends(get_db),
    service: TopicService = Depends(get_topic_service),
) -> TopicResponse:
    try:
        return await service.update(db, topic_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{topic_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(AuthorRole.admin, AuthorRole.teacher))],
)
async def delete_topic(
    topic_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: TopicService = Depends(get_topic_service),
) -> None:
    try:
        await service.delete(db, topic_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
