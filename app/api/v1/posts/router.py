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

from .schemas import PostCreate, PostResponse, PostUpdate
from .service import PostService

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


def get_post_service(cache: CacheLayer = Depends(get_cache)) -> PostService:
    return PostService(cache)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def create_post(
    payload: PostCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
    hub: NotificationHub = Depends(get_notification_hub),
) -> PostResponse:
    try:
        post = await service.create(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    background_tasks.add_task(
        hub.send_to_room,
        f"topic:{post.topic_id}",
        Notification(
            type=NotificationType.message,
            title="New post",
            body=post.content[:140],
            link=f"/topics/{post.topic_id}#post-{post.id}",
        ),
    )
    return post


@router.get(
    "",
    response_model=List[PostResponse],
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def list_posts(
    topic_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
) -> List[PostResponse]:
    return await service.list(db, topic_id)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def get_post(
    post_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    try:
        return await service.get(db, post_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def update_post(
    post_id: UUID,
    payload: PostUpdate,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    try:
        return await service.update(db, post_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(AuthorRole.admin, AuthorRole.teacher))],
)
async def delete_post(
    post_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: PostService = Depends(get_post_service),
) -> None:
    try:
        await service.delete(db, post_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
