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

from .schemas import CommentCreate, CommentResponse, CommentUpdate
from .service import CommentService

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


def get_comment_service(cache: CacheLayer = Depends(get_cache)) -> CommentService:
    return CommentService(cache)


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def create_comment(
    payload: CommentCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    service: CommentService = Depends(get_comment_service),
    hub: NotificationHub = Depends(get_notification_hub),
) -> CommentResponse:
    try:
        comment = await service.create(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    background_tasks.add_task(
        hub.send_to_room,
        f"post:{comment.post_id}",
        Notification(
            type=NotificationType.message,
            title="New comment",
            body=comment.content[:140],
            link=f"/posts/{comment.post_id}#comment-{comment.id}",
        ),
    )
    return comment


@router.get(
    "",
    response_model=List[CommentResponse],
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def list_comments(
    post_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    service: CommentService = Depends(get_comment_service),
) -> List[CommentResponse]:
    return await service.list(db, post_id)


@router.get(
    "/{comment_id}",
    response_model=CommentResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def get_comment(
    comment_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    try:
        return await service.get(db, comment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{comment_id}",
    response_model=CommentResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def update_comment(
    comment_id: UUID,
    payload: CommentUpdate,
    db: AsyncSession = Depends(get_db),
    service: CommentService = Depends(get_comment_service),
) -> CommentResponse:
    try:
        return await service.update(db, comment_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(AuthorRole.admin, AuthorRole.teacher))],
)
async def delete_comment(
    comment_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: CommentService = Depends(get_comment_service),
) -> None:
    try:
        await service.delete(db, comment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
