from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import ALL_ROLES, require_roles
from app.core.cache import CacheLayer
from app.core.enums import AuthorRole
from app.core.exceptions import ServiceError
from app.core.state import get_cache
from app.db.session import get_db

from .schemas import ForumCreate, ForumResponse, ForumUpdate
from .service import ForumService

router = APIRouter(prefix="/api/v1/forums", tags=["forums"])


def get_forum_service(cache: CacheLayer = Depends(get_cache)) -> ForumService:
    return ForumService(cache)


@router.post(
    "",
    response_model=ForumResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(AuthorRole.admin))],
)
async def create_forum(
    payload: ForumCreate,
    db: AsyncSession = Depends(get_db),
    service: ForumService = Depends(get_forum_service),
) -> ForumResponse:
    try:
        return await service.create(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[ForumResponse],
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def list_forums(
    db: AsyncSession = Depends(get_db),
    service: ForumService = Depends(get_forum_service),
) -> List[ForumResponse]:
    return await service.list(db)


@router.get(
    "/{forum_id}",
    response_model=ForumResponse,
    dependencies=[Depends(require_roles(*ALL_ROLES))],
)
async def get_forum(
    forum_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: ForumService = Depends(get_forum_service),
) -> ForumResponse:
    try:
        return await service.get(db, forum_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{forum_id}",
    response_model=ForumResponse,
    dependencies=[Depends(require_roles(AuthorRole.admin))],
)
async def update_forum(
    forum_id: UUID,
    payload: ForumUpdate,
    db: AsyncSession = Depends(get_db),
    service: ForumService = Depends(get_forum_service),
) -> ForumResponse:
    try:
        return await service.update(db, forum_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
