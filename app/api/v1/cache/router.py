"""Admin view of the process cache."""

from typing import Dict

from fastapi import APIRouter, Depends, status

from app.auth.rbac import require_roles
from app.core.cache import CacheLayer
from app.core.enums import AuthorRole
from app.core.state import get_cache

router = APIRouter(
    prefix="/api/v1/cache",
    tags=["cache"],
    dependencies=[Depends(require_roles(AuthorRole.admin))],
)


@router.get("/stats")
async def cache_stats(cache: CacheLayer = Depends(get_cache)) -> Dict[str, int]:
    return cache.stats()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def flush_cache(cache: CacheLayer = Depends(get_cache)) -> None:
    cache.flush_all()
