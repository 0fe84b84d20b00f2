from fastapi import Depends, HTTPException, status

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import AuthorRole

ALL_ROLES = (AuthorRole.admin, AuthorRole.teacher, AuthorRole.parent, AuthorRole.student)


def require_roles(*roles: AuthorRole):
    """
    Dependency factory restricting a route to a subset of person roles.

    Example:
        Depends(require_roles(AuthorRole.admin, AuthorRole.parent))
    """
    allowed = frozenset(roles)

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _checker
