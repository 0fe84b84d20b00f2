from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentUser
from app.auth.security import decode_access_token
from app.core.author_resolver import resolve_author
from app.core.enums import AuthorRole
from app.db.session import get_db


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


async def authenticate_token(db: AsyncSession, token: str) -> Optional[CurrentUser]:
    """Return the person a token belongs to, or None if the token or person is invalid."""
    try:
        payload = decode_access_token(token)
    except JWTError:
        return None

    user_id_str = payload.get("sub")
    role_name = payload.get("role")
    if not user_id_str or not role_name:
        return None

    try:
        user_id = UUID(user_id_str)
        role = AuthorRole(role_name)
    except ValueError:
        return None

    # The person must still exist in the partition named by the token
    if not await resolve_author(db, user_id, role):
        return None
    return CurrentUser(id=user_id, role=role)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the authenticated person from the access token."""
    user = await authenticate_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
