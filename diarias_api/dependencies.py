"""Request-scoped dependencies: database session, caller identity, owned rows."""
from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import get_session
from .models import Employee, User
from .schemas import TokenData

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def token_payload(user: User) -> Dict[str, Any]:
    """Claims identifying ``user``; the caller adds ``exp``."""
    return {
        "username": user.username,
        "user_id": user.id,
        "iat": int(datetime.now(timezone.utc).timestamp()),
    }


def decode_access_token(token: str) -> TokenData:
    claims = jwt.decode(token, get_settings().secret_key, algorithms=["HS256"])
    return TokenData(**claims)


async def user_from_token(token: str, session: AsyncSession) -> User:
    """Resolve an access token to an active user or raise 401.

    Shared by the bearer dependency and the websocket endpoint, which gets
    its token from the query string.
    """
    try:
        claims = decode_access_token(token)
    except jwt.PyJWTError as exc:
        raise _unauthorized("Could not validate credentials") from exc

    rows = await session.execute(
        select(User).where(User.id == claims.user_id, User.username == claims.username)
    )
    user: Optional[User] = rows.scalar_one_or_none()
    if user is None or not user.is_active:
        raise _unauthorized("Inactive or missing user")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Not authenticated")
    return await user_from_token(credentials.credentials, session)


async def get_owned_employee(
    employee_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> Employee:
    """Another user's employee is reported exactly like a missing one."""
    rows = await session.execute(
        select(Employee).where(Employee.id == employee_id, Employee.owner_id == current_user.id)
    )
    employee = rows.scalar_one_or_none()
    if employee is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return employee
