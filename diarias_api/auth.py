"""Account registration and sign-in for roster owners."""
import logging
from typing import Optional

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .dependencies import get_db_session, token_payload
from .models import User
from .schemas import Token, UserCreate, UserLogin, UserRead, compute_expiry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

hasher = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


async def find_user(session: AsyncSession, username: str) -> Optional[User]:
    rows = await session.execute(select(User).where(User.username == username))
    return rows.scalar_one_or_none()


def issue_token(user: User) -> Token:
    """Sign an HS256 token for ``user`` valid for the configured lifetime."""
    settings = get_settings()
    expires_at = compute_expiry(settings.access_token_expires_minutes)
    claims = token_payload(user)
    claims["exp"] = int(expires_at.timestamp())
    return Token(
        access_token=jwt.encode(claims, settings.secret_key, algorithm="HS256"),
        expires_at=expires_at,
    )


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(payload: UserCreate, session: AsyncSession = Depends(get_db_session)) -> User:
    """New accounts start with an empty roster."""
    if await find_user(session, payload.username) is not None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Username already exists")

    user = User(
        username=payload.username,
        email=payload.email,
        password_hash=hasher.hash(payload.password),
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info("Registered user '%s' (id=%s)", user.username, user.id)
    return user


@router.post("/login", response_model=Token)
async def login(payload: UserLogin, session: AsyncSession = Depends(get_db_session)) -> Token:
    user = await find_user(session, payload.username)
    if user is None or not user.is_active or not hasher.verify(payload.password, user.password_hash):
        logger.warning("Rejected login for '%s'", payload.username)
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return issue_token(user)
