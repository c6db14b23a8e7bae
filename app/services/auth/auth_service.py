from datetime import datetime, timedelta, timezone
import secrets
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.users.user_models import User, RefreshToken
from app.core.security import verify_password, create_access_token
from app.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, REFRESH_TOKEN_EXPIRE_DAYS
from app.schemas.auth.auth_schemas import LoginData, LoginUser, TokenPair, TokenResponse, MeOut
from app.utils.activity_helpers import emit_activity
from app.constants.activity_codes import ActivityCode
from app.utils.logger import get_logger

logger = get_logger("auth.service")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _issue_tokens(db: AsyncSession, user: User) -> TokenPair:
    """Sign an access token and stage a fresh refresh token row (not committed)."""
    now = datetime.now(timezone.utc)
    refresh_value = secrets.token_urlsafe(48)

    db.add(
        RefreshToken(
            user_id=user.id,
            token=refresh_value,
            expires_at=now + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
        )
    )

    return TokenPair(
        access_token=create_access_token(
            subject=user.username,
            token_version=user.token_version,
            expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        ),
        refresh_token=refresh_value,
    )


async def _usable_refresh_token(db: AsyncSession, value: str) -> Optional[RefreshToken]:
    return await db.scalar(
        select(RefreshToken).where(
            RefreshToken.token == value,
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > datetime.now(timezone.utc),
        )
    )


# =====================================================
# SESSION LIFECYCLE
# =====================================================
async def login_user(db: AsyncSession, username: str, password: str) -> LoginData:
    user = await db.scalar(select(User).where(User.username == username))

    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"username": username})
        raise _unauthorized("Invalid credentials")

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"username": username})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    user.last_login = datetime.now(timezone.utc)
    tokens = _issue_tokens(db, user)

    await emit_activity(db, actor=user, code=ActivityCode.LOGIN)
    await db.commit()

    logger.info("Login successful", extra={"user_id": user.id, "role": user.role})
    return LoginData(
        auth=tokens,
        user=LoginUser(id=user.id, username=user.username, role=user.role),
    )


async def refresh_tokens(db: AsyncSession, refresh_token_value: str) -> TokenResponse:
    """Rotate a refresh token: the presented one is revoked and a new pair issued."""
    token = await _usable_refresh_token(db, refresh_token_value)
    if token is None:
        logger.warning("Rejected refresh token")
        raise _unauthorized("Invalid or expired refresh token")

    user = await db.get(User, token.user_id)
    if user is None or not user.is_active:
        logger.warning("Refresh blocked for inactive user", extra={"user_id": token.user_id})
        raise _unauthorized("User invalid or inactive")

    token.revoked = True
    tokens = _issue_tokens(db, user)
    await db.commit()

    logger.info("Token refreshed", extra={"user_id": user.id})
    return TokenResponse(**tokens.model_dump(), role=user.role)


async def logout_user(db: AsyncSession, user: User) -> None:
    # bumping token_version invalidates every outstanding access token
    user.token_version += 1
    await db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user.id, RefreshToken.revoked.is_(False))
        .values(revoked=True)
    )

    await emit_activity(db, actor=user, code=ActivityCode.LOGOUT)
    await db.commit()

    logger.info("Logout successful", extra={"user_id": user.id})


def current_user_profile(user: User) -> MeOut:
    return MeOut.model_validate(user, from_attributes=True)
