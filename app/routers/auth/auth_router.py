from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.auth.auth_schemas import (
    LoginRequest,
    RefreshRequest,
    LoginData,
    TokenResponse,
    MeOut,
)
from app.services.auth.auth_service import (
    login_user,
    refresh_tokens,
    logout_user,
    current_user_profile,
)
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=APIResponse[LoginData])
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt", extra={"username": payload.username})

    tokens = await login_user(db, payload.username, payload.password)
    return success_response("Login successful", tokens)


@router.post("/refresh", response_model=APIResponse[TokenResponse])
async def refresh(
    payload: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Token refresh attempt")

    tokens = await refresh_tokens(db, payload.refresh_token)
    return success_response("Token refreshed", tokens)


@router.post("/logout", response_model=APIResponse)
async def logout(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    logger.info("Logout request", extra={"user_id": current_user.id})

    await logout_user(db, current_user)
    return success_response("Logged out successfully")


@router.get("/me", response_model=APIResponse[MeOut])
async def me(current_user=Depends(get_current_user)):
    return success_response("Current user fetched", current_user_profile(current_user))
