"""Auth router - current user and back-office account registration."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from firebase_admin import auth
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentmaster.core.database import get_db
from rentmaster.core.security import (
    AuthenticatedUser,
    client_ip,
    get_current_user,
    get_firebase_app,
    require_admin,
)
from rentmaster.models.user import User
from rentmaster.schemas.auth import CurrentUserResponse, UserRegister, UserResponse
from rentmaster.services.audit import AuditService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get current authenticated user info."""
    return CurrentUserResponse(
        uid=current_user.uid,
        db_user_id=current_user.db_user_id,
        email=current_user.email,
        full_name=current_user.full_name,
        role=current_user.role,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    data: UserRegister,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Create a Firebase account and the matching local user (admin only)."""
    existing = await db.execute(select(User.id).where(User.email == data.email))
    if existing.first() is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    try:
        firebase_user = auth.create_user(
            email=data.email,
            password=data.password,
            display_name=data.full_name,
            app=get_firebase_app(),
        )
    except auth.EmailAlreadyExistsError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    user = User(
        firebase_uid=firebase_user.uid,
        email=data.email,
        full_name=data.full_name,
        role=data.role,
    )
    try:
        db.add(user)
        await db.flush()
        await AuditService(db).log_create("users", user, current_user, client_ip(request))
        await db.commit()
    except Exception:
        await db.rollback()
        # Keep Firebase and the users table in step
        auth.delete_user(firebase_user.uid, app=get_firebase_app())
        raise

    logger.info("User registered: %s (%s) by %s", user.email, user.role.value, current_user.email)
    return UserResponse.model_validate(user)
