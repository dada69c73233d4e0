# backend/app/api/v1/auth.py
from fastapi import APIRouter, HTTPException, Depends
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import select

from backend.app.core.logger import logger
from backend.app.core.security import (
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from backend.app.db.models import User
from backend.app.db.session import get_session
from backend.app.schemas.auth import AuthData, AuthResponse, LoginRequest, RegisterRequest
from backend.app.schemas.users import UserOut

router = APIRouter(tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        data=AuthData(
            token=create_access_token(user.id),
            user=UserOut.model_validate(user),
        )
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(payload: RegisterRequest, session: AsyncSession = Depends(get_session)):
    """
    Register a new user account and return a bearer token for it.
    """
    email = payload.email.lower()

    try:
        result = await session.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            raise HTTPException(status_code=400, detail="User already exists with this email")

        user = User(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=email,
            password_hash=get_password_hash(payload.password),
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"❌ Error during registration: {e}")
        await session.rollback()
        raise HTTPException(status_code=500, detail="Server error during registration")

    logger.info(f"✅ Registered user: {user.id} ({user.email})")
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, session: AsyncSession = Depends(get_session)):
    """
    Authenticate user by email and password.
    """
    email = payload.email.lower()

    try:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
    except Exception as e:
        logger.exception(f"❌ Error during login: {e}")
        raise HTTPException(status_code=500, detail="Server error during login")

    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning(f"Failed login attempt for: {email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info(f"✅ User {user.id} logged in")
    return _auth_response(user)


@router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": {"user": UserOut.model_validate(current_user).to_json()}}
