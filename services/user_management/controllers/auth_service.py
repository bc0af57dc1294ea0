# services/user_management/controllers/auth_service.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_management.core.identity import clean_registration
from services.user_management.core.policy import Actor, ensure_may_authenticate, permissions
from services.user_management.core.roles import Department, UserRole
from services.user_management.models.users import User
from services.user_management.repository import (
    ensure_identity_free,
    find_live_user_by_user_id,
    get_live_user,
    save_user,
)
from services.user_management.schemas.users import (
    CurrentUserOut,
    LoginRequest,
    LoginResponse,
    RegisterResponse,
    UserOut,
    UserRegister,
)
from shared.auth import create_access_token, get_current_actor, get_password_hash, verify_password
from shared.db import get_db
from shared.errors import AuthenticationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def current_user_out(user: User, actor: Actor) -> CurrentUserOut:
    return CurrentUserOut(
        **UserOut.model_validate(user).model_dump(),
        permissions=permissions(actor),
    )


# --- SELF REGISTRATION (everyone starts PENDING) ---
@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister, db: AsyncSession = Depends(get_db)):
    data = clean_registration(payload.user_id, payload.name, payload.email, payload.password)
    await ensure_identity_free(db, data["user_id"], data["email"])

    user = User(
        user_id=data["user_id"],
        name=data["name"],
        email=data["email"],
        hashed_password=get_password_hash(data["password"]),
        role=UserRole.PENDING,
        department=Department.NONE,
        is_approved=False,
        is_active=True,
        is_deleted=False,
    )
    user = await save_user(db, user)
    logger.info("Registered user %s, awaiting approval", user.user_id)

    return RegisterResponse(
        message="Registration successful. Awaiting admin approval.",
        user=UserOut.model_validate(user),
    )


# --- LOGIN ---
@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await find_live_user_by_user_id(db, payload.user_id.strip())

    if not user or not verify_password(payload.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")

    actor = Actor.from_user(user)
    ensure_may_authenticate(actor)

    access_token = create_access_token({"sub": str(user.id), "role": user.role.value})
    logger.info("User %s logged in", user.user_id)

    return LoginResponse(access_token=access_token, user=current_user_out(user, actor))


# --- CURRENT USER ---
@router.get("/me", response_model=CurrentUserOut)
async def me(actor: Actor = Depends(get_current_actor), db: AsyncSession = Depends(get_db)):
    user = await get_live_user(db, actor.id)
    return current_user_out(user, actor)
