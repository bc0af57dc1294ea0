# shared/auth.py
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from shared.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, BCRYPT_ROUNDS
from shared.db import get_db
from shared.errors import NotFoundError
from services.user_management.core.policy import Actor, ensure_may_authenticate
from services.user_management.repository import get_live_user

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

def verify_password(plain_password, hashed_password):
    if not plain_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def decode_token(token: str):
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

def _unauthorized(detail: str):
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

async def get_current_actor(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    """
    Resolve the bearer token to the acting user.

    Disabled accounts, and unapproved ones other than super admins, are
    turned away here, before any route-level policy check runs.
    """
    payload = decode_token(token)
    if not payload:
        raise _unauthorized("Not authorized, token invalid")

    try:
        user_pk = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized("Not authorized, token invalid")

    try:
        user = await get_live_user(db, user_pk)
    except NotFoundError:
        raise _unauthorized("User not found")

    actor = Actor.from_user(user)
    ensure_may_authenticate(actor)
    return actor
