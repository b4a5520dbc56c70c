# lucent_shop/dependencies.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Iterator
from contextlib import contextmanager

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt

from lucent_shop.core.config import settings
from lucent_shop.core.exceptions import AuthenticationError, AuthorizationError
from lucent_shop.crud import user as crud_user
from lucent_shop.db.session import SessionLocal
from lucent_shop.models.user import User

logger = logging.getLogger(__name__)

# --- Auth schemes ---
bearer_scheme = HTTPBearer(auto_error=False)

# --- DB session ---
def get_db_session_instance() -> Session:
    """Creates a new DB session."""
    return SessionLocal()

def get_db() -> Iterator[Session]:
    """
    Main FastAPI dependency for a DB session.
    A generator so `Depends` closes the session after the request.
    """
    db = get_db_session_instance()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def get_db_context() -> Iterator[Session]:
    """
    Context manager for a DB session outside request handling (event log writes, scripts).
    """
    db = get_db_session_instance()
    try:
        yield db
    finally:
        db.close()

# --- Tokens ---

ACCESS_TOKEN_TYPE = "access"

def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    """
    Issues a bearer token the way the auth provider does.
    Used by tests and operator tooling.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode({"sub": str(user_id), "type": ACCESS_TOKEN_TYPE, "exp": expire}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# --- Authentication and authorization ---

def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    REQUIRED dependency.
    A missing or invalid token ends the request with 401.
    """
    if not credentials:
        raise AuthenticationError()

    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        if payload.get("type") != ACCESS_TOKEN_TYPE or payload.get("purpose") is not None:
            logger.warning(f"Rejected non-access token (type={payload.get('type')}, purpose={payload.get('purpose')}).")
            raise AuthenticationError()
        user_id: str = payload.get("sub")
        if user_id is None:
            logger.warning("Token payload is missing 'sub' (user_id).")
            raise AuthenticationError()
    except JWTError as e:
        logger.warning(f"JWT Error during token decoding: {e}")
        raise AuthenticationError()

    try:
        user = crud_user.get_user_by_id(db, int(user_id))
    except ValueError:
        logger.warning(f"Token subject '{user_id}' is not a user id.")
        raise AuthenticationError()
    if user is None:
        logger.warning(f"User with ID {user_id} from token not found in DB.")
        raise AuthenticationError()
    request.state.user = user
    logger.debug(f"Authenticated user ID: {user.id}")
    return user


def is_admin(user: User) -> bool:
    return user.email.lower() in settings.ADMIN_EMAILS


def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Guards the admin endpoints.
    The user's e-mail has to be in ADMIN_EMAILS.
    """
    if not is_admin(current_user):
        logger.warning(f"Permission denied for user ID {current_user.id}: not in ADMIN_EMAILS.")
        raise AuthorizationError()

    logger.info(f"Admin access GRANTED for user ID {current_user.id}.")
    return current_user


def get_client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None
