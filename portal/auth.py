"""
Portal identity - JWT tokens, password hashing, current-user dependency.

The authenticated user is handed to routers explicitly through
get_current_user; the pricing core only ever sees the user id.

Libraries: python-jose[cryptography] for JWT, passlib[bcrypt] for passwords.
"""

import hashlib
import logging
import uuid
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from . import models

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
security = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _get_jwt_secret() -> str:
    secret = settings.JWT_SECRET
    if not secret:
        logger.error("JWT_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="JWT_SECRET not configured - set it in environment variables",
        )
    return secret


def _encode(user_id: int, token_type: str, expires_in: timedelta, **extra) -> str:
    payload = {
        "sub": str(user_id),
        "exp": datetime.utcnow() + expires_in,
        "type": token_type,
        **extra,
    }
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: int) -> str:
    return _encode(user_id, "access", timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES))


def create_refresh_token(user_id: int) -> str:
    """Long-lived token. The raw value goes to the client; only its hash is stored."""
    return _encode(
        user_id,
        "refresh",
        timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS),
        jti=str(uuid.uuid4()),
    )


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def decode_token(token: str) -> dict:
    """Decode and validate a JWT. Raises HTTPException on failure."""
    try:
        return jwt.decode(token, _get_jwt_secret(), algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def store_refresh_token(db: Session, user_id: int, token: str) -> models.AuthToken:
    db_token = models.AuthToken(
        user_id=user_id,
        token_hash=hash_token(token),
        token_type="refresh",
        expires_at=datetime.utcnow() + timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS),
    )
    db.add(db_token)
    db.commit()
    return db_token


def redeem_refresh_token(db: Session, token: str) -> models.User:
    """
    Trade a refresh token for its user. Refresh tokens are single use:
    the stored row is deleted, and the caller issues a fresh pair.
    """
    payload = decode_token(token)
    if payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type - expected refresh token",
        )

    db_token = db.query(models.AuthToken).filter(
        models.AuthToken.token_hash == hash_token(token),
        models.AuthToken.token_type == "refresh",
    ).first()
    if not db_token:
        logger.warning("Refresh attempted with unknown or revoked token for user %s", payload.get("sub"))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token not found - it may have been revoked",
        )

    user = db_token.user
    expired = db_token.expires_at < datetime.utcnow()
    db.delete(db_token)
    db.commit()

    if expired:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token expired",
        )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def revoke_refresh_tokens(db: Session, user_id: int) -> int:
    """Delete every stored refresh token for the user. Returns how many were revoked."""
    revoked = db.query(models.AuthToken).filter(models.AuthToken.user_id == user_id).delete()
    db.commit()
    logger.info("Revoked %d refresh token(s) for user %s", revoked, user_id)
    return revoked


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> models.User:
    """FastAPI dependency - validates the bearer access token, returns the User."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    payload = decode_token(credentials.credentials)
    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type - use an access token",
        )

    user_id = payload.get("sub")
    user = None
    if user_id and user_id.isdigit():
        user = db.query(models.User).filter(models.User.id == int(user_id)).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user
