"""Bearer token authentication.

Tokens are HS256 JWTs whose ``sub`` claim is the user id. Issuing tokens
for real logins happens in the accounts service; ``create_access_token``
exists for seeding and tests.
"""
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException, Security, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.orm import Session

from unimarket.config import get_settings
from unimarket.database import get_db
from unimarket.middleware.logging import get_logger
from unimarket.models.user import User

settings = get_settings()
logger = get_logger()

# Bearer token header
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, expires_minutes: Optional[int] = None) -> str:
    """
    Create a signed bearer token for a user.

    Args:
        user_id: Id of the user the token authenticates
        expires_minutes: Lifetime override (defaults to settings)

    Returns:
        Encoded JWT string
    """
    lifetime = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    now = datetime.utcnow()
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """
    Verify a bearer token and return the user id it carries.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning("auth_token_rejected", reason=str(e))
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(
            status_code=401,
            detail="Invalid token subject",
            headers={"WWW-Authenticate": "Bearer"}
        )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to validate the bearer token and load the calling user.

    Usage:
        @router.get("/protected")
        def protected_route(user: User = Depends(get_current_user)):
            return {"user_id": user.id}

    Raises:
        HTTPException: 401 if the token is missing or invalid,
                       404 if the token's user no longer exists
    """
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"}
        )

    user_id = decode_access_token(credentials.credentials)

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user
