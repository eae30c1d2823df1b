"""
Security utilities for authentication and authorization
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
import logging

from app.config import settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.schemas.user import UserRecord
from app.storage.base import StorageBackend
from app.storage.selector import get_storage

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Missing tokens are reported as NO_TOKEN rather than by the scheme itself
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)


class SecurityManager:
    """
    Password hashing and JWT handling
    """

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(
        subject: str,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a JWT access token for a user id
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))

        to_encode = {
            "sub": str(subject),
            "exp": expire,
            "iat": now,
        }
        return jwt.encode(
            to_encode,
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode and verify a JWT token
        """
        try:
            return jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM]
            )
        except ExpiredSignatureError:
            raise AuthenticationError("Token expired, please log in again", code="TOKEN_EXPIRED")
        except JWTError as e:
            logger.warning(f"JWT decode error: {e}")
            raise AuthenticationError("Not authorized, token failed", code="INVALID_TOKEN")


# Create global security manager
security_manager = SecurityManager()

verify_password = security_manager.verify_password
get_password_hash = security_manager.hash_password
create_access_token = security_manager.create_access_token


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    storage: StorageBackend = Depends(get_storage)
) -> UserRecord:
    """
    Resolve the bearer token to a stored user
    """
    if not token:
        raise AuthenticationError("Not authorized, no token", code="NO_TOKEN")

    payload = security_manager.decode_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Not authorized, token failed", code="INVALID_TOKEN")

    user = await storage.users.find_by_id(user_id)
    if user is None:
        raise AuthenticationError("User no longer exists", code="TOKEN_INVALID")

    return user


async def require_organizer(current_user: UserRecord = Depends(get_current_user)) -> UserRecord:
    """
    Require organizer role for endpoint
    """
    if not current_user.is_organizer:
        raise AuthorizationError("Organizer access required")
    return current_user
