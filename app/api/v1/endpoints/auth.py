"""
Authentication and profile endpoints
"""

from typing import Any, List
import logging
from fastapi import APIRouter, Depends, status

from app.core.exceptions import AuthenticationError, ConflictError, NotFoundError
from app.core.security import (
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from app.schemas.payment import TicketRecord
from app.schemas.user import Token, UserCreate, UserLogin, UserRecord, UserResponse, UserUpdate
from app.storage.base import StorageBackend, UserFilter
from app.storage.selector import get_storage

router = APIRouter()
logger = logging.getLogger(__name__)


def _token_for(user: UserRecord) -> Token:
    return Token(
        access_token=create_access_token(user.id),
        user=UserResponse.model_validate(user)
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    storage: StorageBackend = Depends(get_storage)
) -> Any:
    """
    Register a new user
    """
    # Check if user already exists
    if await storage.users.find_one(UserFilter(email=user_data.email)):
        raise ConflictError("User already exists", details={"field": "email"})

    user = await storage.users.create({
        "name": user_data.name,
        "email": user_data.email.lower(),
        "phone": user_data.phone,
        "password_hash": get_password_hash(user_data.password),
        "role": user_data.role,
        "otp_method": user_data.otp_method,
    })
    logger.info(f"Registered {user.role} {user.id}")

    return _token_for(user)


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    storage: StorageBackend = Depends(get_storage)
) -> Any:
    """
    Login with email and password
    """
    user = await storage.users.find_one(UserFilter(email=credentials.email))
    if not user or not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Invalid email or password", code="INVALID_CREDENTIALS")

    return _token_for(user)


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: UserRecord = Depends(get_current_user)) -> Any:
    """
    Get current user profile
    """
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    changes: UserUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: StorageBackend = Depends(get_storage)
) -> Any:
    """
    Update name, phone or OTP method
    """
    user = await storage.users.update(
        current_user.id,
        changes.model_dump(exclude_unset=True, exclude_none=True)
    )
    if user is None:
        raise NotFoundError("User", current_user.id)
    return user


@router.get("/tickets", response_model=List[TicketRecord])
async def get_my_tickets(current_user: UserRecord = Depends(get_current_user)) -> Any:
    """
    Tickets bought by the current user, oldest first
    """
    return current_user.tickets
