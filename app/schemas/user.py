"""
User schemas
"""

import enum
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.base import BaseSchema
from app.schemas.payment import TicketRecord

PHONE_PATTERN = re.compile(r'^\+?\d{7,15}$')


class UserRole(str, enum.Enum):
    USER = "user"
    ORGANIZER = "organizer"


class OtpMethod(str, enum.Enum):
    EMAIL = "email"
    SMS = "sms"


def _validate_phone(v: Optional[str]) -> Optional[str]:
    if v and not PHONE_PATTERN.match(v.replace(" ", "")):
        raise ValueError('Invalid phone number format')
    return v.replace(" ", "") if v else v


class UserBase(BaseSchema):
    """Base user schema"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)


class UserCreate(UserBase):
    """User creation schema"""
    password: str = Field(..., min_length=6, max_length=72)
    role: UserRole = UserRole.USER
    otp_method: OtpMethod = OtpMethod.EMAIL

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Demo User",
                "email": "demo@eventhub.co.ke",
                "phone": "254712345678",
                "password": "Demo123!",
                "role": "user",
                "otpMethod": "email"
            }
        }
    }

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return _validate_phone(v)


class UserUpdate(BaseSchema):
    """User update schema"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    otp_method: Optional[OtpMethod] = None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        return _validate_phone(v)


class UserLogin(BaseSchema):
    """User login schema"""
    email: EmailStr
    password: str


class UserRecord(BaseSchema):
    """Stored user, including credentials and ticket history"""
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    password_hash: str
    role: UserRole = UserRole.USER
    otp_method: OtpMethod = OtpMethod.EMAIL
    tickets: List[TicketRecord] = Field(default_factory=list)
    created_at: datetime

    @property
    def is_organizer(self) -> bool:
        return self.role == UserRole.ORGANIZER

    def find_ticket(self, ticket_number: str) -> Optional[TicketRecord]:
        for ticket in self.tickets:
            if ticket.ticket_number == ticket_number:
                return ticket
        return None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class UserResponse(BaseSchema):
    """User response schema"""
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    otp_method: OtpMethod
    created_at: datetime


class Token(BaseSchema):
    """Token schema with user info"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
