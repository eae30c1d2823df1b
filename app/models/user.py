"""
User model
"""

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.base import BaseModel, utcnow
from app.schemas.payment import PAYMENT_METHOD_MPESA
from app.schemas.user import OtpMethod, UserRole


class User(BaseModel):
    """
    User model for authentication, profile and ticket history
    """
    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(20))
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), default=UserRole.USER, nullable=False)
    otp_method = Column(Enum(OtpMethod), default=OtpMethod.EMAIL, nullable=False)

    tickets = relationship(
        "UserTicket",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserTicket.id",
        lazy="selectin"
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class UserTicket(Base):
    """
    Ticket mirrored into the buyer's history, in purchase order
    """
    __tablename__ = "user_tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(String(36), nullable=False)
    ticket_number = Column(String(32), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    purchase_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    payment_method = Column(String(32), default=PAYMENT_METHOD_MPESA, nullable=False)
    receipt_number = Column(String(64), nullable=False)

    user = relationship("User", back_populates="tickets")
