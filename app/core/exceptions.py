"""
Custom application exceptions
"""

from typing import Optional, Dict, Any

from app.schemas.response import ErrorResponse


class EventHubException(Exception):
    """Base exception for EventHub application"""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return ErrorResponse.build(self.message, self.code, self.details)


class AuthenticationError(EventHubException):
    """Authentication related errors

    The code tells the client whether it has to log in again:
    NO_TOKEN, INVALID_TOKEN, TOKEN_EXPIRED, TOKEN_INVALID (user no longer
    exists) or INVALID_CREDENTIALS.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "AUTH_ERROR",
        details: Optional[Dict] = None
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=401,
            details=details
        )


class AuthorizationError(EventHubException):
    """Authorization related errors"""

    def __init__(self, message: str = "Not authorized", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="AUTH_FORBIDDEN",
            status_code=403,
            details=details
        )


class NotFoundError(EventHubException):
    """Resource not found errors"""

    def __init__(self, resource: str, identifier: Any = None):
        details = {"id": str(identifier)} if identifier is not None else {}
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            details=details
        )


class ValidationError(EventHubException):
    """Validation errors"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details
        )


class ConflictError(EventHubException):
    """Resource conflict errors"""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="CONFLICT",
            status_code=409,
            details=details
        )


class BookingError(EventHubException):
    """Booking related errors"""

    def __init__(self, message: str, code: str = "BOOKING_ERROR", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            details=details
        )


class InsufficientInventoryError(BookingError):
    """Requested quantity exceeds the tickets left"""

    def __init__(self, available: int, requested: int):
        super().__init__(
            message=f"Only {available} tickets available",
            code="INSUFFICIENT_TICKETS",
            details={"available": available, "requested": requested}
        )
        self.available = available


class PaymentError(EventHubException):
    """Payment related errors"""

    def __init__(self, message: str = "Payment failed. Please try again.", details: Optional[Dict] = None):
        super().__init__(
            message=message,
            code="PAYMENT_FAILED",
            status_code=400,
            details=details
        )


class PartialBookingError(EventHubException):
    """Attendee was recorded on the event but the user's ticket was not"""

    def __init__(self, ticket_number: str, receipt_number: str, reason: str):
        super().__init__(
            message="Payment was recorded but the ticket could not be added to your account. "
                    "Please contact support with your receipt number.",
            code="BOOKING_INCOMPLETE",
            status_code=500,
            details={
                "ticket_number": ticket_number,
                "receipt_number": receipt_number,
                "reason": reason
            }
        )
