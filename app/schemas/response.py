"""
Envelope schemas shared by every endpoint
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Body of every non-2xx response"""
    success: bool = False
    message: str
    error: ErrorDetail

    @classmethod
    def build(cls, message: str, code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return cls(
            message=message,
            error=ErrorDetail(code=code, message=message, details=details or {})
        ).model_dump()


ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 403, 404, 409, 422, 500)
}


class MessageResponse(BaseModel):
    """Simple message response"""
    success: bool = True
    message: str
