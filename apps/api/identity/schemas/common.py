"""
Shared response schemas.
"""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Generic success response."""
    message: str = Field(examples=["Operation completed successfully"])


class ErrorResponse(BaseModel):
    """Error response body."""
    error: str = Field(examples=["not_found"])
    message: str = Field(examples=["user not found"])
