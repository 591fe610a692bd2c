"""
User schemas.
"""

from datetime import datetime
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field, ConfigDict


def _check_email(value: str) -> str:
    """Validate an address but keep it exactly as sent."""
    if "<" in value or ">" in value:
        raise ValueError("value is not a valid email address")
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(f"value is not a valid email address: {exc}") from exc
    return value


# Compared and stored verbatim: uniqueness is case-sensitive
Email = Annotated[str, Field(max_length=255), AfterValidator(_check_email)]


class UserCreate(BaseModel):
    """User creation schema."""
    name: str = Field(min_length=1, max_length=255, examples=["John Doe"])
    email: Email = Field(examples=["john@example.com"])
    enabled: bool = True


class UserUpdate(BaseModel):
    """
    Partial user update.

    Fields that are absent or null are left unchanged.
    """
    name: str | None = Field(None, min_length=1, max_length=255)
    email: Email | None = None
    enabled: bool | None = None


class UserResponse(BaseModel):
    """User response schema."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    enabled: bool
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None = None


class UserListResponse(BaseModel):
    """Paginated user list response."""
    users: list[UserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
