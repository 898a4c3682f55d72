"""Usuario request and response schemas.

Validation rules live here. Custom checks raise PydanticCustomError whose
error type doubles as the message-catalog key, so the classifier can localize
them like any built-in pydantic error.
"""

import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

from usuarios_api.models import MAX_ID, UserType
from usuarios_api.schemas.pagination import PaginatedResponse

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Passwords are kept verbatim; only the display name is trimmed.
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
CompanyId = Annotated[int, Field(ge=1, le=MAX_ID)]


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise PydanticCustomError("user.email.invalid", "Invalid email address")
    return value


def _empty_to_none(value: Any) -> Any:
    # HTML forms submit unset inputs as empty strings
    if isinstance(value, str) and not value.strip():
        return None
    return value


class UserCreate(BaseModel):
    """Payload for creating a user, from JSON or a form post."""

    name: Name
    email: str = Field(max_length=255)
    password: str = Field(min_length=6, max_length=128)
    user_type: UserType = UserType.COLABORADOR
    company_id: CompanyId | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("user_type", "company_id", mode="before")
    @classmethod
    def blank_as_missing(cls, value: Any) -> Any:
        return _empty_to_none(value)


class UserUpdate(BaseModel):
    """Partial update payload.

    Only fields present in the payload are merged. A missing or blank
    password keeps the stored credential.
    """

    name: Name | None = None
    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, min_length=6, max_length=128)
    user_type: UserType | None = None
    company_id: CompanyId | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return None if value is None else _check_email(value)

    @field_validator("password", "user_type", "company_id", mode="before")
    @classmethod
    def blank_as_missing(cls, value: Any) -> Any:
        return _empty_to_none(value)

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually supplied, minus nulls."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class UserResponse(BaseModel):
    """Public representation of a user. The credential is never exposed."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    email: str
    user_type: UserType
    company_id: int | None
    created_at: datetime
    updated_at: datetime


UserPage = PaginatedResponse[UserResponse]
