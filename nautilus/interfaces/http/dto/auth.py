from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from nautilus.shared.errors.validation_types import ValidationErrorType


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError(
                ValidationErrorType.MISSING.value,
                "Username cannot be empty",
                {}
            )
        return value


class AuthSuccessDTO(BaseModel):
    success: bool = True
    message: str | None = None


class LoginDataDTO(BaseModel):
    user: dict[str, Any]
    token: str


class LoginSuccessDTO(AuthSuccessDTO):
    data: LoginDataDTO


class UserProfileDTO(AuthSuccessDTO):
    data: dict[str, Any]


class SessionsRemovedDTO(AuthSuccessDTO):
    removed: int
