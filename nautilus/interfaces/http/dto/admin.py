# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator
from pydantic_core import PydanticCustomError

from nautilus.domain.users.entities import Role
from nautilus.shared.errors.validation_types import ValidationErrorType


class UserAccessUpdateDTO(BaseModel):
    password: str | None = Field(None, min_length=8, max_length=72)
    role: Role | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def _require_change(self) -> "UserAccessUpdateDTO":
        if self.password is None and self.role is None and self.is_active is None:
            raise PydanticCustomError(
                ValidationErrorType.NOTHING_TO_UPDATE.value,
                "No fields to update",
                {},
            )
        return self
