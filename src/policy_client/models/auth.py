# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Credential and user models for the session layer."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from beartype import beartype
from pydantic import (
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)
from pydantic_core import InitErrorDetails, PydanticCustomError

from .base import WireModelConfig

MIN_PASSWORD_LENGTH = 8


@beartype
class LoginCredentials(WireModelConfig):
    """Credentials submitted by the login form."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_assignment=True,
        str_strip_whitespace=False,
        validate_default=True,
    )

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Account password")
    remember: bool | None = Field(None, description="Keep the session after restart")

    @field_validator("password")
    @classmethod
    @beartype
    def validate_password_present(cls, v: str) -> str:
        """Password must not be blank."""
        if not v:
            raise PydanticCustomError("required", "Password is required")
        return v


class RegistrationData(WireModelConfig):
    """Payload submitted by the registration form."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        validate_assignment=True,
        str_strip_whitespace=False,
        validate_default=True,
    )

    name: str = Field(..., max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Chosen password")
    password_confirmation: str = Field(..., description="Repeated password")

    @field_validator("name")
    @classmethod
    @beartype
    def validate_name_present(cls, v: str) -> str:
        """Name must not be blank."""
        if not v.strip():
            raise PydanticCustomError("required", "Name is required")
        return v

    @field_validator("password")
    @classmethod
    @beartype
    def validate_password_length(cls, v: str) -> str:
        """Enforce the minimum password length."""
        if len(v) < MIN_PASSWORD_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {minimum} characters",
                {"minimum": MIN_PASSWORD_LENGTH},
            )
        return v

    @model_validator(mode="wrap")
    @classmethod
    def validate_confirmation_matches(
        cls, data: Any, handler: ValidatorFunctionWrapHandler
    ) -> "RegistrationData":
        """Confirmation must repeat the password exactly.

        Checked against the raw input so a mismatch is still reported when
        the password itself is rejected.
        """
        try:
            model = handler(data)
        except ValidationError as e:
            if not _confirmation_mismatch(data):
                raise
            line_errors: list[InitErrorDetails] = [
                {
                    "type": PydanticCustomError(err["type"], err["msg"]),
                    "loc": err["loc"],
                    "input": err["input"],
                }
                for err in e.errors()
                if err["loc"] != ("password_confirmation",)
            ]
            line_errors.append(_mismatch_error(data))
            raise ValidationError.from_exception_data(cls.__name__, line_errors) from None

        if _confirmation_mismatch(data):
            raise ValidationError.from_exception_data(
                cls.__name__, [_mismatch_error(data)]
            )
        return model


def _confirmation_mismatch(data: Any) -> bool:
    if not isinstance(data, Mapping):
        return False
    password = data.get("password")
    confirmation = data.get("password_confirmation")
    return (
        isinstance(password, str)
        and isinstance(confirmation, str)
        and password != confirmation
    )


def _mismatch_error(data: Mapping[str, Any]) -> InitErrorDetails:
    return {
        "type": PydanticCustomError("password_mismatch", "Passwords don't match"),
        "loc": ("password_confirmation",),
        "input": data.get("password_confirmation"),
    }


@beartype
class User(WireModelConfig):
    """Authenticated user snapshot as returned by ``/user``."""

    id: int
    name: str
    email: str
    email_verified_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@beartype
class AuthSession(WireModelConfig):
    """Token issued by ``/login`` or ``/register``."""

    token: str = Field(..., min_length=1)
    user: User
