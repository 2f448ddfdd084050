"""
Request and response models for users.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints, field_validator

from .common import EntityRead, reject_null

EMAIL_MAX_LENGTH = 255

UserName = Annotated[str, StringConstraints(min_length=1, max_length=100)]


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _check_email_length(value: str) -> str:
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"must be at most {EMAIL_MAX_LENGTH} characters")
    return value


class UserCreate(BaseModel):
    """Body of POST /users. Unknown keys are ignored."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: UserName
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        return _strip(value)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, value: str) -> str:
        return _check_email_length(value)


class UserUpdate(BaseModel):
    """Body of PATCH /users/{id}. Every field is optional but none may be null."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: UserName | None = None
    email: EmailStr | None = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return _strip(reject_null(value))

    @field_validator("email")
    @classmethod
    def check_email_length(cls, value: str | None) -> str | None:
        return value if value is None else _check_email_length(value)


class UserRead(EntityRead):
    name: str
    email: str
