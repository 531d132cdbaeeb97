"""Auth Schemas — register/login payloads.

Invariants:
    - RegisterRequest enforces the same password rules as UserCreate
    - LoginRequest only checks presence; wrong credentials are a 401, not a 400
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from blog_api.schemas.common import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    check_password_strength,
    strip_required,
)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    name: str | None = Field(None, min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return strip_required(v, "name") if v is not None else v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()
