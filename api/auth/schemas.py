import re
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str
    phone: str | None = Field(default=None, description="Optional 10-digit phone number")

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Username must be at least 3 characters")
        return value

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if len(value.encode("utf-8")) > 72:
            raise ValueError("Password is too long")
        if not re.search(r"[A-Za-z]", value) or not re.search(r"\d", value) or not re.search(r"[^\w\s]", value):
            raise ValueError("Password must include a letter, a number and a symbol")
        return value


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


class RegisterResponse(BaseModel):
    message: str
    user: dict[str, Any]


class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: dict[str, Any]
