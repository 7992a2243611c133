import re
from typing import Literal

from pydantic import ConfigDict, EmailStr, constr, field_validator

from app.models.camel_model import CamelModel

COMMON_PASSWORDS = ["password123", "admin123", "welcome1"]
HANDLE_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*"

OAuthProvider = Literal["github", "google"]


class SignUp(CamelModel):
    first_name: constr(strip_whitespace=True, min_length=1)
    last_name: constr(strip_whitespace=True, min_length=1)
    email: EmailStr
    password: constr(min_length=8)

    model_config = ConfigDict(extra="ignore")

    @field_validator("password")
    @classmethod
    def validate_password(cls, password: str) -> str:
        if not (
            re.search(r"[a-z]", password)
            and re.search(r"[A-Z]", password)
            and re.search(r"\d", password)
            and any(char in PASSWORD_SPECIAL_CHARACTERS for char in password)
        ):
            raise ValueError(
                "Password must have 1 upper, 1 lower, 1 number, 1 special character"
            )
        if any(common in password.lower() for common in COMMON_PASSWORDS):
            raise ValueError("Password is too common")
        return password


class SignIn(CamelModel):
    email: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)

    model_config = ConfigDict(extra="ignore")


class EmailOnly(CamelModel):
    email: EmailStr

    model_config = ConfigDict(extra="ignore")


class UpdateHandle(CamelModel):
    handle: constr(pattern=HANDLE_PATTERN)

    model_config = ConfigDict(extra="ignore")
