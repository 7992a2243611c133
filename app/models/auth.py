from typing import Any

from pydantic import BaseModel, Field

from app.models.camel_model import CamelModel


class JWTToken(BaseModel):
    aud: str | list[str] | None = None
    email: str | None = None
    exp: int
    iat: int
    iss: str | None = None
    role: str | None = None
    session_id: str | None = None
    sub: str
    user_metadata: dict[str, Any] | None = None
    access_token: str | None = Field(default=None, exclude=True)

    @property
    def owner_id(self) -> str:
        return self.sub


class User(CamelModel):
    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    handle: str | None = None

    @classmethod
    def from_auth_user(cls, data: dict[str, Any]) -> "User":
        metadata = data.get("user_metadata") or {}
        return cls(
            id=data["id"],
            email=data.get("email"),
            first_name=metadata.get("first_name"),
            last_name=metadata.get("last_name"),
            handle=metadata.get("handle"),
        )


class Session(CamelModel):
    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    token_type: str = "bearer"
    user: User
