import secrets
import string
from typing import Any

import httpx
from aws_lambda_powertools import Logger
from fastapi import status
from httpx import HTTPError, Response

from app.exceptions import (
    AuthServiceException,
    InvalidCredentialsException,
    RateLimitedException,
    UserAlreadyExistsException,
)
from app.middlewares import correlation_id
from app.models.auth import Session, User
from app.settings import Settings

ERROR_ALREADY_REGISTERED = "This email is already registered. Please log in instead."
ERROR_RATE_LIMITED = "Too many attempts. Please wait a bit and try again."
HANDLE_ALPHABET = string.ascii_lowercase + string.digits
USER_ALREADY_REGISTERED = "User already registered"


def generate_default_handle() -> str:
    return "user_" + "".join(secrets.choice(HANDLE_ALPHABET) for _ in range(6))


def _error_message(response: Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    return (
        body.get("msg")
        or body.get("message")
        or body.get("error_description")
        or body.get("error")
        or response.text
    )


class AuthService:
    """Client of the hosted authentication REST API."""

    def __init__(self, settings: Settings):
        self._logger = Logger(utc=True)
        self._base_url = settings.auth_base_url.rstrip("/")
        self._api_key = settings.auth_api_key
        self._redirect_url = settings.auth_redirect_url

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        headers = {"apikey": self._api_key, "X-Correlation-ID": correlation_id.get("")}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str | None = None,
        **kwargs: Any,
    ) -> Response:
        try:
            async with httpx.AsyncClient(base_url=self._base_url) as client:
                self._logger.debug(f"Auth request {method=} {path=}")
                response = await client.request(
                    method, path, headers=self._headers(access_token), **kwargs
                )
        except HTTPError as exc:
            self._logger.exception("Auth service is unreachable", exc_info=exc)
            raise AuthServiceException(
                "Network error. Please check your connection and try again."
            )
        if response.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
            self._logger.warning(f"Auth service rate limited {path=}")
            raise RateLimitedException(ERROR_RATE_LIMITED)
        return response

    def _raise_for_status(self, response: Response):
        if response.is_success:
            return
        message = _error_message(response)
        self._logger.error(f"Unexpected auth error {response.status_code=} {message=}")
        raise AuthServiceException(message)

    async def sign_up(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> User:
        response = await self._request(
            "POST",
            "/signup",
            params={"redirect_to": self._redirect_url},
            json={
                "email": email,
                "password": password,
                "data": {
                    "first_name": first_name,
                    "last_name": last_name,
                    "handle": generate_default_handle(),
                },
            },
        )
        if not response.is_success and USER_ALREADY_REGISTERED in _error_message(
            response
        ):
            raise UserAlreadyExistsException(ERROR_ALREADY_REGISTERED)
        self._raise_for_status(response)
        data = response.json()
        user = data.get("user", data)
        # an existing address is reported as a user without identities
        if user.get("identities") == []:
            self._logger.info("Sign up attempted with an already registered email")
            raise UserAlreadyExistsException(ERROR_ALREADY_REGISTERED)
        return User.from_auth_user(user)

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code in (
            status.HTTP_400_BAD_REQUEST,
            status.HTTP_401_UNAUTHORIZED,
        ):
            self._logger.warning("Sign in rejected")
            raise InvalidCredentialsException(_error_message(response))
        self._raise_for_status(response)
        data = response.json()
        return Session(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            token_type=data.get("token_type", "bearer"),
            user=User.from_auth_user(data["user"]),
        )

    async def sign_in_with_otp(self, email: str):
        response = await self._request(
            "POST",
            "/otp",
            params={"redirect_to": self._redirect_url},
            json={"email": email, "create_user": False},
        )
        self._raise_for_status(response)

    def get_oauth_url(self, provider: str) -> str:
        return str(
            httpx.URL(
                f"{self._base_url}/authorize",
                params={"provider": provider, "redirect_to": self._redirect_url},
            )
        )

    async def reset_password_for_email(self, email: str):
        response = await self._request(
            "POST",
            "/recover",
            params={"redirect_to": self._redirect_url},
            json={"email": email},
        )
        self._raise_for_status(response)

    async def sign_out(self, access_token: str):
        response = await self._request("POST", "/logout", access_token=access_token)
        self._raise_for_status(response)

    async def get_user(self, access_token: str) -> User:
        response = await self._request("GET", "/user", access_token=access_token)
        if response.status_code == status.HTTP_401_UNAUTHORIZED:
            raise InvalidCredentialsException(_error_message(response))
        self._raise_for_status(response)
        return User.from_auth_user(response.json())

    async def update_user(self, access_token: str, data: dict[str, Any]) -> User:
        response = await self._request(
            "PUT", "/user", access_token=access_token, json={"data": data}
        )
        self._raise_for_status(response)
        return User.from_auth_user(response.json())
