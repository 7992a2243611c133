import jwt
from aws_lambda_powertools import Logger
from fastapi import HTTPException, Request, status
from fastapi.security.http import HTTPAuthorizationCredentials
from fastapi.security.http import HTTPBearer as FastAPIHTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from jwt import ExpiredSignatureError, InvalidTokenError

from app import settings
from app.models.auth import JWTToken

logger = Logger(utc=True)

ERROR_MESSAGE_NOT_AUTHENTICATED = "Not authenticated"


class HTTPBearer(FastAPIHTTPBearer):
    def __init__(self, auto_error: bool = True):
        super().__init__(auto_error=auto_error)
        self._auto_error = auto_error

    def __call__(self, request: Request) -> HTTPAuthorizationCredentials | None:
        authorization = request.headers.get("Authorization")
        if authorization is not None:
            return self._get_authorization_credentials_from_header(authorization)
        else:
            logger.info(
                "Missing authentication header, attempt to use token query param"
            )
            return self._get_authorization_credentials_from_token(
                request.query_params.get("token")
            )

    def _fail(self, detail: str) -> None:
        if self._auto_error:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return None

    def _get_authorization_credentials_from_header(
        self, authorization: str
    ) -> HTTPAuthorizationCredentials | None:
        scheme, credentials = get_authorization_scheme_param(authorization)
        if not (authorization and scheme and credentials):
            logger.warning(f"Missing {authorization=}, {scheme=} or {credentials=}")
            return self._fail(ERROR_MESSAGE_NOT_AUTHENTICATED)
        if scheme.lower() != "bearer":
            logger.warning(f"Invalid {scheme=}")
            return self._fail("Invalid authentication credentials")
        return HTTPAuthorizationCredentials(scheme=scheme, credentials=credentials)

    def _get_authorization_credentials_from_token(
        self, token: str | None
    ) -> HTTPAuthorizationCredentials | None:
        if not token:
            return self._fail(ERROR_MESSAGE_NOT_AUTHENTICATED)
        return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class JWTBearer:
    """Validates access tokens issued by the hosted authentication service."""

    def __init__(self, auto_error: bool = True):
        self._auto_error = auto_error

    def __call__(self, request: Request) -> JWTToken | None:
        credentials = HTTPBearer(self._auto_error).__call__(request)
        if not credentials:
            return None
        token = self._decode_token(credentials.credentials)
        if token is None and self._auto_error:
            logger.warning("Invalid authentication token")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=ERROR_MESSAGE_NOT_AUTHENTICATED,
            )
        return token

    def _decode_token(self, token: str) -> JWTToken | None:
        try:
            claims = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=["HS256"],
                audience=settings.jwt_audience,
            )
            return JWTToken(**claims, access_token=token)
        except ExpiredSignatureError:
            logger.exception("Expired signature")
        except InvalidTokenError:
            logger.exception("Error occurred during token decoding")
        return None
