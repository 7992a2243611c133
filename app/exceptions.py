from typing import Any

from fastapi import HTTPException, status


class AuthServiceException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_502_BAD_GATEWAY, detail)


class InvalidCredentialsException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class RateLimitedException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_429_TOO_MANY_REQUESTS, detail)


class UserAlreadyExistsException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_409_CONFLICT, detail)


class DraftClearNotAllowedException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_409_CONFLICT, detail)


class EmptyPostException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, detail)


class PostLoadException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_502_BAD_GATEWAY, detail)


class PostNotFoundException(HTTPException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_404_NOT_FOUND, detail=detail)


class UploadException(HTTPException):
    """Base of the upload errors, rendered as ``{"error": detail}``."""


class FileTooLargeException(UploadException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class InvalidFileTypeException(UploadException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class NoFileProvidedException(UploadException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class UploadFailedException(UploadException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class UploadProviderNotConfiguredException(UploadException):
    def __init__(self, detail: Any = None) -> None:
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
