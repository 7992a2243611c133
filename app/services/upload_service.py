import fnmatch
import pathlib

import pendulum
from aws_lambda_powertools import Logger
from unidecode import unidecode

from app.exceptions import FileTooLargeException, InvalidFileTypeException
from app.services.upload_provider import UploadProvider
from app.settings import Settings

ERROR_INVALID_FILE_TYPE = "Invalid file type. Use images, MP4 videos, or MP3 audio."
KEY_PREFIX = "public"


class UploadService:
    def __init__(self, settings: Settings, provider: UploadProvider):
        self._logger = Logger(utc=True)
        self._provider = provider
        self._allowed_mime_types = settings.upload_allowed_mime_types
        self._max_size = settings.upload_max_size_in_bytes

    @property
    def max_size_in_mb(self) -> int:
        return max(1, self._max_size // (1024 * 1024))

    def validate(self, content_type: str | None, size: int) -> str:
        content_type = (content_type or "").lower()
        if not any(
            fnmatch.fnmatchcase(content_type, pattern)
            for pattern in self._allowed_mime_types
        ) or not self._provider.supports(content_type):
            self._logger.warning(f"Rejected upload {content_type=}")
            raise InvalidFileTypeException(ERROR_INVALID_FILE_TYPE)
        if size > self._max_size:
            self._logger.warning(f"Rejected upload {size=} max_size={self._max_size}")
            raise FileTooLargeException(
                f"File size exceeds {self.max_size_in_mb}MB limit"
            )
        return content_type

    @staticmethod
    def object_key(file_name: str | None) -> str:
        suffix = pathlib.PurePosixPath(unidecode(file_name or "")).suffix.lower()
        millis = int(pendulum.now("UTC").float_timestamp * 1000)
        return f"{KEY_PREFIX}/{millis}{suffix}"

    async def upload(
        self, file_name: str | None, content_type: str | None, data: bytes
    ) -> str:
        content_type = self.validate(content_type, len(data))
        key = self.object_key(file_name)
        url = await self._provider.upload(key, content_type, data)
        self._logger.info(f"Uploaded {file_name=} to {url=}")
        return url
