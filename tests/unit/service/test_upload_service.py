import re

import pytest
from fastapi import status
from pytest_mock import MockerFixture

from app.exceptions import FileTooLargeException, InvalidFileTypeException
from app.services.upload_provider import UploadProvider
from app.services.upload_service import UploadService
from app.settings import Settings

ERROR_MESSAGE_INVALID_FILE_TYPE = (
    "Invalid file type. Use images, MP4 videos, or MP3 audio."
)
ERROR_MESSAGE_FILE_TOO_LARGE = "File size exceeds 1MB limit"
UPLOADED_URL = "https://media.localhost/file/spawnwrite-media/public/1.png"


@pytest.fixture
def upload_provider(mocker: MockerFixture):
    provider = mocker.create_autospec(UploadProvider, instance=True)
    provider.supports.return_value = True
    provider.upload.return_value = UPLOADED_URL
    return provider


@pytest.fixture
def upload_service(settings: Settings, upload_provider) -> UploadService:
    return UploadService(settings, upload_provider)


@pytest.mark.asyncio
class TestUploadService:
    async def test_successfully_upload_image(
        self, upload_provider, upload_service: UploadService, test_data: bytes
    ):
        result = await upload_service.upload("photo.PNG", "image/png", test_data)

        assert UPLOADED_URL == result
        upload_provider.upload.assert_awaited_once()
        key, content_type, data = upload_provider.upload.await_args.args
        assert re.fullmatch(r"public/\d+\.png", key)
        assert "image/png" == content_type
        assert test_data == data

    @pytest.mark.parametrize("content_type", ["video/mp4", "audio/mpeg", "IMAGE/GIF"])
    async def test_successfully_validate_allowed_types(
        self, content_type: str, upload_service: UploadService
    ):
        assert content_type.lower() == upload_service.validate(content_type, 1024)

    async def test_fail_to_upload_due_to_oversize_file(
        self, upload_provider, upload_service: UploadService
    ):
        with pytest.raises(FileTooLargeException) as excinfo:
            await upload_service.upload(
                "large.png", "image/png", b"0" * (2 * 1024 * 1024)
            )

        assert status.HTTP_400_BAD_REQUEST == excinfo.value.status_code
        assert ERROR_MESSAGE_FILE_TOO_LARGE == excinfo.value.detail
        upload_provider.upload.assert_not_awaited()

    @pytest.mark.parametrize(
        "content_type", ["application/pdf", "video/quicktime", "audio/wav", None]
    )
    async def test_fail_to_upload_due_to_invalid_file_type(
        self,
        content_type: str | None,
        upload_provider,
        upload_service: UploadService,
        test_data: bytes,
    ):
        with pytest.raises(InvalidFileTypeException) as excinfo:
            await upload_service.upload("document.pdf", content_type, test_data)

        assert status.HTTP_400_BAD_REQUEST == excinfo.value.status_code
        assert ERROR_MESSAGE_INVALID_FILE_TYPE == excinfo.value.detail
        upload_provider.upload.assert_not_awaited()

    async def test_fail_to_upload_due_to_type_unsupported_by_provider(
        self, upload_provider, upload_service: UploadService, test_data: bytes
    ):
        upload_provider.supports.return_value = False

        with pytest.raises(InvalidFileTypeException):
            await upload_service.upload("photo.png", "image/png", test_data)

        upload_provider.supports.assert_called_once_with("image/png")
        upload_provider.upload.assert_not_awaited()

    async def test_successfully_build_object_key(self):
        assert re.fullmatch(r"public/\d+\.jpg", UploadService.object_key("kép.JPG"))
        assert re.fullmatch(r"public/\d+", UploadService.object_key(None))
