import pytest
from fastapi import status
from httpx import Response
from respx import MockRouter

from app.exceptions import UploadFailedException, UploadProviderNotConfiguredException
from app.services.upload_provider import (
    BackblazeB2UploadProvider,
    CloudflareR2UploadProvider,
    MuxUploadProvider,
    create_upload_provider,
)
from app.settings import Settings

MUX_BASE_URL = "https://api.mux.com"
MUX_DIRECT_UPLOAD_URL = "https://storage.googleapis.com/video-storage-upload/up1"
OBJECT_KEY = "public/1700000000000.mp4"


@pytest.fixture
def mux_settings(settings: Settings) -> Settings:
    return settings.model_copy(
        update={
            "upload_provider": "mux",
            "mux_token_id": "token-id",
            "mux_token_secret": "token-secret",
            "mux_asset_poll_attempts": 3,
            "mux_asset_poll_interval_in_seconds": 0,
        }
    )


@pytest.mark.asyncio
class TestS3CompatibleUploadProvider:
    async def test_successfully_upload_to_b2(
        self, s3_resource, settings: Settings, test_data: bytes
    ):
        provider = BackblazeB2UploadProvider(settings)

        url = await provider.upload(OBJECT_KEY, "video/mp4", test_data)

        assert f"{settings.b2_public_url}/{OBJECT_KEY}" == url
        stored = s3_resource.Object(settings.b2_bucket_name, OBJECT_KEY).get()
        assert test_data == stored["Body"].read()
        assert "video/mp4" == stored["ContentType"]

    async def test_fail_to_upload_due_to_missing_credentials(
        self, settings: Settings, test_data: bytes
    ):
        provider = BackblazeB2UploadProvider(
            settings.model_copy(update={"b2_secret_access_key": None})
        )

        with pytest.raises(UploadProviderNotConfiguredException) as excinfo:
            await provider.upload(OBJECT_KEY, "video/mp4", test_data)

        assert status.HTTP_500_INTERNAL_SERVER_ERROR == excinfo.value.status_code
        assert (
            "B2 credentials not properly configured on the server"
            == excinfo.value.detail
        )

    async def test_fail_to_upload_due_to_missing_r2_credentials(
        self, settings: Settings, test_data: bytes
    ):
        provider = CloudflareR2UploadProvider(settings)

        with pytest.raises(UploadProviderNotConfiguredException) as excinfo:
            await provider.upload(OBJECT_KEY, "video/mp4", test_data)

        assert (
            "R2 credentials not properly configured on the server"
            == excinfo.value.detail
        )

    async def test_fail_to_upload_due_to_missing_bucket(
        self, s3_resource, settings: Settings, test_data: bytes
    ):
        provider = BackblazeB2UploadProvider(
            settings.model_copy(update={"b2_bucket_name": "missing-bucket"})
        )

        with pytest.raises(UploadFailedException) as excinfo:
            await provider.upload(OBJECT_KEY, "video/mp4", test_data)

        assert status.HTTP_500_INTERNAL_SERVER_ERROR == excinfo.value.status_code


@pytest.mark.asyncio
class TestMuxUploadProvider:
    @pytest.fixture
    def create_upload_route(self, respx_mock: MockRouter):
        return respx_mock.post(f"{MUX_BASE_URL}/video/v1/uploads").mock(
            Response(
                status_code=status.HTTP_201_CREATED,
                json={"data": {"id": "up1", "url": MUX_DIRECT_UPLOAD_URL}},
            )
        )

    @pytest.fixture
    def direct_upload_route(self, respx_mock: MockRouter):
        return respx_mock.put(MUX_DIRECT_UPLOAD_URL).mock(
            Response(status_code=status.HTTP_200_OK)
        )

    async def test_successfully_upload(
        self,
        create_upload_route,
        direct_upload_route,
        mux_settings: Settings,
        respx_mock: MockRouter,
        test_data: bytes,
    ):
        respx_mock.get(f"{MUX_BASE_URL}/video/v1/uploads/up1").mock(
            Response(status_code=status.HTTP_200_OK, json={"data": {"asset_id": "as1"}})
        )
        respx_mock.get(f"{MUX_BASE_URL}/video/v1/assets/as1").mock(
            Response(
                status_code=status.HTTP_200_OK,
                json={"data": {"playback_ids": [{"id": "pb1", "policy": "public"}]}},
            )
        )

        url = await MuxUploadProvider(mux_settings).upload(
            OBJECT_KEY, "video/mp4", test_data
        )

        assert "https://stream.mux.com/pb1.m3u8" == url
        assert create_upload_route.call_count == 1
        assert direct_upload_route.call_count == 1
        direct_upload = direct_upload_route.calls.last.request
        assert test_data == direct_upload.content
        assert "video/mp4" == direct_upload.headers["Content-Type"]
        assert "Authorization" not in direct_upload.headers
        assert "Authorization" in create_upload_route.calls.last.request.headers

    async def test_fail_to_upload_due_to_asset_not_ready(
        self,
        create_upload_route,
        direct_upload_route,
        mux_settings: Settings,
        respx_mock: MockRouter,
        test_data: bytes,
    ):
        upload_route = respx_mock.get(f"{MUX_BASE_URL}/video/v1/uploads/up1").mock(
            Response(status_code=status.HTTP_200_OK, json={"data": {"asset_id": None}})
        )

        with pytest.raises(UploadFailedException) as excinfo:
            await MuxUploadProvider(mux_settings).upload(
                OBJECT_KEY, "video/mp4", test_data
            )

        assert "Mux asset is not ready yet" == excinfo.value.detail
        assert mux_settings.mux_asset_poll_attempts == upload_route.call_count

    async def test_successfully_upload_once_asset_is_created(
        self,
        create_upload_route,
        direct_upload_route,
        mux_settings: Settings,
        respx_mock: MockRouter,
        test_data: bytes,
    ):
        upload_route = respx_mock.get(f"{MUX_BASE_URL}/video/v1/uploads/up1").mock(
            side_effect=[
                Response(
                    status_code=status.HTTP_200_OK,
                    json={"data": {"id": "up1", "status": "waiting"}},
                ),
                Response(
                    status_code=status.HTTP_200_OK,
                    json={"data": {"id": "up1", "asset_id": "as1"}},
                ),
            ]
        )
        respx_mock.get(f"{MUX_BASE_URL}/video/v1/assets/as1").mock(
            Response(
                status_code=status.HTTP_200_OK,
                json={"data": {"playback_ids": [{"id": "pb1", "policy": "public"}]}},
            )
        )

        url = await MuxUploadProvider(mux_settings).upload(
            OBJECT_KEY, "video/mp4", test_data
        )

        assert "https://stream.mux.com/pb1.m3u8" == url
        assert upload_route.call_count == 2

    async def test_fail_to_upload_due_to_mux_error(
        self, mux_settings: Settings, respx_mock: MockRouter, test_data: bytes
    ):
        respx_mock.post(f"{MUX_BASE_URL}/video/v1/uploads").mock(
            Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
        )

        with pytest.raises(UploadFailedException) as excinfo:
            await MuxUploadProvider(mux_settings).upload(
                OBJECT_KEY, "video/mp4", test_data
            )

        assert status.HTTP_500_INTERNAL_SERVER_ERROR == excinfo.value.status_code

    async def test_fail_to_upload_due_to_missing_credentials(
        self, settings: Settings, test_data: bytes
    ):
        with pytest.raises(UploadProviderNotConfiguredException):
            await MuxUploadProvider(settings).upload(OBJECT_KEY, "video/mp4", test_data)

    async def test_successfully_restrict_supported_types(self, mux_settings: Settings):
        provider = MuxUploadProvider(mux_settings)

        assert provider.supports("video/mp4")
        assert provider.supports("audio/mpeg")
        assert not provider.supports("image/png")


class TestCreateUploadProvider:
    @pytest.mark.parametrize(
        "upload_provider, provider_type",
        [
            ("b2", BackblazeB2UploadProvider),
            ("r2", CloudflareR2UploadProvider),
            ("mux", MuxUploadProvider),
        ],
    )
    def test_successfully_select_provider_by_configuration(
        self, upload_provider: str, provider_type: type, settings: Settings
    ):
        provider = create_upload_provider(
            settings.model_copy(update={"upload_provider": upload_provider})
        )

        assert isinstance(provider, provider_type)
