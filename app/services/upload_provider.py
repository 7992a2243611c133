import abc
import asyncio

import boto3
import httpx
from aws_lambda_powertools import Logger
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from httpx import HTTPError
from mypy_boto3_s3.service_resource import S3ServiceResource

from app.exceptions import UploadFailedException, UploadProviderNotConfiguredException
from app.settings import Settings

MUX_STREAM_BASE_URL = "https://stream.mux.com"


class UploadProvider(abc.ABC):
    """Stores a media payload and returns a publicly resolvable URL for it."""

    name: str

    def supports(self, content_type: str) -> bool:
        return True

    @abc.abstractmethod
    async def upload(self, key: str, content_type: str, data: bytes) -> str:
        """Upload ``data`` under ``key`` and return its public URL."""


class S3CompatibleUploadProvider(UploadProvider):
    def __init__(
        self,
        bucket_name: str,
        public_url: str | None,
        access_key_id: str | None,
        secret_access_key: str | None,
        region: str,
        endpoint_url: str | None = None,
        config: Config | None = None,
    ):
        self._logger = Logger(utc=True)
        self._bucket_name = bucket_name
        self._public_url = public_url.rstrip("/") if public_url else None
        self._s3: S3ServiceResource | None = None
        if access_key_id and secret_access_key:
            self._s3 = boto3.resource(
                "s3",
                endpoint_url=endpoint_url,
                region_name=region,
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                config=config,
            )

    async def upload(self, key: str, content_type: str, data: bytes) -> str:
        if self._s3 is None or not self._public_url:
            error = f"{self.name} credentials not properly configured on the server"
            self._logger.error(error)
            raise UploadProviderNotConfiguredException(error)
        self._logger.info(
            f"Uploading object {key=} {content_type=} to bucket={self._bucket_name}"
        )
        obj = self._s3.Object(bucket_name=self._bucket_name, key=key)
        try:
            await asyncio.to_thread(obj.put, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            self._logger.exception(f"{self.name} upload failed {key=}")
            raise UploadFailedException(str(e))
        return f"{self._public_url}/{key}"


class BackblazeB2UploadProvider(S3CompatibleUploadProvider):
    name = "B2"

    def __init__(self, settings: Settings):
        super().__init__(
            bucket_name=settings.b2_bucket_name,
            public_url=settings.b2_public_url,
            access_key_id=settings.b2_access_key_id,
            secret_access_key=settings.b2_secret_access_key,
            region=settings.b2_region,
            endpoint_url=settings.b2_endpoint,
            # B2 rejects the flexible checksum headers newer clients send
            config=Config(
                request_checksum_calculation="when_required",
                response_checksum_validation="when_required",
            ),
        )


class CloudflareR2UploadProvider(S3CompatibleUploadProvider):
    name = "R2"

    def __init__(self, settings: Settings):
        super().__init__(
            bucket_name=settings.r2_bucket_name,
            public_url=settings.r2_public_url,
            access_key_id=settings.r2_access_key_id,
            secret_access_key=settings.r2_secret_access_key,
            region="auto",
            endpoint_url=settings.r2_endpoint,
        )


class MuxUploadProvider(UploadProvider):
    """Direct uploads to Mux; resolves the created asset to its playback URL."""

    name = "Mux"

    def __init__(self, settings: Settings):
        self._logger = Logger(utc=True)
        self._base_url = settings.mux_base_url.rstrip("/")
        self._cors_origin = settings.mux_cors_origin
        self._poll_attempts = settings.mux_asset_poll_attempts
        self._poll_interval = settings.mux_asset_poll_interval_in_seconds
        self._auth = (
            (settings.mux_token_id, settings.mux_token_secret)
            if settings.mux_token_id and settings.mux_token_secret
            else None
        )

    def supports(self, content_type: str) -> bool:
        return content_type.startswith(("video/", "audio/"))

    async def upload(self, key: str, content_type: str, data: bytes) -> str:
        if self._auth is None:
            error = "Mux credentials not properly configured on the server"
            self._logger.error(error)
            raise UploadProviderNotConfiguredException(error)
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, auth=self._auth
            ) as client:
                response = await client.post(
                    "/video/v1/uploads",
                    json={
                        "cors_origin": self._cors_origin,
                        "new_asset_settings": {"playback_policy": ["public"]},
                    },
                )
                response.raise_for_status()
                direct_upload = response.json()["data"]
                self._logger.info(f"Created Mux upload id={direct_upload['id']} {key=}")

                response = await client.put(
                    direct_upload["url"],
                    content=data,
                    headers={"Content-Type": content_type},
                    auth=None,
                )
                response.raise_for_status()

                asset_id = await self._wait_for_asset(client, direct_upload["id"])
                if not asset_id:
                    raise UploadFailedException("Mux asset is not ready yet")

                response = await client.get(f"/video/v1/assets/{asset_id}")
                response.raise_for_status()
                playback_ids = response.json()["data"].get("playback_ids") or []
        except HTTPError as exc:
            self._logger.exception("Mux upload failed", exc_info=exc)
            raise UploadFailedException(str(exc))
        if not playback_ids:
            raise UploadFailedException("Mux asset has no public playback id")
        return f"{MUX_STREAM_BASE_URL}/{playback_ids[0]['id']}.m3u8"

    async def _wait_for_asset(
        self, client: httpx.AsyncClient, upload_id: str
    ) -> str | None:
        """Poll the direct upload until Mux has created its asset."""
        for attempt in range(1, self._poll_attempts + 1):
            response = await client.get(f"/video/v1/uploads/{upload_id}")
            response.raise_for_status()
            asset_id = response.json()["data"].get("asset_id")
            if asset_id:
                return asset_id
            self._logger.debug(f"Mux asset not created yet {upload_id=} {attempt=}")
            if attempt < self._poll_attempts:
                await asyncio.sleep(self._poll_interval)
        return None


PROVIDERS: dict[str, type[UploadProvider]] = {
    "b2": BackblazeB2UploadProvider,
    "r2": CloudflareR2UploadProvider,
    "mux": MuxUploadProvider,
}


def create_upload_provider(settings: Settings) -> UploadProvider:
    return PROVIDERS[settings.upload_provider](settings)
