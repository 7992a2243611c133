from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    debug: bool = False
    app_name: str
    stage: str
    aws_region: str = Field(alias="AWS_DEFAULT_REGION")

    auth_base_url: str
    auth_api_key: str
    auth_redirect_url: str
    jwt_secret: str
    jwt_audience: str = "authenticated"

    autosave_interval_in_seconds: float = 1.5
    editor_session_ttl_in_seconds: float = 900

    upload_provider: Literal["b2", "r2", "mux"] = "b2"
    upload_max_size_in_bytes: int = 1048576
    upload_allowed_mime_types: list[str] = ["image/*", "video/mp4", "audio/mpeg"]

    b2_endpoint: str | None = None
    b2_region: str = "us-east-005"
    b2_bucket_name: str = "spawnwrite-media"
    b2_public_url: str | None = None
    b2_access_key_id: str | None = None
    b2_secret_access_key: str | None = None

    r2_endpoint: str | None = None
    r2_bucket_name: str = "images"
    r2_public_url: str | None = None
    r2_access_key_id: str | None = None
    r2_secret_access_key: str | None = None

    mux_base_url: str = "https://api.mux.com"
    mux_cors_origin: str = "*"
    mux_token_id: str | None = None
    mux_token_secret: str | None = None
    mux_asset_poll_attempts: int = Field(default=10, ge=1)
    mux_asset_poll_interval_in_seconds: float = 1.0

    @computed_field
    @property
    def posts_table_name(self) -> str:
        return f"{self.stage}-posts"

    @computed_field
    @property
    def drafts_table_name(self) -> str:
        return f"{self.stage}-drafts"
