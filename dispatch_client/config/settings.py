from __future__ import annotations

from typing import Dict, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from dispatch_client.constants import (
    DEFAULT_CALLBACK_WORKERS,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_READ_TIMEOUT_SECONDS,
    SECRET_KIND,
)
from dispatch_client.domain.http import Scheme
from dispatch_client.ports.decoder import DateDecoding


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_scheme: Scheme = Field(Scheme.SECURE, validation_alias="API_SCHEME")
    api_host: str = Field(..., validation_alias="API_HOST")
    api_port: Optional[int] = Field(None, validation_alias="API_PORT")
    api_base_path: Optional[str] = Field(None, validation_alias="API_BASE_PATH")
    # JSON object in the environment, e.g. API_HEADERS='{"Accept": "application/json"}'
    api_headers: Dict[str, str] = Field(default_factory=dict, validation_alias="API_HEADERS")

    api_secret_kind: str = Field(SECRET_KIND.NONE, validation_alias="API_SECRET_KIND")
    api_secret_name: str = Field("", validation_alias="API_SECRET_NAME")
    api_secret_value: SecretStr = Field(SecretStr(""), validation_alias="API_SECRET_VALUE")

    fetch_connect_timeout_seconds: float = Field(
        DEFAULT_CONNECT_TIMEOUT_SECONDS, validation_alias="FETCH_CONNECT_TIMEOUT_SECONDS"
    )
    fetch_read_timeout_seconds: float = Field(
        DEFAULT_READ_TIMEOUT_SECONDS, validation_alias="FETCH_READ_TIMEOUT_SECONDS"
    )
    fetch_user_agent: str = Field("", validation_alias="FETCH_USER_AGENT")

    date_decoding: DateDecoding = Field(DateDecoding.ISO8601, validation_alias="DATE_DECODING")
    callback_workers: int = Field(DEFAULT_CALLBACK_WORKERS, validation_alias="CALLBACK_WORKERS")
