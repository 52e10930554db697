"""Configuration management for OneSignal mail delivery."""

from __future__ import annotations

import re
from typing import Sequence

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


def _split_list(value: str | Sequence[str] | None) -> list[str]:
    """Turn delimiter-separated env strings into cleaned lists."""
    if value is None:
        return []
    if isinstance(value, str):
        items = re.split(r"[;,]", value)
    else:
        items = list(value)
    cleaned: list[str] = []
    for item in items:
        trimmed = item.strip()
        if not trimmed:
            continue
        cleaned.append(trimmed)
    return cleaned


class Settings(BaseSettings):
    """Delivery configuration derived from environment variables."""

    onesignal_app_id: str = Field("", alias="ONESIGNAL_APP_ID")
    onesignal_app_key: str = Field("", alias="ONESIGNAL_APP_KEY")
    perform_send_request: bool = Field(True, alias="ONESIGNAL_PERFORM_SEND_REQUEST")
    return_response: bool = Field(False, alias="ONESIGNAL_RETURN_RESPONSE")
    extra_notification_args_raw: str = Field("", alias="ONESIGNAL_EXTRA_NOTIFICATION_ARGS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("onesignal_app_id", "onesignal_app_key", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def extra_notification_args(self) -> list[str]:
        """Notification fields allowed in custom_notification_args beyond the built-in set."""
        return _split_list(self.extra_notification_args_raw)
