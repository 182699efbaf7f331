from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from discord_notify import __version__


class PublicConfig(BaseSettings):
    """
    Non-sensitive config with safe defaults.

    Loaded from (in order):
      - process env
      - optional `.env` file
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- webhook delivery ---
    # Local file holding the webhook URL; checked before DISCORD_WEBHOOK_URL.
    webhook_file: Path = Field(default=Path(".discord_webhook"), alias="DISCORD_WEBHOOK_FILE")
    webhook_timeout_sec: float = Field(default=10.0, alias="DISCORD_WEBHOOK_TIMEOUT_SEC")
    # 0 = single attempt (no retry, no backoff)
    webhook_retries: int = Field(default=0, alias="DISCORD_WEBHOOK_RETRIES")
    user_agent: str = Field(
        default=f"discord-notify/{__version__}", alias="DISCORD_NOTIFY_USER_AGENT"
    )

    # --- git context ---
    git_bin: str = Field(default="git", alias="GIT_BIN")
    git_timeout_sec: float = Field(default=5.0, alias="GIT_TIMEOUT_SEC")

    # --- logging ---
    # Unset = log to stderr only (no files written next to the caller).
    log_dir: Path | None = Field(default=None, alias="DISCORD_NOTIFY_LOG_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_max_bytes: int = Field(default=5 * 1024 * 1024, alias="LOG_MAX_BYTES")
    log_backup_count: int = Field(default=3, alias="LOG_BACKUP_COUNT")
