from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from discord_notify.config import ConfigError, Settings, get_settings
from discord_notify.utils.log import redact_url, register_secret


class WebhookConfigError(ConfigError):
    pass


@dataclass(frozen=True, slots=True)
class WebhookSource:
    url: str
    source: str  # "file" | "env"
    path: Path | None = None

    @property
    def display_url(self) -> str:
        return redact_url(self.url)


def _read_webhook_file(path: Path) -> str:
    """
    First non-empty line of the webhook file, stripped.
    Missing or empty file -> "".
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""
    except OSError as ex:
        raise WebhookConfigError(f"Cannot read webhook file {path}: {ex}") from ex
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            return line
    return ""


def _check_url(url: str, origin: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise WebhookConfigError(
            f"Webhook URL from {origin} is not an http(s) URL. "
            "Expected something like https://discord.com/api/webhooks/<id>/<token>."
        )
    return url


def missing_config_message(s: Settings) -> str:
    return (
        "No Discord webhook configured.\n"
        f"  - write the webhook URL to {s.webhook_file} (override with DISCORD_WEBHOOK_FILE), or\n"
        "  - export DISCORD_WEBHOOK_URL=https://discord.com/api/webhooks/<id>/<token>\n"
        "Create a webhook in Discord under Server Settings > Integrations > Webhooks."
    )


def resolve_webhook_url(settings: Settings | None = None) -> WebhookSource:
    """
    Resolve the webhook URL.

    Order:
      1. local webhook file (DISCORD_WEBHOOK_FILE, default `.discord_webhook`)
      2. DISCORD_WEBHOOK_URL
    Raises WebhookConfigError when neither is set or the value is not a URL.
    """
    s = settings or get_settings()

    path = Path(s.webhook_file).expanduser()
    from_file = _read_webhook_file(path)
    if from_file:
        register_secret(from_file)
        return WebhookSource(url=_check_url(from_file, str(path)), source="file", path=path)

    secret = s.secret.discord_webhook_url
    from_env = str(secret.get_secret_value() if secret is not None else "").strip()
    if from_env:
        register_secret(from_env)
        return WebhookSource(url=_check_url(from_env, "DISCORD_WEBHOOK_URL"), source="env")

    raise WebhookConfigError(missing_config_message(s))
