from __future__ import annotations

import logging
import re
import sys
from contextlib import suppress
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from discord_notify.config import ConfigError, Settings, get_settings


def _settings_or_none() -> Settings | None:
    """
    Settings for logger setup; None when the config is invalid so that
    importing the CLI never fails. The CLI reports the config error itself.
    """
    try:
        return get_settings()
    except (ConfigError, ValidationError):
        return None


REDACTED = "***REDACTED***"

# https://discord.com/api[/v10]/webhooks/<id>/<token>
_WEBHOOK_RE = re.compile(r"(?i)(/api/(?:v\d+/)?webhooks/\d+/)[A-Za-z0-9_\-\.]+")
_BEARER_RE = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9_\-\.=]+)")
_URL_CRED_RE = re.compile(r"(?i)([a-z][a-z0-9+\-.]*://)([^:@/\s]+):([^@/\s]+)@")
_KV_RE = re.compile(r"(?i)\b(webhook_url|token|secret|password|api_key)\b\s*=\s*([^\s,;]+)")

# URLs resolved at runtime (e.g. read from the webhook file)
_runtime_secrets: set[str] = set()


def register_secret(value: str | None) -> None:
    v = str(value or "").strip()
    if v:
        _runtime_secrets.add(v)


def _secret_literals() -> list[str]:
    """
    Configured secret values that must never appear in logs.
    Safe to call before settings are fully usable.
    """
    vals: list[str] = sorted(_runtime_secrets, key=len, reverse=True)
    with suppress(Exception):
        sec = get_settings().secret
        v = sec.discord_webhook_url
        if v is not None:
            raw = str(v.get_secret_value() or "").strip()
            if raw:
                vals.append(raw)
    # ignore tiny values to avoid over-redaction
    return [v for v in vals if len(v) >= 8]


def _mask_literal(lit: str) -> str:
    # keep host and webhook id; everything after the id goes
    m = _WEBHOOK_RE.search(lit)
    return lit[: m.end(1)] + REDACTED if m else REDACTED


def _redact_str(s: str) -> str:
    with suppress(Exception):
        for lit in _secret_literals():
            if lit in s:
                s = s.replace(lit, _mask_literal(lit))
    s = _WEBHOOK_RE.sub(lambda m: f"{m.group(1)}{REDACTED}", s)
    s = _URL_CRED_RE.sub(rf"\1{REDACTED}@", s)
    s = _BEARER_RE.sub(f"Bearer {REDACTED}", s)
    s = _KV_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", s)
    return s


def redact_url(url: str) -> str:
    """Display form of a webhook URL: host and webhook id kept, token hidden."""
    return _redact_str(str(url or ""))


def redact_event(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    for k, v in list(event_dict.items()):
        if isinstance(v, str):
            event_dict[k] = _redact_str(v)
    return event_dict


def rename_event_to_msg(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    if "msg" not in event_dict and "event" in event_dict:
        event_dict["msg"] = event_dict.pop("event")
    return event_dict


def _level(name: str | None) -> int:
    lvl = getattr(logging, str(name or "INFO").upper(), None)
    return lvl if isinstance(lvl, int) else logging.INFO


def _configure_structlog() -> structlog.stdlib.BoundLogger:
    s = _settings_or_none()

    root = logging.getLogger()
    root.setLevel(_level(s.log_level if s is not None else None))

    # Avoid duplicates if re-imported
    if getattr(root, "_discord_notify_structlog_configured", False):
        return structlog.get_logger("discord_notify")

    foreign_pre_chain = [
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
        structlog.stdlib.add_log_level,
        redact_event,
        structlog.processors.format_exc_info,
        rename_event_to_msg,
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=foreign_pre_chain,
    )

    root.handlers.clear()

    # File logging is opt-in (DISCORD_NOTIFY_LOG_DIR) so runs leave no files behind
    # in the checkout being reported on. A read-only dir must not stop delivery.
    log_dir = s.log_dir if s is not None else None
    if log_dir is not None:
        try:
            log_path = Path(log_dir) / "discord-notify.log"
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                filename=str(log_path),
                maxBytes=int(s.log_max_bytes),
                backupCount=int(s.log_backup_count),
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError:
            pass

    # stdout is reserved for the CLI's own output
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.stdlib.add_log_level,
            redact_event,
            structlog.processors.format_exc_info,
            rename_event_to_msg,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root._discord_notify_structlog_configured = True
    return structlog.get_logger("discord_notify")


logger = _configure_structlog()


def set_log_level(level: str) -> None:
    """
    Runtime log level override (CLI convenience).
    Does not change handlers/formatters; only raises/lowers filtering level.
    """
    lvl = _level(level)
    root = logging.getLogger()
    root.setLevel(lvl)
    for h in root.handlers:
        h.setLevel(lvl)
