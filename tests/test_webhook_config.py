from __future__ import annotations

import json
from pathlib import Path

import pytest

from config.settings import get_safe_config_report
from discord_notify.config import ConfigError, get_settings
from discord_notify.notify.webhook import WebhookConfigError, resolve_webhook_url
from tests._fakes import WEBHOOK_URL

OTHER_URL = "https://discord.com/api/webhooks/999/from-env-token-value"


def test_missing_config_is_fatal() -> None:
    with pytest.raises(WebhookConfigError) as ei:
        resolve_webhook_url()
    msg = str(ei.value)
    assert ".discord_webhook" in msg
    assert "DISCORD_WEBHOOK_URL" in msg
    assert isinstance(ei.value, ConfigError)


def test_env_source(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", f"  {OTHER_URL}  ")
    get_settings.cache_clear()
    hook = resolve_webhook_url()
    assert hook.source == "env"
    assert hook.url == OTHER_URL


def test_file_wins_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    Path(".discord_webhook").write_text(f"\n# team channel\n{WEBHOOK_URL}\n", encoding="utf-8")
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", OTHER_URL)
    get_settings.cache_clear()
    hook = resolve_webhook_url()
    assert hook.source == "file"
    assert hook.url == WEBHOOK_URL


def test_empty_file_falls_back_to_env(monkeypatch: pytest.MonkeyPatch) -> None:
    Path(".discord_webhook").write_text("\n   \n", encoding="utf-8")
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", OTHER_URL)
    get_settings.cache_clear()
    assert resolve_webhook_url().source == "env"


def test_custom_webhook_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    p = tmp_path / "hooks" / "discord.txt"
    p.parent.mkdir()
    p.write_text(WEBHOOK_URL, encoding="utf-8")
    monkeypatch.setenv("DISCORD_WEBHOOK_FILE", str(p))
    get_settings.cache_clear()
    hook = resolve_webhook_url()
    assert hook.path == p
    assert hook.url == WEBHOOK_URL


def test_non_url_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", "not-a-url")
    get_settings.cache_clear()
    with pytest.raises(WebhookConfigError):
        resolve_webhook_url()


def test_display_url_hides_token() -> None:
    Path(".discord_webhook").write_text(WEBHOOK_URL, encoding="utf-8")
    hook = resolve_webhook_url()
    assert "abcDEF_ghiJKL" not in hook.display_url
    assert "/api/webhooks/123456789012345678/" in hook.display_url


def test_safe_config_report_has_no_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_WEBHOOK_URL", WEBHOOK_URL)
    get_settings.cache_clear()
    report = get_safe_config_report()
    assert report["secrets"]["discord_webhook_url"] == "SET"
    assert WEBHOOK_URL not in json.dumps(report)


def test_invalid_timeout_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_WEBHOOK_TIMEOUT_SEC", "0")
    get_settings.cache_clear()
    with pytest.raises(ConfigError):
        get_settings()
