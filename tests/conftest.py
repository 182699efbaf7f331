from __future__ import annotations

import os
import tempfile

import pytest

# Logging is configured on first import; keep its file out of the checkout.
os.environ.setdefault("DISCORD_NOTIFY_LOG_DIR", tempfile.mkdtemp(prefix="dn_logs_"))

from discord_notify.config import get_settings  # noqa: E402



@pytest.fixture(autouse=True)
def _test_env(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    root = tmp_path_factory.mktemp("dn_test")
    monkeypatch.chdir(root)
    for name in ("DISCORD_WEBHOOK_URL", "DISCORD_WEBHOOK_FILE", "DISCORD_WEBHOOK_RETRIES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DISCORD_WEBHOOK_TIMEOUT_SEC", "2")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
