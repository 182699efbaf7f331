from __future__ import annotations

import pytest

from discord_notify.notify.base import Status, color_for, parse_issue, parse_status


@pytest.mark.parametrize(
    ("raw", "color"),
    [
        ("✅", 3066993),
        ("❌", 15158332),
        ("⚠️", 16776960),
    ],
)
def test_status_emoji_selects_color(raw: str, color: int) -> None:
    assert color_for(raw) == color


def test_status_defaults_and_fallbacks() -> None:
    assert parse_status(None) is Status.SUCCESS
    assert parse_status("") is Status.SUCCESS
    assert parse_status("  ") is Status.SUCCESS
    # anything that is not ✅/❌ lands on warning
    assert parse_status("🚧") is Status.WARNING
    assert parse_status("⚠") is Status.WARNING


def test_status_word_aliases() -> None:
    assert parse_status("success") is Status.SUCCESS
    assert parse_status("FAIL") is Status.FAILURE
    assert parse_status("error") is Status.FAILURE
    assert parse_status("warn") is Status.WARNING
    assert parse_status(Status.FAILURE) is Status.FAILURE


def test_parse_issue() -> None:
    assert parse_issue(None) is None
    assert parse_issue("") is None
    assert parse_issue("42") == 42
    assert parse_issue("#7") == 7
    assert parse_issue(12) == 12
    assert parse_issue("#") is None
    for bad in ("abc", "0", "-3", "1.5"):
        with pytest.raises(ValueError):
            parse_issue(bad)


@pytest.mark.parametrize("bad", ["##42", "١٢", "#-1", "4 2"])
def test_parse_issue_rejects_lookalikes(bad: str) -> None:
    with pytest.raises(ValueError):
        parse_issue(bad)


def test_cli_rejects_double_hash_issue() -> None:
    from click.testing import CliRunner

    from discord_notify.cli import cli

    res = CliRunner().invoke(cli, ["Build", "", "✅", "##42", "--dry-run"])
    assert res.exit_code == 2
