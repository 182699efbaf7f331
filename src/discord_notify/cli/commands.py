from __future__ import annotations

import json

import click

from discord_notify.config import get_safe_config_report, get_settings
from discord_notify.notify.base import parse_issue
from discord_notify.notify.discord import build_payload, make_notification, send_notification
from discord_notify.notify.webhook import WebhookConfigError, resolve_webhook_url
from discord_notify.utils.log import set_log_level


def _issue_callback(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    try:
        parse_issue(value)
    except ValueError as ex:
        raise click.BadParameter(str(ex)) from ex
    return value


@click.command(name="send")
@click.argument("title", required=False, default="Task completed")
@click.argument("description", required=False, default="")
@click.argument("status", required=False, default="✅")
@click.argument("issue", required=False, default=None, callback=_issue_callback)
@click.option("--dry-run", is_flag=True, default=False, help="Print the JSON payload instead of sending.")
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this run.")
def send(
    title: str,
    description: str,
    status: str,
    issue: str | None,
    dry_run: bool,
    log_level: str | None,
) -> None:
    """
    Post a notification to the configured Discord webhook.

    STATUS is ✅ (success), ❌ (failure) or anything else (warning).
    Delivery failures are reported but never change the exit code.
    """
    if log_level:
        set_log_level(log_level)

    n = make_notification(title, description, status, issue)
    if dry_run:
        click.echo(json.dumps(build_payload(n), ensure_ascii=False, indent=2))
        return

    try:
        hook = resolve_webhook_url()
    except WebhookConfigError as ex:
        click.echo(f"❌ {ex}", err=True)
        raise SystemExit(1) from ex

    result = send_notification(n, hook.url)
    if result.ok:
        click.echo(f"✅ Discord notification sent: {n.title}")
    else:
        click.echo(f"⚠️ Discord notification rejected: {result.error or 'unknown error'}")


@click.command(name="config")
@click.option("--json", "json_flag", is_flag=True, default=False, help="Print the full report as JSON.")
def config(json_flag: bool) -> None:
    """
    Show where the webhook comes from (URL redacted) and delivery settings.
    """
    s = get_settings()
    try:
        hook = resolve_webhook_url(s)
    except WebhookConfigError as ex:
        hook = None
        err = str(ex)
    else:
        err = None

    if json_flag:
        report = get_safe_config_report()
        report["webhook"] = (
            {"source": hook.source, "url": hook.display_url} if hook is not None else None
        )
        click.echo(json.dumps(report, indent=2, sort_keys=True))
    else:
        if hook is not None:
            where = f"file {hook.path}" if hook.source == "file" else "env DISCORD_WEBHOOK_URL"
            click.echo(f"Webhook: {hook.display_url} (from {where})")
        click.echo(f"Timeout: {float(s.webhook_timeout_sec)}s")
        click.echo(f"Retries: {int(s.webhook_retries)}")

    if hook is None:
        click.echo(f"❌ {err}", err=True)
        raise SystemExit(1)


def add_commands(cli_group) -> None:
    cli_group.add_command(send)
    cli_group.add_command(config)


__all__ = ["add_commands", "send", "config"]
