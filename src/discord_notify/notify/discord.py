from __future__ import annotations

import json
import random
import time
import urllib.error
import urllib.request
from contextlib import suppress
from pathlib import Path

from discord_notify.config import get_settings
from discord_notify.utils.log import logger
from discord_notify.vcs import read_git_context

from .base import DeliveryResult, Notification, Status, parse_issue, parse_status
from .webhook import resolve_webhook_url

# Discord message limits
MAX_CONTENT = 2000
MAX_EMBED_TITLE = 256
MAX_EMBED_DESCRIPTION = 4096

_RETRY_STATUSES = {408, 425, 429}
_MAX_DELAY_SEC = 6.0


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def _describe(n: Notification) -> str:
    lines = [f"**Branch:** `{n.branch}`", f"**Commit:** {n.commit}"]
    if n.issue is not None:
        lines.append(f"**Issue:** #{n.issue}")
    body = "\n".join(lines)
    desc = (n.description or "").strip()
    return f"{desc}\n\n{body}" if desc else body


def build_payload(n: Notification) -> dict:
    """
    Discord webhook body: a content line plus one embed.
    """
    heading = f"{n.status.value} {n.title}"
    return {
        "content": _clip(heading, MAX_CONTENT),
        "embeds": [
            {
                "title": _clip(heading, MAX_EMBED_TITLE),
                "description": _clip(_describe(n), MAX_EMBED_DESCRIPTION),
                "color": n.status.color,
                "timestamp": n.timestamp.isoformat(),
            }
        ],
    }


def _retry_after(ex: urllib.error.HTTPError) -> float | None:
    raw = None
    with suppress(Exception):
        raw = ex.headers.get("Retry-After") if ex.headers is not None else None
    if raw is None:
        with suppress(Exception):
            raw = json.loads(ex.read().decode("utf-8") or "{}").get("retry_after")
    try:
        return max(0.0, float(raw)) if raw is not None else None
    except (TypeError, ValueError):
        return None


def _sleep_backoff(attempt: int, hint: float | None = None) -> None:
    # Exponential backoff with jitter; capped.
    if hint is not None:
        delay = min(_MAX_DELAY_SEC, hint)
    else:
        delay = min(_MAX_DELAY_SEC, 0.5 * (2 ** max(0, attempt))) + random.random() * 0.25
    time.sleep(delay)


def _post_json(*, url: str, body: dict, timeout_sec: float, user_agent: str) -> int:
    data = json.dumps(body, ensure_ascii=False).encode("utf-8")
    req = urllib.request.Request(url, data=data, method="POST")
    req.add_header("Content-Type", "application/json")
    # Discord rejects urllib's default agent.
    req.add_header("User-Agent", user_agent)
    with urllib.request.urlopen(req, timeout=float(timeout_sec)) as resp:
        return int(getattr(resp, "status", 200) or 200)


def send_notification(
    n: Notification,
    url: str,
    *,
    timeout_sec: float | None = None,
    retries: int | None = None,
) -> DeliveryResult:
    """
    Best-effort delivery of one notification.

    Returns a DeliveryResult; never raises for delivery failures.
    """
    s = get_settings()
    timeout_sec = float(timeout_sec if timeout_sec is not None else s.webhook_timeout_sec)
    retries = max(0, int(retries if retries is not None else s.webhook_retries))
    body = build_payload(n)

    ok = False
    attempts = 0
    last_status: int | None = None
    last_error: str | None = None
    for attempt in range(retries + 1):
        attempts = attempt + 1
        try:
            st = _post_json(url=url, body=body, timeout_sec=timeout_sec, user_agent=str(s.user_agent))
            last_status = st
            if 200 <= st < 300:
                ok = True
                last_error = None
                break
            last_error = f"unexpected status {st}"
            if (st in _RETRY_STATUSES or st >= 500) and attempt < retries:
                _sleep_backoff(attempt)
                continue
            break
        except urllib.error.HTTPError as ex:
            last_status = int(ex.code)
            last_error = f"HTTP {ex.code} {ex.reason}"
            if (last_status in _RETRY_STATUSES or last_status >= 500) and attempt < retries:
                _sleep_backoff(attempt, _retry_after(ex) if last_status == 429 else None)
                continue
            break
        except Exception as ex:
            last_error = str(getattr(ex, "reason", None) or ex)[:200]
            if attempt < retries:
                _sleep_backoff(attempt)
                continue
            break

    # never log the URL itself; the redactor covers stray copies
    logger.info(
        "discord_notify",
        ok=ok,
        status=last_status,
        error=last_error,
        attempts=attempts,
        notify_status=n.status.name.lower(),
        issue=n.issue,
    )
    return DeliveryResult(ok=ok, status=last_status, error=last_error, attempts=attempts)


def make_notification(
    title: str = "Task completed",
    description: str = "",
    status: str | Status | None = Status.SUCCESS,
    issue: str | int | None = None,
    *,
    cwd: Path | None = None,
) -> Notification:
    git = read_git_context(cwd)
    return Notification(
        title=str(title or "Task completed"),
        description=str(description or ""),
        status=parse_status(status),
        issue=parse_issue(issue),
        branch=git.branch,
        commit=git.commit,
    )


def notify(
    title: str = "Task completed",
    description: str = "",
    status: str | Status | None = Status.SUCCESS,
    issue: str | int | None = None,
    *,
    cwd: Path | None = None,
) -> DeliveryResult:
    """
    Resolve the webhook, gather git context and post one notification.

    Raises WebhookConfigError when no webhook is configured; delivery
    failures are returned, not raised.
    """
    hook = resolve_webhook_url()
    n = make_notification(title, description, status, issue, cwd=cwd)
    return send_notification(n, hook.url)
