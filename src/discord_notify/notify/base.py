from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Status(str, Enum):
    SUCCESS = "✅"
    FAILURE = "❌"
    WARNING = "⚠️"

    @property
    def color(self) -> int:
        return _COLORS[self]


# Discord embed colors (decimal RGB)
_COLORS: dict[Status, int] = {
    Status.SUCCESS: 3066993,  # 0x2ECC71 green
    Status.FAILURE: 15158332,  # 0xE74C3C red
    Status.WARNING: 16776960,  # 0xFFFF00 yellow
}

_ALIASES: dict[str, Status] = {
    "success": Status.SUCCESS,
    "ok": Status.SUCCESS,
    "failure": Status.FAILURE,
    "fail": Status.FAILURE,
    "error": Status.FAILURE,
    "warning": Status.WARNING,
    "warn": Status.WARNING,
}


def parse_status(raw: str | Status | None) -> Status:
    """
    Map a status argument to a Status.

    Direct emoji comparison: ✅ -> success, ❌ -> failure, anything else -> warning.
    Empty means success. Word aliases (success/failure/warning, ...) are accepted.
    """
    if isinstance(raw, Status):
        return raw
    v = str(raw or "").strip()
    if not v:
        return Status.SUCCESS
    if v == Status.SUCCESS.value:
        return Status.SUCCESS
    if v == Status.FAILURE.value:
        return Status.FAILURE
    return _ALIASES.get(v.lower(), Status.WARNING)


def color_for(status: str | Status | None) -> int:
    return parse_status(status).color


def parse_issue(raw: str | int | None) -> int | None:
    """
    Optional issue number. Accepts "42" or "#42" (ASCII digits, one "#"); empty -> None.
    Raises ValueError for anything that is not a positive integer.
    """
    if raw is None:
        return None
    if isinstance(raw, int):
        v = str(raw)
    else:
        v = str(raw).strip().removeprefix("#").strip()
    if not v:
        return None
    if not (v.isascii() and v.isdigit()) or int(v) <= 0:
        raise ValueError(f"invalid issue number: {raw!r}")
    return int(v)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str = ""
    status: Status = Status.SUCCESS
    issue: int | None = None
    branch: str = "unknown"
    commit: str = "unknown"
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    ok: bool
    status: int | None = None
    error: str | None = None
    attempts: int = 1
