from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from discord_notify.config import get_settings
from discord_notify.utils.log import logger

UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class GitContext:
    branch: str = UNKNOWN
    commit: str = UNKNOWN


def _git(args: list[str], *, cwd: Path | None) -> str:
    s = get_settings()
    try:
        p = subprocess.run(
            [str(s.git_bin), *args],
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            timeout=float(s.git_timeout_sec),
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as ex:
        logger.debug("git_unavailable", args=args, error=str(ex)[:200])
        return ""
    if p.returncode != 0:
        logger.debug("git_failed", args=args, rc=p.returncode, stderr=(p.stderr or "")[:200])
        return ""
    return (p.stdout or "").strip()


def read_git_context(cwd: Path | None = None) -> GitContext:
    """
    Current branch and last commit subject. Never raises; missing values are "unknown".
    """
    branch = _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd)
    commit = _git(["log", "-1", "--pretty=%s"], cwd=cwd)
    return GitContext(branch=branch or UNKNOWN, commit=commit.splitlines()[0] if commit else UNKNOWN)
