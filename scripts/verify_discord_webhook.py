from __future__ import annotations

import sys

from discord_notify.notify.discord import notify
from discord_notify.notify.webhook import WebhookConfigError


def main() -> int:
    try:
        res = notify(
            title="discord-notify webhook test",
            description="This is a test notification from scripts/verify_discord_webhook.py",
            status="⚠️",
        )
    except WebhookConfigError as ex:
        print(f"verify_discord_webhook: not configured (skipping)\n{ex}", file=sys.stderr)
        return 0

    if not res.ok:
        print(f"verify_discord_webhook: delivery failed ({res.error})", file=sys.stderr)
        return 1

    print("verify_discord_webhook: ok")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
