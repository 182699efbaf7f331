"""
discord-notify: post task-status notifications to a Discord webhook.
"""

__version__ = "0.1.0"
