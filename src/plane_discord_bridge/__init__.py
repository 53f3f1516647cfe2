"""Plane to Discord webhook bridge.

Receives Plane issue and comment webhooks, verifies their signature, turns
them into Discord embeds and forwards them to a Discord incoming webhook.
"""

__version__ = "0.3.0"
