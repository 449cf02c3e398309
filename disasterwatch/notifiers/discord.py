# disasterwatch/notifiers/discord.py
# Discord webhook delivery. One POST per update; failures are logged and
# reported as False so the poll loop keeps running.

from __future__ import annotations
import json
import logging
from typing import Optional

import requests

from .base import Notifier
from .templates import render_payload
from ..config import (
    DISCORD_AVATAR_URL,
    DISCORD_USERNAME,
    DISCORD_WEBHOOK_URL,
    DRY_RUN,
    SCRAPE_URL,
    WEBHOOK_TIMEOUT,
)
from ..fetchers.base import Update

LOG = logging.getLogger("disasterwatch")


class DiscordNotifier(Notifier):
    name = "discord"

    def __init__(
        self,
        webhook_url: str = DISCORD_WEBHOOK_URL,
        username: str = DISCORD_USERNAME,
        avatar_url: str = DISCORD_AVATAR_URL,
        dashboard_url: str = SCRAPE_URL,
        dry_run: bool = DRY_RUN,
        timeout: int = WEBHOOK_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.webhook_url = webhook_url
        self.username = username
        self.avatar_url = avatar_url
        self.dashboard_url = dashboard_url
        self.dry_run = dry_run
        self.timeout = timeout
        self._session = session

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def notify(self, update: Update) -> bool:
        if not self.webhook_url:
            LOG.info("Discord webhook URL not configured, skipping notification")
            return False

        LOG.info("Sending Discord notification for update: %r", update.title)
        payload = render_payload(update, self.username, self.avatar_url, self.dashboard_url)

        if self.dry_run:
            LOG.info("[DRY RUN] Would post to Discord:\n%s", json.dumps(payload, indent=2, ensure_ascii=False))
            return True

        poster = self._session or requests
        try:
            r = poster.post(self.webhook_url, json=payload, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            LOG.error("Failed to send Discord notification: %s", e)
            return False

        LOG.info("Discord notification sent successfully")
        return True
