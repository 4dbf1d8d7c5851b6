#!/usr/bin/env python3
"""Notification channels for the external IP notifier."""

from typing import Protocol

from lib import Mailer
from lib.config import Channel, Config, EmailConfig, PushoverConfig
from lib.logger import SystemLogger
from lib.MyPushover import Pushover

logger = SystemLogger.get_logger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> bool: ...


class EmailNotifier:
    """Sends the message as both subject and body of one email."""

    def __init__(self, email_cfg: EmailConfig):
        if not email_cfg.to_addr:
            raise ValueError("Email recipient required (set EMAIL_RECIPIENT)")
        self.cfg = email_cfg

    def notify(self, message: str) -> bool:
        logger.info(f"Sending email to {self.cfg.to_addr}...")
        sent = Mailer.sendmail(self.cfg, subject=message, message=message)
        if sent:
            logger.info("...email sent!")
        return sent


class PushoverNotifier:
    def __init__(self, pushover_cfg: PushoverConfig):
        if not pushover_cfg.user or not pushover_cfg.token:
            raise ValueError("Pushover user and token required (set PUSHOVER_USER, PUSHOVER_TOKEN)")
        self.title = pushover_cfg.title
        self.pushover = Pushover(pushover_cfg.user, pushover_cfg.token)

    def notify(self, message: str) -> bool:
        logger.info("Sending pushover message...")
        return self.pushover.send_message(message, title=self.title)


def build_notifier(cfg: Config) -> Notifier:
    """Create the notifier for the configured channel."""
    if cfg.ip_watch.channel == Channel.PUSHOVER:
        return PushoverNotifier(cfg.pushover)
    return EmailNotifier(cfg.email)
