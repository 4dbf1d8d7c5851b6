#!/usr/bin/env python3
import logging
import requests

PUSHOVER_URL = "https://api.pushover.net/1/messages.json"


class Pushover:
    """Pushover notification client."""

    def __init__(self, user: str, token: str):
        """Initialize Pushover client.

        Args:
            user: Pushover user key
            token: Pushover application token
        """
        self.user = user
        self.token = token

    def send_message(self, message: str, title: str | None = None, priority: int = 0) -> bool:
        """Send a message via Pushover.

        Args:
            message: The message to send
            title: Optional message title
            priority: Message priority (-2 to 2)

        Returns:
            True if message sent successfully, False otherwise
        """
        payload = {
            "token": self.token,
            "user": self.user,
            "message": message,
        }
        if title:
            payload["title"] = title
        if priority != 0:
            payload["priority"] = str(priority)

        try:
            resp = requests.post(PUSHOVER_URL, data=payload, timeout=10)
        except requests.RequestException as e:
            logging.error(f"Error sending Pushover message: {e}")
            return False

        success = resp.status_code == 200
        if success:
            logging.debug(f"Pushover message sent successfully: {resp.status_code}")
        else:
            logging.warning(f"Pushover message failed: {resp.status_code} {resp.reason}")
        return success
