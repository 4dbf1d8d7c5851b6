#!/usr/bin/env python3
"""
Persisted state for the external IP notifier.

The state file holds "{ip_address},{notifications_sent}". The date of the
last notification is not stored in the file: it is the file's own
modification time as a UTC calendar date, so touching or copying the file
changes it.
"""

import os
import re
import tempfile
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from lib.logger import SystemLogger

logger = SystemLogger.get_logger(__name__)

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


@dataclass(frozen=True)
class PersistedState:
    ip_address: str
    notifications_sent_today: int
    last_notified_date: date


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def format_date(day: date) -> str:
    return day.strftime("%Y/%m/%d")


def parse_content(content: str) -> Tuple[str, int]:
    """Split "{address},{counter}" leniently; malformed parts become "" and 0."""
    address, _, counter_text = content.partition(",")
    match = _LEADING_DIGITS.match(counter_text)
    counter = int(match.group(1)) if match else 0
    return address.strip(), counter


def load(path: str, today: Optional[date] = None) -> PersistedState:
    """
    Read the last known state.

    Args:
        path: State file path
        today: Date used when the state file is missing or cannot be
            stat'ed (default: UTC today)

    Returns:
        PersistedState; defaults to ("", 0, today) when the file is missing
    """
    if not os.path.exists(path):
        logger.debug(f"No state file at {path}")
        return PersistedState("", 0, today or utc_today())

    try:
        mtime = os.path.getmtime(path)
    except OSError as e:
        logger.warning(f"Could not stat state file {path}: {e}")
        return PersistedState("", 0, today or utc_today())
    file_date = datetime.fromtimestamp(mtime, tz=timezone.utc).date()

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read state file {path}: {e}")
        content = ",0"

    address, counter = parse_content(content)
    return PersistedState(address, counter, file_date)


def save(path: str, state: PersistedState) -> None:
    """
    Atomically overwrite the state file with "{address},{counter}".

    The write refreshes the file's mtime, which becomes the new
    last-notified date. OSError propagates to the caller.
    """
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".ipstate-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(f"{state.ip_address},{state.notifications_sent_today}")
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug(f"Saved state {state.ip_address},{state.notifications_sent_today} to {path}")
