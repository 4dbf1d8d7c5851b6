#!/usr/bin/env python3
"""
Decides whether an invocation sends a notification.

A notification goes out when the address changed, when nothing was sent yet
on the current UTC day, or while fewer than BURST_LIMIT notifications have
been sent for the current address. The counter only grows during the burst:
a notification sent just because the day rolled over leaves it alone.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

BURST_LIMIT = 10

REASON_ADDRESS_CHANGED = "address changed"
REASON_NEW_DAY = "new day"
REASON_BURST = "burst"


@dataclass(frozen=True)
class NotificationDecision:
    should_notify: bool
    message: str
    updated_counter: int
    reasons: Tuple[str, ...] = ()


def render_message(new_address: Optional[str], diagnostic: Optional[str]) -> str:
    if diagnostic:
        return diagnostic
    return f"IP address is '{new_address or ''}'"


def decide(
    old_address: str,
    old_counter: int,
    last_notified_date: date,
    today: date,
    new_address: Optional[str],
    diagnostic: Optional[str] = None,
    burst_limit: int = BURST_LIMIT,
) -> NotificationDecision:
    """
    Apply the notification policy to one invocation.

    Args:
        old_address: Address from the state file ("" if unknown)
        old_counter: Notifications sent for old_address
        last_notified_date: UTC date of the last notification
        today: Current UTC date
        new_address: Consensus address, None when there was no consensus
        diagnostic: No-consensus description, used as the message when set
        burst_limit: Notifications guaranteed before throttling to one a day

    Returns:
        NotificationDecision with the counter to persist
    """
    old_address = old_address or ""
    current = new_address or ""
    message = render_message(new_address, diagnostic)

    address_changed = current != old_address
    new_day = today != last_notified_date
    in_burst = old_counter < burst_limit

    reasons = tuple(
        reason
        for reason, fired in (
            (REASON_ADDRESS_CHANGED, address_changed),
            (REASON_NEW_DAY, new_day),
            (REASON_BURST, in_burst),
        )
        if fired
    )

    if not reasons:
        return NotificationDecision(False, message, old_counter)

    if address_changed:
        counter = 1
    elif in_burst:
        counter = old_counter + 1
    else:
        # Once-a-day notification, burst already done
        counter = old_counter

    return NotificationDecision(True, message, counter, reasons)
