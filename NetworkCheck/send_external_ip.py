#!/usr/bin/env python3
"""
External IP Address Notifier

Finds the external IP address (outside the router) by asking several echo
services, and sends it by email when it changed, once per UTC day, and for
the first notifications after a change. Meant to run from cron:

    */15 * * * * cd ~/homely && python -m NetworkCheck.send_external_ip

Pass -v to get feedback when running it from a terminal. To test the
once-a-day path, backdate the state file by a day:

    touch -d yesterday last_ip_address.txt
"""

import argparse
import logging
import sys
from datetime import date
from typing import List, Optional, Sequence

from lib.config import get_config
from lib.logger import SystemLogger
from NetworkCheck import ip_resolver, state_store
from NetworkCheck.ip_resolver import FetchFn, SelectorFn
from NetworkCheck.notification_policy import (
    BURST_LIMIT,
    REASON_ADDRESS_CHANGED,
    REASON_BURST,
    NotificationDecision,
    decide,
)
from NetworkCheck.notifiers import Notifier, build_notifier
from NetworkCheck.state_store import PersistedState, format_date

logger = SystemLogger.get_logger(__name__)

VERBOSE_FLAGS = ("-v", "--verbose")


def run(
    state_file: str,
    services: Sequence[str],
    requested_count: int,
    fetch: FetchFn,
    notifier: Notifier,
    today: Optional[date] = None,
    selector: SelectorFn = ip_resolver.random_selector,
    burst_limit: int = BURST_LIMIT,
) -> NotificationDecision:
    """
    Run one load -> resolve -> decide -> notify -> save cycle.

    The state file is only written when a notification was attempted, and it
    is written even if sending failed. OSError from saving propagates.
    """
    today = today or state_store.utc_today()
    old = state_store.load(state_file, today=today)

    result = ip_resolver.resolve(requested_count, services, fetch, selector)
    # Without consensus the first answer stands in, as long as any service replied
    new_address = result.consensus_address or result.first_observed or ""

    decision = decide(
        old.ip_address,
        old.notifications_sent_today,
        old.last_notified_date,
        today,
        new_address,
        result.diagnostic,
        burst_limit=burst_limit,
    )

    if not decision.should_notify:
        logger.info("No action taken, no changes found.")
        return decision

    logger.info(f"Email sending conditions: {', '.join(decision.reasons)}")
    if old.last_notified_date != today:
        logger.info(f"Last sent (UTC): {format_date(old.last_notified_date)}")
        logger.info(f"Today     (UTC): {format_date(today)}")
    if new_address != old.ip_address:
        logger.info(f"IP Addresses: '{old.ip_address or 'None'}' -> '{new_address or 'None'}'")

    if not notifier.notify(decision.message):
        logger.error(f"Notification failed: {decision.message}")

    # A plain new-day notification does not count towards the burst
    if REASON_ADDRESS_CHANGED in decision.reasons or REASON_BURST in decision.reasons:
        logger.info(
            f"Email message number {decision.updated_counter} for today, {format_date(today)} (UTC)"
        )

    state_store.save(
        state_file,
        PersistedState(new_address, decision.updated_counter, today),
    )
    return decision


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]
    # Verbose flag is case-insensitive: -V, --VERBOSE, --Verbose
    argv = [arg.lower() if arg.lower() in VERBOSE_FLAGS else arg for arg in argv]

    parser = argparse.ArgumentParser(
        description="Email the external IP address when it changes, and at least once a day"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        help="Print diagnostics to stdout",
        action="store_true",
        default=False,
    )
    parser.add_argument("--state_file", help="State file path", default=None)
    parser.add_argument(
        "--num_services", help="Number of echo services to query", type=positive_int, default=None
    )
    args, unknown = parser.parse_known_args(argv)
    args.ignored = unknown
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    cfg = get_config()

    SystemLogger.setup(
        level=logging.DEBUG if args.verbose else logging.INFO,
        console_level=logging.DEBUG if args.verbose else logging.ERROR,
        logging_dir=cfg.paths.logging_dir,
    )

    logger.info("=" * 50)
    logger.info(f"Started: {' '.join(sys.argv)}")
    if args.ignored:
        logger.debug(f"Ignoring arguments: {' '.join(args.ignored)}")

    watch = cfg.ip_watch
    state_file = args.state_file or cfg.paths.state_file
    num_services = args.num_services if args.num_services is not None else watch.num_services

    try:
        notifier = build_notifier(cfg)
    except ValueError as e:
        logger.error(f"Notifier misconfigured: {e}")
        return 2

    def fetch(url: str) -> Optional[str]:
        return ip_resolver.fetch_ip(url, timeout=watch.fetch_timeout)

    try:
        run(
            state_file,
            watch.echo_services,
            num_services,
            fetch,
            notifier,
            burst_limit=watch.burst_limit,
        )
    except OSError as e:
        logger.error(f"State file {state_file} failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
