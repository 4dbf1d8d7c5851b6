#!/usr/bin/env python3
"""
External IP resolution by consensus.

Queries a random subset of plain-text echo services and only trusts the
answer when every queried service returned the same non-empty address.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import requests

from lib.logger import SystemLogger

logger = SystemLogger.get_logger(__name__)

# api.ipify.org appends a "\n" to the address.
# whatismyip.akamai.com is fast and reliable but does not support HTTPS.
ECHO_SERVICES = [
    "https://api.ipify.org/",
    "https://icanhazip.com/",
    "https://ident.me/",
    "https://ipecho.net/plain",
    "http://whatismyip.akamai.com",
]

FetchFn = Callable[[str], Optional[str]]
SelectorFn = Callable[[Sequence[str], int], List[str]]


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of one resolution attempt."""

    consensus_address: Optional[str]
    diagnostic: Optional[str]
    responses: Dict[str, Optional[str]] = field(default_factory=dict)
    # First non-empty answer, kept even without consensus
    first_observed: Optional[str] = None


def fetch_ip(url: str, timeout: int = 10) -> Optional[str]:
    """
    Fetch the caller's address from a single echo service.

    Returns:
        The trimmed response body, or None on connection errors, non-2xx
        responses and empty bodies.
    """
    try:
        logger.debug(f"Trying IP service: {url}")
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Failed to get IP from {url}: {e}")
        return None

    body = response.text.strip()
    if not body:
        logger.warning(f"Empty response from {url}")
        return None
    logger.debug(f"Got IP {body} from {url}")
    return body


def random_selector(services: Sequence[str], count: int) -> List[str]:
    return random.sample(list(services), count)


def format_diagnostic(responses: Dict[str, Optional[str]]) -> str:
    listing = ", ".join(f"{url} -> {body or 'None'}" for url, body in responses.items())
    return f"No consensus. IP addresses: {listing}"


def resolve(
    requested_count: int,
    services: Sequence[str],
    fetch: FetchFn = fetch_ip,
    selector: SelectorFn = random_selector,
) -> ResolutionResult:
    """
    Resolve the external IP address from several echo services.

    Args:
        requested_count: Number of services to query, clamped to len(services)
        services: Candidate echo service URLs
        fetch: Returns the trimmed body for a URL, or None on failure
        selector: Picks `count` distinct services; random by default

    Returns:
        ResolutionResult with the agreed address, or no address and a
        diagnostic naming every queried URL and what it returned. The first
        non-empty answer is reported as first_observed either way.

    Raises:
        ValueError: If no services are given or requested_count < 1
    """
    if not services:
        raise ValueError("At least one echo service is required")
    if requested_count < 1:
        raise ValueError(f"requested_count must be positive, got {requested_count}")

    count = min(requested_count, len(services))
    selected = selector(services, count)

    responses: Dict[str, Optional[str]] = {}
    for url in selected:
        body = fetch(url)
        responses[url] = body.strip() if body else None

    # Duplicates count as responders but collapse into one distinct value
    valid = [body for body in responses.values() if body]
    if len(valid) == count and len(set(valid)) == 1:
        return ResolutionResult(valid[0], None, responses, valid[0])

    diagnostic = format_diagnostic(responses)
    logger.info(f"Special case: {diagnostic}")
    first_observed = valid[0] if valid else None
    return ResolutionResult(None, diagnostic, responses, first_observed)
