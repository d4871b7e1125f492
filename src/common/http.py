"""HTTP GET with timeout and a bounded retry on transient statuses."""

from __future__ import annotations

import logging
import time

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 10.0
DEFAULT_RETRIES = 1
DEFAULT_RETRY_DELAY_SEC = 1.0
MAX_RETRY_AFTER_SEC = 5.0

RETRYABLE_STATUSES = {429, 503}

USER_AGENT = "newsdesk/0.1 (RSS reader)"


def parse_retry_after(headers) -> float | None:
    """Return the Retry-After delay in seconds (capped), or None if absent or a date."""
    value = headers.get("Retry-After") if headers is not None else None
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return min(seconds, MAX_RETRY_AFTER_SEC)


def get_with_retry(
    url: str,
    timeout: float = DEFAULT_TIMEOUT_SEC,
    retries: int = DEFAULT_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY_SEC,
    headers: dict[str, str] | None = None,
) -> requests.Response:
    """GET a URL, retrying 429/503 responses up to `retries` times.

    Other non-2xx responses are returned as-is; the caller checks `response.ok`.
    """
    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)

    attempt = 0
    while True:
        response = requests.get(url, timeout=timeout, headers=request_headers)
        if response.ok:
            return response

        if response.status_code in RETRYABLE_STATUSES and attempt < retries:
            attempt += 1
            delay = parse_retry_after(response.headers)
            if delay is None:
                delay = retry_delay * attempt
            logger.info(
                "HTTP %d from %s, retrying in %.1fs (attempt %d/%d)",
                response.status_code, url, delay, attempt, retries,
            )
            time.sleep(delay)
            continue

        return response
