"""HTTP retry helpers that understand GitHub's rate limiting."""

import random
import time
from collections.abc import Callable
from typing import TypeVar

import httpx
from rich.console import Console

console = Console()

T = TypeVar("T")

# Transient server-side failures, retried with exponential backoff
RETRIABLE_STATUS_CODES = {
    408,  # Request Timeout
    500,  # Internal Server Error
    502,  # Bad Gateway
    503,  # Service Unavailable
    504,  # Gateway Timeout
}

# Rate-limit waits longer than this are reported instead of slept through
MAX_RATE_LIMIT_WAIT = 60.0


def rate_limit_wait(response: httpx.Response, now: float | None = None) -> float | None:
    """
    Return the seconds GitHub asks us to wait, or None if not rate limited.

    Secondary rate limits answer 403 or 429 with ``Retry-After`` (seconds).
    An exhausted primary limit answers 403 or 429 with
    ``X-RateLimit-Remaining: 0`` and ``X-RateLimit-Reset`` (epoch seconds).

    Args:
        response: Failed response
        now: Current epoch time (``time.time()`` when omitted)
    """
    if response.status_code not in (403, 429):
        return None

    retry_after = response.headers.get("Retry-After", "").strip()
    if retry_after.isdigit():
        return float(retry_after)

    if response.headers.get("X-RateLimit-Remaining") == "0":
        reset = response.headers.get("X-RateLimit-Reset", "").strip()
        if reset.isdigit():
            now = time.time() if now is None else now
            return max(0.0, int(reset) - now)

    return None


def is_retriable_error(error: Exception) -> bool:
    """Check if an error should trigger a retry."""
    if isinstance(error, (httpx.TimeoutException, httpx.ConnectError)):
        return True

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        # 429 is always a rate limit; 403 only when GitHub says so in headers
        if response.status_code == 429:
            return True
        return (
            response.status_code in RETRIABLE_STATUS_CODES
            or rate_limit_wait(response) is not None
        )

    return False


def _backoff(attempt: int, base_delay: float, max_delay: float) -> float:
    delay = min(base_delay * (2**attempt), max_delay)
    return delay * (0.5 + random.random())  # noqa: S311


def retry_request(
    fn: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    max_rate_limit_wait: float = MAX_RATE_LIMIT_WAIT,
    operation_name: str = "GitHub request",
) -> T:
    """
    Call ``fn``, retrying transient failures and sitting out rate limits.

    Rate-limited responses wait as long as GitHub asks (up to
    ``max_rate_limit_wait``); other retriable failures back off exponentially
    with jitter.

    Args:
        fn: Function to execute (should raise httpx exceptions on failure)
        max_retries: Maximum number of retry attempts
        base_delay: Initial backoff delay in seconds
        max_delay: Maximum backoff delay between retries
        max_rate_limit_wait: Longest rate-limit wait before giving up
        operation_name: Name of operation for logging

    Returns:
        Result of fn()

    Raises:
        The last exception if retries are exhausted, the error is not
        retriable, or the rate limit resets too far in the future
    """
    attempt = 0
    while True:
        try:
            return fn()
        except httpx.HTTPError as e:
            if not is_retriable_error(e):
                raise

            if attempt >= max_retries:
                console.print(f"[red]{operation_name} gave up after {attempt + 1} attempts[/]")
                raise

            wait = None
            if isinstance(e, httpx.HTTPStatusError):
                wait = rate_limit_wait(e.response)

            if wait is None:
                delay = _backoff(attempt, base_delay, max_delay)
                console.print(
                    f"[yellow]{operation_name} failed, retry {attempt + 1}/{max_retries} "
                    f"in {delay:.1f}s[/]"
                )
                console.print(f"[dim]  Error: {e}[/]")
            elif wait > max_rate_limit_wait:
                console.print(
                    f"[red]{operation_name} rate limited for {wait:.0f}s, not waiting[/]"
                )
                raise
            else:
                delay = wait
                console.print(
                    f"[yellow]{operation_name} rate limited, retry {attempt + 1}/{max_retries} "
                    f"in {delay:.1f}s[/]"
                )

            time.sleep(delay)
            attempt += 1


def make_api_request(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    max_retries: int = 3,
    operation_name: str = "GitHub request",
    **kwargs: object,
) -> httpx.Response:
    """
    Send one request through ``retry_request``.

    Raises:
        httpx.HTTPStatusError: On non-retriable HTTP errors or exhausted retries
        httpx.TransportError: If the connection keeps failing
    """

    def send() -> httpx.Response:
        response = client.request(method, url, **kwargs)  # type: ignore[arg-type]
        response.raise_for_status()
        return response

    return retry_request(send, max_retries=max_retries, operation_name=operation_name)
