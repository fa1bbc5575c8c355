# video_digest/transcription/fetcher.py
"""
HTTP GET with bounded retries.

Policy (per call):
- at most config.max_retries attempts, each bounded by config.timeout_ms
  end to end (connect through the last body byte)
- a timed-out attempt is terminal: FetchTimeoutError, no further attempts
- 429 sleeps max(Retry-After, base * 2**attempt) and tries again
- any other non-2xx or transport error sleeps base * 2**attempt and tries again
- exhausting the budget raises FetchError carrying the last status or error

Retry state lives in local variables of fetch(), so one fetcher can serve
concurrent calls. Backoff waits go through a threading.Event and end early
with FetchCancelledError when the caller sets it.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

import httpx

from video_digest.logging_core.logger import log_event
from video_digest.transcription.errors import (
    FetchCancelledError,
    FetchError,
    FetchTimeoutError,
    RateLimitedError,
)
from video_digest.transcription.schema import FetchConfig


USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_4) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/85.0.4183.83 Safari/537.36"
)

DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType({
    "User-Agent": USER_AGENT,
    "Accept-Language": "en-US,en;q=0.9",
})


class FetchState(str, Enum):
    ATTEMPTING = "attempting"
    BACKING_OFF = "backing_off"
    RATE_LIMITED_BACKOFF = "rate_limited_backoff"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Retry-After in seconds -> milliseconds. HTTP-date or junk -> None."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if seconds < 0:
        return None
    return int(seconds * 1000)


class ResilientFetcher:
    """Fetches text bodies under a FetchConfig retry policy."""

    def __init__(
        self,
        config: FetchConfig = FetchConfig(),
        headers: Mapping[str, str] = DEFAULT_HEADERS,
        *,
        client: Optional[httpx.Client] = None,
        sleep: Optional[Callable[[float], None]] = None,
        cancel_event: Optional[threading.Event] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.headers: Mapping[str, str] = MappingProxyType(dict(headers))
        self._client = client
        self._sleep = sleep
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self.logger = logger or logging.getLogger(__name__)

    def cancel(self) -> None:
        self.cancel_event.set()

    def fetch(self, url: str, headers: Optional[Mapping[str, str]] = None) -> str:
        """GET url and return the response body, or raise a FetchError."""
        request_headers = {**self.headers, **(headers or {})}
        if self._client is not None:
            return self._run(self._client, url, request_headers)

        with httpx.Client(follow_redirects=True) as client:
            return self._run(client, url, request_headers)

    def _run(self, client: httpx.Client, url: str, headers: Mapping[str, str]) -> str:
        config = self.config
        timeout = httpx.Timeout(config.timeout_seconds)
        last_error: Optional[BaseException] = None
        last_status: Optional[int] = None
        state = FetchState.ATTEMPTING
        attempt = 0

        while state is not FetchState.SUCCEEDED:
            if state is FetchState.EXHAUSTED:
                message = f"Failed to fetch {url} after {attempt} attempts"
                if last_status is not None:
                    message += f" (last status {last_status})"
                elif last_error is not None:
                    message += f": {last_error}"
                raise FetchError(message, url=url, status_code=last_status, attempts=attempt) from last_error

            if state in (FetchState.BACKING_OFF, FetchState.RATE_LIMITED_BACKOFF):
                delay_ms = config.backoff_ms(attempt - 1)
                if state is FetchState.RATE_LIMITED_BACKOFF and isinstance(last_error, RateLimitedError):
                    delay_ms = max(last_error.retry_after_ms or 0, delay_ms)
                log_event(
                    self.logger,
                    logging.WARNING,
                    "Retrying fetch after backoff",
                    event_type="retry",
                    metadata={"url": url, "attempt": attempt, "delay_ms": delay_ms, "state": state.value},
                )
                self._wait(delay_ms, url, attempt)
                state = FetchState.ATTEMPTING
                continue

            # ATTEMPTING
            if self.cancel_event.is_set():
                raise FetchCancelledError(f"Fetch of {url} cancelled", url=url, attempts=attempt)

            attempt += 1
            try:
                response, body = self._attempt(client, url, headers, timeout)
            except httpx.TimeoutException as exc:
                log_event(
                    self.logger,
                    logging.ERROR,
                    "Fetch attempt timed out",
                    event_type="failure",
                    metadata={"url": url, "attempt": attempt, "timeout_ms": config.timeout_ms},
                )
                raise FetchTimeoutError(
                    f"Timed out after {config.timeout_ms} ms fetching {url}",
                    url=url,
                    attempts=attempt,
                ) from exc
            except httpx.HTTPError as exc:
                last_error, last_status = exc, None
                state = self._next_state(attempt, FetchState.BACKING_OFF)
                continue

            if response.status_code == 429:
                retry_after_ms = parse_retry_after(response.headers.get("Retry-After"))
                last_error = RateLimitedError(
                    f"Rate limited fetching {url}", retry_after_ms=retry_after_ms
                )
                last_status = 429
                state = self._next_state(attempt, FetchState.RATE_LIMITED_BACKOFF)
                continue

            if not response.is_success:
                last_error = None
                last_status = response.status_code
                state = self._next_state(attempt, FetchState.BACKING_OFF)
                continue

            state = FetchState.SUCCEEDED

        log_event(
            self.logger,
            logging.DEBUG,
            "Fetch succeeded",
            event_type="success",
            metadata={"url": url, "attempts": attempt},
        )
        return body or ""

    def _attempt(
        self,
        client: httpx.Client,
        url: str,
        headers: Mapping[str, str],
        timeout: httpx.Timeout,
    ) -> Tuple[httpx.Response, Optional[str]]:
        """
        One GET. Returns the response and, for 2xx only, its body.

        httpx timeouts apply per phase and the read timeout restarts with
        every chunk, so the body is streamed against a deadline as well.
        """
        deadline = time.monotonic() + self.config.timeout_seconds
        with client.stream("GET", url, headers=dict(headers), timeout=timeout) as response:
            if not response.is_success:
                return response, None
            parts = []
            for part in response.iter_text():
                parts.append(part)
                if time.monotonic() > deadline:
                    raise httpx.ReadTimeout(
                        f"Body of {url} not received within {self.config.timeout_ms} ms",
                        request=response.request,
                    )
            return response, "".join(parts)

    def _next_state(self, attempt: int, backoff: FetchState) -> FetchState:
        if attempt >= self.config.max_retries:
            return FetchState.EXHAUSTED
        return backoff

    def _wait(self, delay_ms: int, url: str, attempt: int) -> None:
        seconds = delay_ms / 1000
        if self._sleep is not None:
            self._sleep(seconds)
            cancelled = self.cancel_event.is_set()
        else:
            cancelled = self.cancel_event.wait(seconds)
        if cancelled:
            raise FetchCancelledError(f"Fetch of {url} cancelled during backoff", url=url, attempts=attempt)
