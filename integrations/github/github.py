#!/usr/bin/env python3

"""Helpers for talking to GitHub's rate limited REST API."""

from __future__ import annotations

import json
import socket
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any
from urllib.parse import urljoin, urlsplit

import requests
from requests.structures import CaseInsensitiveDict

from .links import parse_link_header
from .models import (
    LINK_HEADER,
    MAX_ATTEMPTS,
    RATE_LIMIT_PATH,
    RATE_LIMIT_REMAINING_HEADER,
    RATE_LIMIT_RESET_HEADER,
    READ_CHUNK_SIZE,
    ClientConfig,
    Fatal,
    FinalOutcome,
    GitHubAPIError,
    GitHubNetworkError,
    GitHubRateLimitError,
    GitHubTimeoutError,
    QuotaExceeded,
    RequestOutcome,
    Success,
    TimedOut,
)

RetryListener = Callable[[str, "QuotaExceeded | TimedOut"], None]


def _parse_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _error_message(status: int, content: bytes, url: str) -> str:
    """Build a readable message for an error response."""
    hostname = urlsplit(url).hostname

    details = ""
    try:
        data = json.loads(content)
        if isinstance(data, dict) and data.get("message"):
            details = f" - {data['message']}"
    except ValueError:
        pass

    if status == 401:
        return f"Authentication failed for {hostname}{details}. Check your GitHub token."
    if status == 403:
        return f"Access forbidden to {hostname}{details}. Check token permissions."
    if status == 404:
        return f"Endpoint not found: {url}{details}"
    if status >= 500:
        return f"Server error on {hostname}{details}. Try again later."
    return f"HTTP {status} from {hostname}{details}"


def describe_retry(outcome: QuotaExceeded | TimedOut) -> str:
    """Return a short status label announcing a pending retry."""
    delay_ms = int(outcome.retry_delay * 1000)
    if isinstance(outcome, QuotaExceeded):
        return f"Rate Limit Exceeded! Retrying in {delay_ms} ms"
    return f"Request Timed Out! Retrying in {delay_ms} ms"


class RestAPI:
    """Issues single GET requests and classifies what came back."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or ClientConfig.from_env()
        if not self.config.token:
            raise GitHubAPIError("GITHUB_TOKEN environment variable not set.")
        self.token = self.config.token
        self._clock = clock

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def _url(self, target: str) -> str:
        """Resolve *target* against the base URL unless it is already absolute."""
        if urlsplit(target).scheme:
            return target
        return urljoin(self.config.base_url.rstrip("/") + "/", target.lstrip("/"))

    def _quota_exceeded(self, headers: CaseInsensitiveDict) -> QuotaExceeded:
        reset = _parse_int(headers.get(RATE_LIMIT_RESET_HEADER))
        delay = 0.0 if reset is None else reset - self._clock()
        # Clock skew can put the reset instant in the past
        return QuotaExceeded(rate_remaining=0, retry_delay=max(0.0, delay))

    def _download(
        self,
        url: str,
        timeout: float,
        cancelled: threading.Event,
        started: list[requests.Response],
        result: Future,
    ) -> None:
        """Worker body: GET *url* and read its body until done or cancelled."""
        try:
            response = requests.get(url, headers=self._headers, timeout=timeout, stream=True)
            started.append(response)
            chunks = []
            try:
                for chunk in response.iter_content(READ_CHUNK_SIZE):
                    if cancelled.is_set():
                        break
                    chunks.append(chunk)
            finally:
                response.close()
            result.set_result((response, b"".join(chunks)))
        except Exception as exc:
            # Re-raised in the caller by result.result()
            result.set_exception(exc)

    @staticmethod
    def _abort(started: list[requests.Response]) -> None:
        """Shut down the socket of an in-flight response so its worker returns."""
        for response in started:
            sock = getattr(getattr(response.raw, "connection", None), "sock", None)
            if sock is None:
                continue
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass

    def fetch(self, target: str, timeout: float | None = None) -> RequestOutcome:
        """Issue exactly one GET to *target* and classify the result.

        The whole exchange, headers and body, must finish within *timeout*
        seconds of wall-clock time. Past that the request is abandoned, its
        socket shut down and ``TimedOut`` returned.

        Args:
            target: Path relative to the API root (``/repos/o/r/comments``)
                or an absolute URL taken from a pagination link.
            timeout: Seconds to wait for the response; defaults to the
                configured timeout.

        Returns:
            One of ``Success``, ``QuotaExceeded``, ``TimedOut`` or ``Fatal``.
        """
        url = self._url(target)
        timeout = self.config.timeout if timeout is None else timeout

        cancelled = threading.Event()
        started: list[requests.Response] = []
        result: Future = Future()
        threading.Thread(
            target=self._download,
            args=(url, timeout, cancelled, started, result),
            name="github-fetch",
            daemon=True,
        ).start()
        try:
            response, content = result.result(timeout=timeout)
        except FutureTimeoutError:
            cancelled.set()
            self._abort(started)
            return TimedOut(retry_delay=self.config.retry_delay)
        except requests.exceptions.Timeout:
            return TimedOut(retry_delay=self.config.retry_delay)
        except requests.exceptions.ConnectionError as exc:
            return Fatal(f"Failed to connect to {url}: {exc}", error=GitHubNetworkError)
        except requests.exceptions.RequestException as exc:
            return Fatal(f"Request to {url} failed: {exc}", error=GitHubNetworkError)

        headers = CaseInsensitiveDict(response.headers)
        remaining = _parse_int(headers.get(RATE_LIMIT_REMAINING_HEADER))

        if response.status_code >= 400:
            if response.status_code == 403 and remaining == 0:
                return self._quota_exceeded(headers)
            return Fatal(_error_message(response.status_code, content, url), status_code=response.status_code)

        try:
            body = json.loads(content)
        except ValueError:
            # 202 means GitHub is still computing statistics and sends no body
            if response.status_code != 202:
                return Fatal(f"Invalid JSON in response from {url}", status_code=response.status_code)
            body = None

        return Success(
            body=body,
            rate_remaining=remaining,
            links=parse_link_header(headers.get(LINK_HEADER)),
        )

    def get_rate_limit(self) -> int:
        """Return the remaining core rate limit for the configured token."""
        outcome = self.fetch(RATE_LIMIT_PATH)
        if not isinstance(outcome, Success):
            raise GitHubAPIError(f"Could not read rate limit: {outcome}")
        try:
            return int(outcome.body["resources"]["core"]["remaining"])
        except (KeyError, TypeError, ValueError) as exc:
            raise GitHubAPIError(f"Unexpected rate limit payload: {outcome.body!r}") from exc


class RetryOrchestrator:
    """Runs a logical request, retrying a recoverable failure exactly once."""

    def __init__(
        self,
        client: RestAPI,
        sleep: Callable[[float], None] = time.sleep,
        on_retry: RetryListener | None = None,
    ) -> None:
        self.client = client
        self._sleep = sleep
        self.on_retry = on_retry

    def execute(self, target: str, is_retry: bool = False) -> FinalOutcome:
        """Fetch *target*, sleeping and retrying once on quota or timeout.

        A recoverable failure on the retried attempt resolves to ``Fatal``;
        there is never a third attempt. ``Fatal`` outcomes are returned as is.
        """
        attempt = MAX_ATTEMPTS if is_retry else 1
        while True:
            outcome = self.client.fetch(target)
            if isinstance(outcome, (Success, Fatal)):
                return outcome
            if attempt >= MAX_ATTEMPTS:
                error = GitHubRateLimitError if isinstance(outcome, QuotaExceeded) else GitHubTimeoutError
                return Fatal("Retry failed.", error=error)
            if self.on_retry is not None:
                self.on_retry(target, outcome)
            self._sleep(outcome.retry_delay)
            attempt += 1

    def get(self, target: str) -> Success:
        """Like :meth:`execute` but raises ``GitHubAPIError`` on failure."""
        outcome = self.execute(target)
        if isinstance(outcome, Fatal):
            raise outcome.to_exception()
        return outcome
