"""Small JSON-over-HTTP client with a per-request deadline.

Wraps a `requests.Session` so API clients only deal with URLs and parsed JSON.
"""

from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any

import requests
from urllib3.exceptions import ReadTimeoutError

from jira_to_pr.errors import HttpStatusError, RequestTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000


@dataclass(frozen=True, slots=True)
class RequestOptions:
    """Per-call request settings."""

    method: str = "GET"
    body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout_ms: int | None = None


class HttpClient:
    """Issue JSON requests with shared base headers and a timeout."""

    def __init__(
        self,
        *,
        headers: dict[str, str] | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        session: requests.Session | None = None,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be a positive integer")

        self._base_headers: dict[str, str] = {
            "Content-Type": "application/json",
            **(headers or {}),
        }
        self._timeout_ms = timeout_ms
        self._session = session or requests.Session()

    @property
    def base_headers(self) -> dict[str, str]:
        return dict(self._base_headers)

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def request(self, url: str, options: RequestOptions | None = None) -> Any:
        """Send a request and return the decoded JSON body.

        The whole exchange (connect, headers and body) must finish within the
        timeout. The call runs on a worker thread that is raced against it.

        Raises:
            HttpStatusError: for a non-2xx response.
            RequestTimeoutError: when the request exceeds the timeout.
        """

        options = options or RequestOptions()
        timeout_ms = options.timeout_ms if options.timeout_ms is not None else self._timeout_ms
        headers = {**self._base_headers, **options.headers}

        result: Future[Any] = Future()
        worker = threading.Thread(
            target=self._send,
            args=(result, options.method, url, headers, options.body, timeout_ms),
            name="http-request",
            daemon=True,
        )
        worker.start()

        try:
            return result.result(timeout=timeout_ms / 1000)
        except TimeoutError as e:
            # Covers the deadline and socket-level timeouts from the worker.
            logger.warning(
                "Request timed out",
                extra={"method": options.method, "url": url, "timeout_ms": timeout_ms},
            )
            raise RequestTimeoutError(timeout_ms) from e

    def _send(
        self,
        result: Future[Any],
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | None,
        timeout_ms: int,
    ) -> None:
        if not result.set_running_or_notify_cancel():
            return
        try:
            resp = self._session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=timeout_ms / 1000,
            )
            logger.debug(
                "HTTP request completed",
                extra={"method": method, "url": url, "status": resp.status_code},
            )
            if not resp.ok:
                raise HttpStatusError(resp.status_code, resp.reason or "")
            result.set_result(resp.json())
        except Exception as e:
            result.set_exception(_translate_timeout(e, timeout_ms))

    def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> Any:
        return self.request(
            url, RequestOptions(method="GET", headers=headers or {}, timeout_ms=timeout_ms)
        )

    def post(
        self,
        url: str,
        data: Any,
        *,
        headers: dict[str, str] | None = None,
        timeout_ms: int | None = None,
    ) -> Any:
        return self.request(
            url,
            RequestOptions(
                method="POST",
                body=json.dumps(data),
                headers=headers or {},
                timeout_ms=timeout_ms,
            ),
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _translate_timeout(error: Exception, timeout_ms: int) -> Exception:
    """Map requests/urllib3 read timeouts to `RequestTimeoutError`."""

    if isinstance(error, requests.Timeout):
        return RequestTimeoutError(timeout_ms)
    # A read timeout while the body is being downloaded is wrapped in
    # ConnectionError by requests.
    if isinstance(error, requests.ConnectionError) and any(
        isinstance(arg, ReadTimeoutError) for arg in error.args
    ):
        return RequestTimeoutError(timeout_ms)
    return error
