"""Deadline-bounded, rate-limit aware HTTP client for the Split admin API."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any

import httpx
import structlog

from .config import SplitConfig
from .exceptions import DeadlineExceededError, SplitAdminErrorCodes, SplitApiError

RATE_LIMIT_STATUS = 429
RATE_LIMIT_ORG_HEADER = "X-RateLimit-Reset-Seconds-Org"
RATE_LIMIT_IP_HEADER = "X-RateLimit-Reset-Seconds-IP"

logger = structlog.get_logger(__name__)


def _header_seconds(resp: httpx.Response, name: str) -> int:
    try:
        return int(resp.headers.get(name, "0"))
    except ValueError:
        return 0


def rate_limit_backoff(resp: httpx.Response) -> int:
    """Seconds to wait before retrying a 429 response.

    The organization window wins over the per-IP window when present and nonzero.
    """
    org_seconds = _header_seconds(resp, RATE_LIMIT_ORG_HEADER)
    if org_seconds:
        return org_seconds
    return _header_seconds(resp, RATE_LIMIT_IP_HEADER)


class SplitClient:
    """Synchronous client that retries 429 responses until a fixed deadline.

    The deadline is ``client_timeout`` seconds after construction and bounds
    the total time spent across all calls made with this instance. Every
    attempt checks it before touching the network; there is no retry counter.
    Responses other than 429 are returned as-is, whatever their status.
    """

    def __init__(
        self,
        config: SplitConfig,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._clock = clock
        self._sleep = sleep
        self.expires_at = clock() + config.client_timeout
        self.last_response: httpx.Response | None = None

        headers: dict[str, str] = {
            "Content-Type": config.content_type,
            "Accept": config.accept,
            "User-Agent": config.user_agent,
        }
        headers.update(config.auth_headers())
        headers.update(config.headers)
        self._http = httpx.Client(
            base_url=config.base_url,
            headers=headers,
            timeout=config.request_timeout,
            transport=transport,
        )

    @property
    def config(self) -> SplitConfig:
        return self._config

    def is_expired(self) -> bool:
        return self._clock() >= self.expires_at

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send one logical request, absorbing rate-limit responses.

        ``path`` is relative to the configured base URL, or an absolute URL.
        Raises DeadlineExceededError when the client deadline has passed.
        """
        while True:
            if self.is_expired():
                raise DeadlineExceededError(method, path)
            try:
                resp = self._http.request(method, path, params=params, json=json)
            except httpx.HTTPError as e:
                raise SplitApiError(
                    code=SplitAdminErrorCodes.TRANSPORT_ERROR,
                    message=f"{method} {path} failed: {e}",
                    cause=e,
                ) from e
            self.last_response = resp
            if resp.status_code != RATE_LIMIT_STATUS:
                return resp
            wait = rate_limit_backoff(resp)
            logger.debug("rate limited, sleeping", method=method, path=path, seconds=wait)
            self._sleep(wait)

    def get(self, path: str, *, params: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.request("GET", path, params=params)

    def post(
        self, path: str, json: Any = None, *, params: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return self.request("POST", path, params=params, json=json)

    def put(
        self, path: str, json: Any = None, *, params: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        return self.request("PUT", path, params=params, json=json)

    def patch(self, path: str, json: Any = None) -> httpx.Response:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str, json: Any = None) -> httpx.Response:
        return self.request("DELETE", path, json=json)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> SplitClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
