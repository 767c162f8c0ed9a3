"""Shared base for the resource services."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

import httpx

from .client import SplitClient
from .exceptions import NotFoundError, SplitAdminErrorCodes, SplitApiError

T = TypeVar("T")


def find_first(items: Iterable[T], predicate: Callable[[T], bool], kind: str, key: str) -> T:
    """Linear scan used where the API has no single-item endpoint."""
    for item in items:
        if predicate(item):
            return item
    raise NotFoundError(kind, key)


class Service:
    """Base class of every resource service; holds the shared client."""

    def __init__(self, client: SplitClient) -> None:
        self._client = client

    def _handle_error(self, resp: httpx.Response, context: str) -> None:
        if resp.status_code >= 400:
            raise SplitApiError(
                code=SplitAdminErrorCodes.HTTP_ERROR,
                message=f"{context}: HTTP {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
                response=resp,
            )

    def _call(
        self,
        method: str,
        path: str,
        context: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        resp = self._client.request(method, path, params=params, json=json)
        self._handle_error(resp, context)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text
