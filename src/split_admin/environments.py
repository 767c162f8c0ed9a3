"""Environments service, including per-environment segment keys."""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote

from .models import Environment, EnvironmentRequest, Page, Segment, SegmentKeys
from .service import Service, find_first

SEGMENT_KEYS_PAGE_SIZE = 100


class EnvironmentsService(Service):
    """Environments have no single-item GET; lookups scan the listing."""

    def list(self, workspace_id: str) -> list[Environment]:
        data = self._call(
            "GET", f"/environments/ws/{workspace_id}", f"list_environments({workspace_id})"
        )
        return [Environment.from_dict(e) for e in data or []]

    def find_by_id(self, workspace_id: str, environment_id: str) -> Environment:
        return find_first(
            self.list(workspace_id),
            lambda e: e.id == environment_id,
            "environment",
            environment_id,
        )

    def find_by_name(self, workspace_id: str, name: str) -> Environment:
        return find_first(self.list(workspace_id), lambda e: e.name == name, "environment", name)

    def create(self, workspace_id: str, request: EnvironmentRequest) -> Environment:
        data = self._call(
            "POST",
            f"/environments/ws/{workspace_id}",
            f"create_environment({workspace_id})",
            json=request.to_dict(),
        )
        return Environment.from_dict(data)

    def update(
        self, workspace_id: str, environment_id: str, request: EnvironmentRequest
    ) -> Environment:
        """Patch name and/or production flag. The API takes every value as a string."""
        ops = []
        if request.name is not None:
            ops.append({"op": "replace", "path": "/name", "value": request.name})
        if request.production is not None:
            ops.append(
                {
                    "op": "replace",
                    "path": "/production",
                    "value": "true" if request.production else "false",
                }
            )
        data = self._call(
            "PATCH",
            f"/environments/ws/{workspace_id}/{environment_id}",
            f"update_environment({environment_id})",
            json=ops,
        )
        return Environment.from_dict(data)

    def delete(self, workspace_id: str, environment_id: str) -> None:
        """Delete an environment. Its API keys must be revoked first."""
        self._call(
            "DELETE",
            f"/environments/ws/{workspace_id}/{environment_id}",
            f"delete_environment({environment_id})",
        )

    def list_segments(self, workspace_id: str, environment_id: str) -> Page[Segment]:
        data = self._call(
            "GET",
            f"/segments/ws/{workspace_id}/environments/{environment_id}",
            f"list_segments({environment_id})",
        )
        return Page.from_dict(data or {}, Segment.from_dict)

    def _segment_path(self, environment_id: str, segment_name: str) -> str:
        return f"/segments/{environment_id}/{quote(segment_name, safe='')}"

    def get_segment_keys(
        self,
        environment_id: str,
        segment_name: str,
        offset: int = 0,
        limit: int = SEGMENT_KEYS_PAGE_SIZE,
    ) -> SegmentKeys:
        data = self._call(
            "GET",
            f"{self._segment_path(environment_id, segment_name)}/keys",
            f"get_segment_keys({environment_id}, {segment_name})",
            params={"offset": offset, "limit": limit},
        )
        return SegmentKeys.from_dict(data or {})

    def list_all_segment_keys(
        self, environment_id: str, segment_name: str, limit: int = SEGMENT_KEYS_PAGE_SIZE
    ) -> list[str]:
        """Collect every key by walking offsets until ``count`` is reached."""
        keys: list[str] = []
        offset = 0
        while True:
            page = self.get_segment_keys(environment_id, segment_name, offset, limit)
            keys.extend(page.keys)
            offset += len(page.keys)
            if not page.keys or offset >= page.count:
                return keys

    def add_segment_keys(
        self,
        environment_id: str,
        segment_name: str,
        keys: Sequence[str],
        replace: bool,
        comment: str | None = None,
    ) -> None:
        """Upload keys; with ``replace`` the uploaded set replaces the existing one."""
        body: dict[str, object] = {"keys": list(keys)}
        if comment:
            body["comment"] = comment
        self._call(
            "PUT",
            f"{self._segment_path(environment_id, segment_name)}/uploadKeys",
            f"add_segment_keys({environment_id}, {segment_name})",
            params={"replace": "true" if replace else "false"},
            json=body,
        )

    def remove_segment_keys(
        self,
        environment_id: str,
        segment_name: str,
        keys: Sequence[str],
        comment: str | None = None,
    ) -> None:
        body: dict[str, object] = {"keys": list(keys)}
        if comment:
            body["comment"] = comment
        self._call(
            "PUT",
            f"{self._segment_path(environment_id, segment_name)}/removeKeys",
            f"remove_segment_keys({environment_id}, {segment_name})",
            json=body,
        )
