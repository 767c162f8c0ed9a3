"""Workspaces service."""

from __future__ import annotations

from .models import Page, Workspace, WorkspaceRequest
from .service import Service, find_first


class WorkspacesService(Service):
    """The API has no single-workspace GET, so lookups scan the listing."""

    def list(self, offset: int | None = None, limit: int | None = None) -> Page[Workspace]:
        params = {k: v for k, v in (("offset", offset), ("limit", limit)) if v is not None}
        data = self._call("GET", "/workspaces", "list_workspaces", params=params or None)
        return Page.from_dict(data or {}, Workspace.from_dict)

    def find_by_id(self, workspace_id: str) -> Workspace:
        return find_first(
            self.list().items, lambda w: w.id == workspace_id, "workspace", workspace_id
        )

    def find_by_name(self, name: str) -> Workspace:
        return find_first(self.list().items, lambda w: w.name == name, "workspace", name)

    def create(self, request: WorkspaceRequest) -> Workspace:
        data = self._call("POST", "/workspaces", "create_workspace", json=request.to_dict())
        return Workspace.from_dict(data)

    def update(self, workspace_id: str, request: WorkspaceRequest) -> Workspace:
        ops = [
            {"op": "replace", "path": f"/{key}", "value": value}
            for key, value in request.to_dict().items()
        ]
        data = self._call(
            "PATCH", f"/workspaces/{workspace_id}", f"update_workspace({workspace_id})", json=ops
        )
        return Workspace.from_dict(data)

    def delete(self, workspace_id: str) -> None:
        self._call("DELETE", f"/workspaces/{workspace_id}", f"delete_workspace({workspace_id})")
