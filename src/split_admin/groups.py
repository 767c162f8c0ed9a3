"""Groups service."""

from __future__ import annotations

from .models import Group, GroupRequest, Page
from .service import Service


class GroupsService(Service):
    def list(self, offset: int | None = None, limit: int | None = None) -> Page[Group]:
        params = {k: v for k, v in (("offset", offset), ("limit", limit)) if v is not None}
        data = self._call("GET", "/groups", "list_groups", params=params or None)
        return Page.from_dict(data or {}, Group.from_dict)

    def get(self, group_id: str) -> Group:
        data = self._call("GET", f"/groups/{group_id}", f"get_group({group_id})")
        return Group.from_dict(data)

    def create(self, request: GroupRequest) -> Group:
        data = self._call("POST", "/groups", f"create_group({request.name})", json=request.to_dict())
        return Group.from_dict(data)

    def update(self, group_id: str, request: GroupRequest) -> Group:
        data = self._call(
            "PUT", f"/groups/{group_id}", f"update_group({group_id})", json=request.to_dict()
        )
        return Group.from_dict(data)

    def delete(self, group_id: str) -> None:
        self._call("DELETE", f"/groups/{group_id}", f"delete_group({group_id})")
