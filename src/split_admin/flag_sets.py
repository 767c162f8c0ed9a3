"""Flag sets service. Flag sets live on the v3 API, outside the v2 base URL."""

from __future__ import annotations

from .models import FlagSet, FlagSetRequest, Page
from .service import Service, find_first


class FlagSetsService(Service):
    @property
    def _url(self) -> str:
        return self._client.config.flag_sets_url

    def create(self, request: FlagSetRequest) -> FlagSet:
        data = self._call("POST", self._url, f"create_flag_set({request.name})", json=request.to_dict())
        return FlagSet.from_dict(data)

    def find_by_id(self, flag_set_id: str) -> FlagSet:
        data = self._call("GET", f"{self._url}/{flag_set_id}", f"get_flag_set({flag_set_id})")
        return FlagSet.from_dict(data)

    def list(self, workspace_id: str, after: str | None = None) -> Page[FlagSet]:
        params = {"workspace_id": workspace_id}
        if after:
            params["after"] = after
        data = self._call("GET", self._url, f"list_flag_sets({workspace_id})", params=params)
        return Page.from_dict(data or {}, FlagSet.from_dict)

    def list_all(self, workspace_id: str) -> list[FlagSet]:
        """Follow ``nextMarker`` until the listing is exhausted."""
        flag_sets: list[FlagSet] = []
        marker = None
        while True:
            page = self.list(workspace_id, after=marker)
            flag_sets.extend(page.items)
            if not page.next_marker or page.next_marker == marker:
                return flag_sets
            marker = page.next_marker

    def find_by_name(self, workspace_id: str, name: str) -> FlagSet:
        return find_first(self.list_all(workspace_id), lambda f: f.name == name, "flag set", name)

    def delete(self, flag_set_id: str) -> None:
        self._call("DELETE", f"{self._url}/{flag_set_id}", f"delete_flag_set({flag_set_id})")
