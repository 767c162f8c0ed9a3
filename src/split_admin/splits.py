"""Feature flags ("splits") and their per-environment definitions."""

from __future__ import annotations

from urllib.parse import quote

from .definition import SplitDefinition, SplitDefinitionRequest
from .models import Page, Split, SplitCreateRequest
from .service import Service

SPLITS_PAGE_SIZE = 50


class SplitsService(Service):
    """Splits are addressed by name within a workspace."""

    def _split_path(self, workspace_id: str, name: str) -> str:
        return f"/splits/ws/{workspace_id}/{quote(name, safe='')}"

    def _definition_path(self, workspace_id: str, name: str, environment_id: str) -> str:
        return f"{self._split_path(workspace_id, name)}/environments/{environment_id}"

    def list(
        self, workspace_id: str, offset: int | None = None, limit: int | None = None
    ) -> Page[Split]:
        params = {k: v for k, v in (("offset", offset), ("limit", limit)) if v is not None}
        data = self._call(
            "GET",
            f"/splits/ws/{workspace_id}",
            f"list_splits({workspace_id})",
            params=params or None,
        )
        return Page.from_dict(data or {}, Split.from_dict)

    def list_all(self, workspace_id: str, limit: int = SPLITS_PAGE_SIZE) -> list[Split]:
        """Walk offsets until ``totalCount`` splits have been collected."""
        splits: list[Split] = []
        while True:
            page = self.list(workspace_id, offset=len(splits), limit=limit)
            splits.extend(page.items)
            total = page.total_count if page.total_count is not None else len(splits)
            if not page.items or len(splits) >= total:
                return splits

    def get(self, workspace_id: str, name: str) -> Split:
        data = self._call("GET", self._split_path(workspace_id, name), f"get_split({name})")
        return Split.from_dict(data)

    def create(
        self, workspace_id: str, traffic_type_id: str, request: SplitCreateRequest
    ) -> Split:
        data = self._call(
            "POST",
            f"/splits/ws/{workspace_id}/trafficTypes/{traffic_type_id}",
            f"create_split({request.name})",
            json=request.to_dict(),
        )
        return Split.from_dict(data)

    def update_description(self, workspace_id: str, name: str, description: str) -> Split:
        """The body is the bare description string."""
        data = self._call(
            "PUT",
            f"{self._split_path(workspace_id, name)}/updateDescription",
            f"update_split_description({name})",
            json=description,
        )
        return Split.from_dict(data)

    def delete(self, workspace_id: str, name: str) -> None:
        self._call("DELETE", self._split_path(workspace_id, name), f"delete_split({name})")

    def list_definitions(
        self,
        workspace_id: str,
        environment_id: str,
        offset: int | None = None,
        limit: int | None = None,
    ) -> Page[SplitDefinition]:
        params = {k: v for k, v in (("offset", offset), ("limit", limit)) if v is not None}
        data = self._call(
            "GET",
            f"/splits/ws/{workspace_id}/environments/{environment_id}",
            f"list_split_definitions({environment_id})",
            params=params or None,
        )
        return Page.from_dict(data or {}, SplitDefinition.from_dict)

    def get_definition(
        self, workspace_id: str, name: str, environment_id: str
    ) -> SplitDefinition:
        data = self._call(
            "GET",
            self._definition_path(workspace_id, name, environment_id),
            f"get_split_definition({name}, {environment_id})",
        )
        return SplitDefinition.from_dict(data)

    def create_definition(
        self,
        workspace_id: str,
        name: str,
        environment_id: str,
        request: SplitDefinitionRequest,
    ) -> SplitDefinition:
        data = self._call(
            "POST",
            self._definition_path(workspace_id, name, environment_id),
            f"create_split_definition({name}, {environment_id})",
            json=request.to_dict(),
        )
        return SplitDefinition.from_dict(data)

    def update_definition_full(
        self,
        workspace_id: str,
        name: str,
        environment_id: str,
        request: SplitDefinitionRequest,
    ) -> SplitDefinition:
        """Replace the whole definition. Partial updates are not supported."""
        data = self._call(
            "PUT",
            self._definition_path(workspace_id, name, environment_id),
            f"update_split_definition({name}, {environment_id})",
            json=request.to_dict(),
        )
        return SplitDefinition.from_dict(data)

    def remove_definition(self, workspace_id: str, name: str, environment_id: str) -> None:
        self._call(
            "DELETE",
            self._definition_path(workspace_id, name, environment_id),
            f"remove_split_definition({name}, {environment_id})",
        )

    def kill_definition(
        self, workspace_id: str, name: str, environment_id: str, comment: str | None = None
    ) -> None:
        """Serve the default treatment to everyone in the environment."""
        self._call(
            "PUT",
            f"{self._definition_path(workspace_id, name, environment_id)}/kill",
            f"kill_split({name}, {environment_id})",
            json={"comment": comment} if comment else None,
        )

    def restore_definition(
        self, workspace_id: str, name: str, environment_id: str, comment: str | None = None
    ) -> None:
        self._call(
            "PUT",
            f"{self._definition_path(workspace_id, name, environment_id)}/restore",
            f"restore_split({name}, {environment_id})",
            json={"comment": comment} if comment else None,
        )
