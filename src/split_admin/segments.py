"""Segments service."""

from __future__ import annotations

from urllib.parse import quote

from .models import Page, Segment, SegmentRequest
from .service import Service


class SegmentsService(Service):
    def list(self, workspace_id: str) -> Page[Segment]:
        data = self._call("GET", f"/segments/ws/{workspace_id}", f"list_segments({workspace_id})")
        return Page.from_dict(data or {}, Segment.from_dict)

    def get(self, workspace_id: str, name: str) -> Segment:
        data = self._call(
            "GET", f"/segments/ws/{workspace_id}/{quote(name, safe='')}", f"get_segment({name})"
        )
        return Segment.from_dict(data)

    def create(
        self, workspace_id: str, traffic_type_id: str, request: SegmentRequest
    ) -> Segment:
        """Create a segment. It is not configured in any environment yet."""
        data = self._call(
            "POST",
            f"/segments/ws/{workspace_id}/trafficTypes/{traffic_type_id}",
            f"create_segment({request.name})",
            json=request.to_dict(),
        )
        return Segment.from_dict(data)

    def delete(self, workspace_id: str, name: str) -> None:
        """Delete a segment; this unconfigures it from every environment."""
        self._call(
            "DELETE", f"/segments/ws/{workspace_id}/{quote(name, safe='')}", f"delete_segment({name})"
        )

    def activate(self, environment_id: str, name: str) -> Segment:
        """Enable a segment in an environment so its keys can be set."""
        data = self._call(
            "POST",
            f"/segments/{environment_id}/{quote(name, safe='')}",
            f"activate_segment({environment_id}, {name})",
        )
        return Segment.from_dict(data or {"name": name})

    def deactivate(self, environment_id: str, name: str) -> None:
        self._call(
            "DELETE",
            f"/segments/{environment_id}/{quote(name, safe='')}",
            f"deactivate_segment({environment_id}, {name})",
        )
