"""Traffic type attributes service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from .models import Attribute, AttributeRequest
from .service import Service, find_first


@dataclass
class AttributeListParams:
    """Query parameters for listing attributes.

    Markers are opaque strings from a previous paginated response; search and
    markers only apply when ``paginate`` is set.
    """

    paginate: bool = False
    search_prefix: str | None = None
    after_marker: str | None = None
    before_marker: str | None = None
    marker_limit: int | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.paginate:
            params["paginate"] = "true"
        if self.search_prefix:
            params["searchPrefix"] = self.search_prefix
        if self.after_marker:
            params["afterMarker"] = self.after_marker
        if self.before_marker:
            params["beforeMarker"] = self.before_marker
        if self.marker_limit:
            params["markerLimit"] = self.marker_limit
        return params


class AttributesService(Service):
    def _base(self, workspace_id: str, traffic_type_id: str) -> str:
        return f"/schema/ws/{workspace_id}/trafficTypes/{traffic_type_id}"

    def list(
        self,
        workspace_id: str,
        traffic_type_id: str,
        params: AttributeListParams | None = None,
    ) -> list[Attribute]:
        data = self._call(
            "GET",
            self._base(workspace_id, traffic_type_id),
            f"list_attributes({traffic_type_id})",
            params=(params.to_params() if params else None) or None,
        )
        if isinstance(data, dict):
            data = data.get("objects")
        return [Attribute.from_dict(a) for a in data or []]

    def find_by_id(
        self,
        workspace_id: str,
        traffic_type_id: str,
        attribute_id: str,
        params: AttributeListParams | None = None,
    ) -> Attribute:
        """There is no single-attribute endpoint; this scans the listing."""
        return find_first(
            self.list(workspace_id, traffic_type_id, params),
            lambda a: a.id == attribute_id,
            "attribute",
            attribute_id,
        )

    def create(
        self, workspace_id: str, traffic_type_id: str, request: AttributeRequest
    ) -> Attribute:
        data = self._call(
            "POST",
            self._base(workspace_id, traffic_type_id),
            f"create_attribute({request.id})",
            json=request.to_dict(),
        )
        return Attribute.from_dict(data)

    def update(
        self,
        workspace_id: str,
        traffic_type_id: str,
        attribute_id: str,
        request: AttributeRequest,
    ) -> Attribute:
        data = self._call(
            "PATCH",
            f"{self._base(workspace_id, traffic_type_id)}/{quote(attribute_id, safe='')}",
            f"update_attribute({attribute_id})",
            json=request.to_dict(),
        )
        return Attribute.from_dict(data)

    def delete(self, workspace_id: str, traffic_type_id: str, attribute_id: str) -> None:
        self._call(
            "DELETE",
            f"{self._base(workspace_id, traffic_type_id)}/{quote(attribute_id, safe='')}",
            f"delete_attribute({attribute_id})",
        )
