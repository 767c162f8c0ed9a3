"""Traffic types service."""

from __future__ import annotations

from .models import TrafficType
from .service import Service, find_first


class TrafficTypesService(Service):
    def list(self, workspace_id: str) -> list[TrafficType]:
        data = self._call(
            "GET", f"/trafficTypes/ws/{workspace_id}", f"list_traffic_types({workspace_id})"
        )
        return [TrafficType.from_dict(t) for t in data or []]

    def find_by_id(self, workspace_id: str, traffic_type_id: str) -> TrafficType:
        return find_first(
            self.list(workspace_id),
            lambda t: t.id == traffic_type_id,
            "traffic type",
            traffic_type_id,
        )

    def find_by_name(self, workspace_id: str, name: str) -> TrafficType:
        return find_first(self.list(workspace_id), lambda t: t.name == name, "traffic type", name)

    def create(self, workspace_id: str, name: str) -> TrafficType:
        data = self._call(
            "POST",
            f"/trafficTypes/ws/{workspace_id}",
            f"create_traffic_type({name})",
            json={"name": name},
        )
        return TrafficType.from_dict(data)

    def delete(self, traffic_type_id: str) -> None:
        self._call(
            "DELETE", f"/trafficTypes/{traffic_type_id}", f"delete_traffic_type({traffic_type_id})"
        )
