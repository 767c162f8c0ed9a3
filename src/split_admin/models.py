"""Split admin API entity models."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def drop_none(data: dict[str, Any]) -> dict[str, Any]:
    """Remove keys whose value is None so they are not sent at all."""
    return {k: v for k, v in data.items() if v is not None}


class UserStatus(StrEnum):
    """User status values accepted by the users API."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    DEACTIVATED = "DEACTIVATED"


class ApiKeyType(StrEnum):
    CLIENT_SIDE = "client_side"
    SERVER_SIDE = "server_side"
    ADMIN = "admin"


@dataclass
class Page(Generic[T]):
    """One page of a listing.

    Offset-paginated endpoints fill ``offset``/``limit``/``total_count``;
    marker-paginated endpoints fill ``next_marker``/``previous_marker``.
    """

    items: list[T]
    offset: int | None = None
    limit: int | None = None
    total_count: int | None = None
    next_marker: str | None = None
    previous_marker: str | None = None

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        item: Callable[[dict[str, Any]], T],
        items_key: str = "objects",
    ) -> Page[T]:
        return cls(
            items=[item(o) for o in data.get(items_key) or []],
            offset=data.get("offset"),
            limit=data.get("limit"),
            total_count=data.get("totalCount"),
            next_marker=data.get("nextMarker") or None,
            previous_marker=data.get("previousMarker") or None,
        )


@dataclass
class Workspace:
    """A workspace groups environments, traffic types and flags."""

    id: str
    name: str
    type: str | None = None
    requires_title_and_comments: bool | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Workspace:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            type=data.get("type"),
            requires_title_and_comments=data.get("requiresTitleAndComments"),
        )


@dataclass
class WorkspaceRequest:
    name: str | None = None
    requires_title_and_comments: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {"name": self.name, "requiresTitleAndComments": self.requires_title_and_comments}
        )


@dataclass
class Environment:
    """A stage such as production or staging."""

    id: str
    name: str
    production: bool | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Environment:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            production=data.get("production"),
        )


@dataclass
class EnvironmentRequest:
    name: str | None = None
    production: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none({"name": self.name, "production": self.production})


@dataclass
class TrafficType:
    id: str
    name: str
    type: str | None = None
    display_attribute_id: str | None = None
    workspace: Workspace | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrafficType:
        ws = data.get("workspace")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            type=data.get("type"),
            display_attribute_id=data.get("displayAttributeId"),
            workspace=Workspace.from_dict(ws) if ws else None,
        )


@dataclass
class Attribute:
    """A traffic type attribute. ``id`` is the user-chosen identifier."""

    id: str
    traffic_type_id: str
    display_name: str | None = None
    description: str | None = None
    data_type: str | None = None
    is_searchable: bool | None = None
    suggested_values: list[str] = field(default_factory=list)
    organization_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Attribute:
        return cls(
            id=data.get("id", ""),
            traffic_type_id=data.get("trafficTypeId", ""),
            display_name=data.get("displayName"),
            description=data.get("description"),
            data_type=data.get("dataType"),
            is_searchable=data.get("isSearchable"),
            suggested_values=list(data.get("suggestedValues") or []),
            organization_id=data.get("organizationId"),
        )


@dataclass
class AttributeRequest:
    id: str | None = None
    traffic_type_id: str | None = None
    display_name: str | None = None
    description: str | None = None
    data_type: str | None = None
    is_searchable: bool | None = None
    suggested_values: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "id": self.id,
                "trafficTypeId": self.traffic_type_id,
                "displayName": self.display_name,
                "description": self.description,
                "dataType": self.data_type,
                "isSearchable": self.is_searchable,
                "suggestedValues": self.suggested_values,
            }
        )


@dataclass
class Segment:
    name: str
    description: str | None = None
    environment: Environment | None = None
    traffic_type: TrafficType | None = None
    creation_time: int | None = None
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Segment:
        env = data.get("environment")
        tt = data.get("trafficType")
        return cls(
            name=data.get("name", ""),
            description=data.get("description"),
            environment=Environment.from_dict(env) if env else None,
            traffic_type=TrafficType.from_dict(tt) if tt else None,
            creation_time=data.get("creationTime"),
            tags=[t["name"] for t in data.get("tags") or [] if t.get("name")],
        )


@dataclass
class SegmentRequest:
    name: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none({"name": self.name, "description": self.description})


@dataclass
class SegmentKeys:
    """Keys manually assigned to a segment in one environment."""

    keys: list[str]
    count: int = 0
    offset: int = 0
    limit: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SegmentKeys:
        keys = [k["key"] for k in data.get("keys") or [] if k.get("key") is not None]
        return cls(
            keys=keys,
            count=data.get("count", len(keys)),
            offset=data.get("offset", 0),
            limit=data.get("limit", len(keys)),
        )


@dataclass
class RolloutStatus:
    id: str
    name: str


@dataclass
class Split:
    """A feature flag, toggle, or experiment."""

    id: str
    name: str
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    creation_time: int | None = None
    rollout_status_timestamp: int | None = None
    traffic_type: TrafficType | None = None
    rollout_status: RolloutStatus | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Split:
        tt = data.get("trafficType")
        rs = data.get("rolloutStatus")
        tags = [t["name"] if isinstance(t, dict) else t for t in data.get("tags") or []]
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            description=data.get("description"),
            tags=tags,
            creation_time=data.get("creationTime"),
            rollout_status_timestamp=data.get("rolloutStatusTimestamp"),
            traffic_type=TrafficType.from_dict(tt) if tt else None,
            rollout_status=RolloutStatus(id=rs.get("id", ""), name=rs.get("name", "")) if rs else None,
        )


@dataclass
class SplitCreateRequest:
    name: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass
class FlagSet:
    """A named group of feature flags (v3 API)."""

    id: str
    name: str
    description: str | None = None
    workspace_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlagSet:
        ws = data.get("workspace") or {}
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            description=data.get("description"),
            workspace_id=ws.get("id"),
        )


@dataclass
class FlagSetRequest:
    name: str
    workspace_id: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "name": self.name,
                "description": self.description,
                "workspace": {"type": "workspace", "id": self.workspace_id},
            }
        )


@dataclass
class Group:
    id: str
    name: str
    description: str | None = None
    type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Group:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            description=data.get("description"),
            type=data.get("type"),
        )


@dataclass
class GroupRequest:
    name: str
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none({"name": self.name, "description": self.description})


@dataclass
class User:
    id: str
    email: str
    name: str | None = None
    type: str | None = None
    status: UserStatus | None = None
    tfa: bool | None = None
    groups: list[Group] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        status = data.get("status")
        return cls(
            id=data.get("id", ""),
            email=data.get("email", ""),
            name=data.get("name"),
            type=data.get("type"),
            status=UserStatus(status) if status else None,
            tfa=data.get("2fa"),
            groups=[Group.from_dict(g) for g in data.get("groups") or []],
        )


@dataclass
class UserCreateRequest:
    email: str
    group_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"email": self.email}
        if self.group_ids:
            body["groups"] = [{"id": g, "type": "group"} for g in self.group_ids]
        return body


@dataclass
class UserUpdateRequest:
    name: str | None = None
    email: str | None = None
    tfa: bool | None = None
    status: UserStatus | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "name": self.name,
                "email": self.email,
                "2fa": self.tfa,
                "status": self.status.value if self.status else None,
            }
        )


@dataclass
class ApiKeyRequest:
    name: str
    key_type: ApiKeyType
    workspace_id: str
    environment_ids: list[str] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "apiKeyType": self.key_type.value,
            "roles": list(self.roles),
            "environments": [{"type": "environment", "id": e} for e in self.environment_ids],
            "workspace": {"type": "workspace", "id": self.workspace_id},
        }


@dataclass
class ApiKey:
    """A created API key. ``key`` is the secret and is only returned on create."""

    id: str
    name: str
    key: str | None = None
    roles: list[str] = field(default_factory=list)
    type: str | None = None
    api_key_type: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiKey:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            key=data.get("key"),
            roles=list(data.get("roles") or []),
            type=data.get("type"),
            api_key_type=data.get("apiKeyType"),
        )
