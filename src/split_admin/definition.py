"""Rollout definition model: the configuration of one split in one environment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .matchers import Matcher, matcher_from_dict
from .models import Environment, TrafficType, drop_none

AND_COMBINER = "AND"


@dataclass
class Treatment:
    """A state a split can resolve to.

    ``configurations`` is an opaque JSON document passed through untouched.
    ``keys`` and ``segments`` are optional allow-lists; None means unrestricted.
    """

    name: str
    configurations: str | None = None
    description: str | None = None
    keys: list[str] | None = None
    segments: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "name": self.name,
                "configurations": self.configurations,
                "description": self.description,
                "keys": self.keys,
                "segments": self.segments,
            }
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Treatment:
        keys = data.get("keys")
        segments = data.get("segments")
        return cls(
            name=data.get("name", ""),
            configurations=data.get("configurations"),
            description=data.get("description"),
            keys=list(keys) if keys is not None else None,
            segments=list(segments) if segments is not None else None,
        )


@dataclass
class Bucket:
    """A sticky share of traffic, in percent, assigned to one treatment."""

    treatment: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"treatment": self.treatment, "size": self.size}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bucket:
        return cls(treatment=data.get("treatment", ""), size=data.get("size", 0))


@dataclass
class Condition:
    """Matchers combined with AND; a key satisfies it only if every matcher matches."""

    matchers: list[Matcher] = field(default_factory=list)
    combiner: str = AND_COMBINER

    def to_dict(self) -> dict[str, Any]:
        return {"combiner": self.combiner, "matchers": [m.to_dict() for m in self.matchers]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Condition:
        return cls(
            matchers=[matcher_from_dict(m) for m in data.get("matchers") or []],
            combiner=data.get("combiner") or AND_COMBINER,
        )


@dataclass
class Rule:
    """A targeting rule. Rules are evaluated in order and the first match wins."""

    condition: Condition
    buckets: list[Bucket]

    def to_dict(self) -> dict[str, Any]:
        return {
            "condition": self.condition.to_dict(),
            "buckets": [b.to_dict() for b in self.buckets],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rule:
        return cls(
            condition=Condition.from_dict(data.get("condition") or {}),
            buckets=[Bucket.from_dict(b) for b in data.get("buckets") or []],
        )


@dataclass
class SplitDefinitionRequest:
    """Body of a definition create or full update. Always the complete structure."""

    treatments: list[Treatment]
    default_treatment: str
    default_rule: list[Bucket]
    rules: list[Rule] = field(default_factory=list)
    traffic_allocation: int | None = None
    killed: bool | None = None
    comment: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(
            {
                "treatments": [t.to_dict() for t in self.treatments],
                "defaultTreatment": self.default_treatment,
                "rules": [r.to_dict() for r in self.rules],
                "defaultRule": [b.to_dict() for b in self.default_rule],
                "trafficAllocation": self.traffic_allocation,
                "killed": self.killed,
                "comment": self.comment,
            }
        )


@dataclass
class SplitDefinition:
    """A split definition as returned by the API."""

    id: str
    name: str
    treatments: list[Treatment]
    default_treatment: str
    default_rule: list[Bucket]
    rules: list[Rule] = field(default_factory=list)
    traffic_allocation: int | None = None
    killed: bool | None = None
    environment: Environment | None = None
    traffic_type: TrafficType | None = None
    creation_time: int | None = None
    last_update_time: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SplitDefinition:
        env = data.get("environment")
        tt = data.get("trafficType")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            treatments=[Treatment.from_dict(t) for t in data.get("treatments") or []],
            default_treatment=data.get("defaultTreatment", ""),
            default_rule=[Bucket.from_dict(b) for b in data.get("defaultRule") or []],
            rules=[Rule.from_dict(r) for r in data.get("rules") or []],
            traffic_allocation=data.get("trafficAllocation"),
            killed=data.get("killed"),
            environment=Environment.from_dict(env) if env else None,
            traffic_type=TrafficType.from_dict(tt) if tt else None,
            # the API spells this field "creationTIme"
            creation_time=data.get("creationTime", data.get("creationTIme")),
            last_update_time=data.get("lastUpdateTime"),
        )
