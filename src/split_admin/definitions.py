"""Lifecycle of a split's rollout definition in one environment.

Definitions are always written as a complete structure: the flat
:class:`~split_admin.codec.DefinitionSpec` is validated and encoded locally,
sent in full, then read back and decoded so callers see what the server kept.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from .codec import DefinitionSpec, decode_definition, encode_definition
from .definition import SplitDefinition
from .helpers import build_composite_id, parse_composite_id
from .splits import SplitsService

logger = structlog.get_logger(__name__)


@dataclass
class DefinitionState:
    """A definition as stored remotely, in both nested and flat forms."""

    workspace_id: str
    split_name: str
    environment_id: str
    definition: SplitDefinition
    spec: DefinitionSpec

    @property
    def import_id(self) -> str:
        return build_composite_id(self.workspace_id, self.split_name, self.environment_id)


class SplitDefinitionManager:
    def __init__(self, splits: SplitsService, comment: str | None = None) -> None:
        self._splits = splits
        self._comment = comment

    def create(
        self,
        workspace_id: str,
        split_name: str,
        environment_id: str,
        spec: DefinitionSpec | Mapping[str, Any],
    ) -> DefinitionState:
        request = encode_definition(spec, comment=self._comment)
        logger.info(
            "creating split definition",
            workspace_id=workspace_id,
            split_name=split_name,
            environment_id=environment_id,
        )
        self._splits.create_definition(workspace_id, split_name, environment_id, request)
        return self.read(workspace_id, split_name, environment_id)

    def read(self, workspace_id: str, split_name: str, environment_id: str) -> DefinitionState:
        definition = self._splits.get_definition(workspace_id, split_name, environment_id)
        return DefinitionState(
            workspace_id=workspace_id,
            split_name=split_name,
            environment_id=environment_id,
            definition=definition,
            spec=decode_definition(definition),
        )

    def update(
        self,
        workspace_id: str,
        split_name: str,
        environment_id: str,
        spec: DefinitionSpec | Mapping[str, Any],
    ) -> DefinitionState:
        request = encode_definition(spec, comment=self._comment)
        logger.info(
            "replacing split definition",
            workspace_id=workspace_id,
            split_name=split_name,
            environment_id=environment_id,
        )
        self._splits.update_definition_full(workspace_id, split_name, environment_id, request)
        return self.read(workspace_id, split_name, environment_id)

    def delete(self, workspace_id: str, split_name: str, environment_id: str) -> None:
        logger.info(
            "removing split definition",
            workspace_id=workspace_id,
            split_name=split_name,
            environment_id=environment_id,
        )
        self._splits.remove_definition(workspace_id, split_name, environment_id)

    def import_definition(self, import_id: str) -> DefinitionState:
        """Read an existing definition from a ``workspace:split:environment`` id."""
        workspace_id, split_name, environment_id = parse_composite_id(import_id, 3)
        return self.read(workspace_id, split_name, environment_id)
