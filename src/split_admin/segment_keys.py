"""Keep the keys of a segment in one environment equal to a desired set."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from .environments import EnvironmentsService
from .helpers import build_composite_id, parse_composite_id

logger = structlog.get_logger(__name__)

DEFAULT_COMMENT = "modified by split-admin"


@dataclass
class SegmentKeysState:
    environment_id: str
    segment_name: str
    keys: set[str] = field(default_factory=set)

    @property
    def import_id(self) -> str:
        return build_composite_id(self.environment_id, self.segment_name)


class SegmentKeysReconciler:
    """Applies key sets with a remove-then-replace sequence.

    The remote segment is not locked between steps; concurrent writers can
    interleave.
    """

    def __init__(self, environments: EnvironmentsService, comment: str = DEFAULT_COMMENT) -> None:
        self._environments = environments
        self._comment = comment

    def create(
        self, environment_id: str, segment_name: str, keys: Iterable[str]
    ) -> SegmentKeysState:
        desired = set(keys)
        if desired:
            self._environments.add_segment_keys(
                environment_id, segment_name, sorted(desired), replace=True, comment=self._comment
            )
        return self.read(environment_id, segment_name)

    def read(self, environment_id: str, segment_name: str) -> SegmentKeysState:
        keys = self._environments.list_all_segment_keys(environment_id, segment_name)
        return SegmentKeysState(environment_id, segment_name, set(keys))

    def reconcile(
        self,
        environment_id: str,
        segment_name: str,
        previous: Iterable[str],
        desired: Iterable[str],
    ) -> SegmentKeysState:
        """Remove every previously known key, then upload ``desired`` with replace.

        Returns the keys the server reports afterwards.
        """
        previous_keys = set(previous)
        desired_keys = set(desired)
        log = logger.bind(environment_id=environment_id, segment_name=segment_name)

        if previous_keys:
            log.debug("removing segment keys", count=len(previous_keys))
            self._environments.remove_segment_keys(
                environment_id, segment_name, sorted(previous_keys), comment=self._comment
            )
        if desired_keys:
            log.debug("uploading segment keys", count=len(desired_keys))
            self._environments.add_segment_keys(
                environment_id,
                segment_name,
                sorted(desired_keys),
                replace=True,
                comment=self._comment,
            )
        return self.read(environment_id, segment_name)

    def delete(self, environment_id: str, segment_name: str, keys: Iterable[str]) -> None:
        known = set(keys)
        if not known:
            return
        logger.info(
            "removing all segment keys",
            environment_id=environment_id,
            segment_name=segment_name,
            count=len(known),
        )
        self._environments.remove_segment_keys(
            environment_id, segment_name, sorted(known), comment=self._comment
        )

    def import_keys(self, import_id: str) -> SegmentKeysState:
        """Read the keys of an ``environment:segment`` pair."""
        environment_id, segment_name = parse_composite_id(import_id, 2)
        return self.read(environment_id, segment_name)
