"""Entry point that wires every service to one shared client."""

from __future__ import annotations

from typing import Any

from .api_keys import ApiKeysService
from .attributes import AttributesService
from .client import SplitClient
from .config import SplitConfig
from .definitions import SplitDefinitionManager
from .environments import EnvironmentsService
from .flag_sets import FlagSetsService
from .groups import GroupsService
from .segment_keys import SegmentKeysReconciler
from .segments import SegmentsService
from .splits import SplitsService
from .traffic_types import TrafficTypesService
from .users import UsersService
from .workspaces import WorkspacesService


class SplitApi:
    """All services share a single SplitClient and therefore one deadline.

    Example::

        with SplitApi(load_config("split.yaml")) as api:
            ws = api.workspaces.find_by_name("Default")
    """

    def __init__(self, config: SplitConfig, **client_kwargs: Any) -> None:
        self.client = SplitClient(config, **client_kwargs)
        self.workspaces = WorkspacesService(self.client)
        self.environments = EnvironmentsService(self.client)
        self.traffic_types = TrafficTypesService(self.client)
        self.attributes = AttributesService(self.client)
        self.segments = SegmentsService(self.client)
        self.splits = SplitsService(self.client)
        self.flag_sets = FlagSetsService(self.client)
        self.users = UsersService(self.client)
        self.groups = GroupsService(self.client)
        self.api_keys = ApiKeysService(self.client)
        self.definitions = SplitDefinitionManager(self.splits)
        self.segment_keys = SegmentKeysReconciler(self.environments)

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> SplitApi:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
