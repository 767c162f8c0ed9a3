"""Split.io admin API client library."""

from .api import SplitApi
from .client import SplitClient
from .codec import DefinitionSpec, decode_definition, encode_definition, load_definition_spec
from .config import SplitConfig, __version__, load_config
from .definitions import DefinitionState, SplitDefinitionManager
from .exceptions import (
    ConfigError,
    DeadlineExceededError,
    DefinitionValidationError,
    InvalidCompositeIdError,
    NotFoundError,
    SplitAdminError,
    SplitAdminErrorCodes,
    SplitApiError,
)
from .helpers import parse_composite_id
from .logger import new_logger
from .matchers import MatcherType
from .segment_keys import SegmentKeysReconciler, SegmentKeysState

__all__ = [
    "__version__",
    "SplitApi",
    "SplitClient",
    "SplitConfig",
    "load_config",
    "new_logger",
    "DefinitionSpec",
    "encode_definition",
    "decode_definition",
    "load_definition_spec",
    "MatcherType",
    "SplitDefinitionManager",
    "DefinitionState",
    "SegmentKeysReconciler",
    "SegmentKeysState",
    "parse_composite_id",
    "SplitAdminError",
    "SplitAdminErrorCodes",
    "SplitApiError",
    "DeadlineExceededError",
    "NotFoundError",
    "DefinitionValidationError",
    "ConfigError",
    "InvalidCompositeIdError",
]
