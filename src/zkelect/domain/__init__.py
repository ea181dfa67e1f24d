"""Domain layer: Entities with zero external dependencies."""

from zkelect.domain.state import ElectState, ElectStateCell
from zkelect.domain.settings import ElectionConfig, ElectionSettings
from zkelect.domain.retry import RetryPolicy
from zkelect.domain.events import StateTransition, WatchEvent, WatchEventType
from zkelect.domain.exceptions import (
    AlreadyParticipatingError,
    ConnectionLossError,
    CoordinationError,
    DataInconsistencyError,
    ElectConfigError,
    ElectError,
    MalformedMemberNameError,
    NodeAlreadyExistsError,
    NotParticipatingError,
)

__all__ = [
    "ElectState",
    "ElectStateCell",
    "ElectionConfig",
    "ElectionSettings",
    "RetryPolicy",
    "StateTransition",
    "WatchEvent",
    "WatchEventType",
    "AlreadyParticipatingError",
    "ConnectionLossError",
    "CoordinationError",
    "DataInconsistencyError",
    "ElectConfigError",
    "ElectError",
    "MalformedMemberNameError",
    "NodeAlreadyExistsError",
    "NotParticipatingError",
]
