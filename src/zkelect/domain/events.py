"""Domain events for election watches and state transitions.

Events are immutable value objects. WatchEvent is what the coordination
client delivers when an armed watch fires; StateTransition is what a
strategy emits when its current state changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from zkelect.domain.state import ElectState


class WatchEventType(Enum):
    """Kinds of watch notifications.

    Attributes:
        NODE_CREATED: The watched node was created.
        NODE_DELETED: The watched node was deleted.
        NODE_DATA_CHANGED: The watched node's data changed.
        NODE_CHILDREN_CHANGED: The watched node's children changed.
        SESSION: The client's session state changed.
    """

    NODE_CREATED = "node_created"
    NODE_DELETED = "node_deleted"
    NODE_DATA_CHANGED = "node_data_changed"
    NODE_CHILDREN_CHANGED = "node_children_changed"
    SESSION = "session"


@dataclass(frozen=True)
class WatchEvent:
    """A single watch notification.

    Attributes:
        event_type: What happened to the watched node.
        path: Path of the watched node.
    """

    event_type: WatchEventType
    path: str

    @property
    def is_deletion(self) -> bool:
        """True if the watched node was deleted."""
        return self.event_type is WatchEventType.NODE_DELETED


@dataclass(frozen=True)
class StateTransition:
    """Emitted when a strategy's current state changes.

    Attributes:
        previous: State before the update, or None for the first update.
        current: State after the update.
        member_path: This candidate's member node path, if registered.
    """

    previous: ElectState | None
    current: ElectState
    member_path: str | None = None

    @property
    def became_leader(self) -> bool:
        """True if this transition promoted the candidate to leader."""
        return self.current is ElectState.LEADING and self.previous is not ElectState.LEADING

    @property
    def lost_leadership(self) -> bool:
        """True if this transition ended a LEADING period."""
        return self.previous is ElectState.LEADING and self.current is not ElectState.LEADING
