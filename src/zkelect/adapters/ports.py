"""Port interfaces for the zkelect core package.

Ports define the contracts that adapters must implement.
These are Protocol classes (structural subtyping) for flexible testing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from zkelect.domain.events import StateTransition, WatchEvent

    WatchCallback = Callable[[WatchEvent], None]


@dataclass(frozen=True)
class NodeStat:
    """Minimal node metadata returned by an existence check.

    Attributes:
        version: Data version of the node.
        ephemeral_owner: Session id owning an ephemeral node, 0 if persistent.
        num_children: Number of direct children.
    """

    version: int = 0
    ephemeral_owner: int = 0
    num_children: int = 0

    @property
    def is_ephemeral(self) -> bool:
        """True if the node is bound to a client session."""
        return self.ephemeral_owner != 0


@runtime_checkable
class CoordinationClientPort(Protocol):
    """Port interface for a watch-capable hierarchical coordination service.

    Implementations wrap a live session (e.g. a ZooKeeper client). The
    election core only ever uses these four calls and never assumes the
    session stays alive between them.

    Contract:
        - exists(path, watch) returns NodeStat or None; when watch is given it
          is armed as a one-shot subscription even if the node is absent
        - watch callbacks may run on the client's own event thread and must
          not block
        - create(..., sequence=True) returns the realized path with the
          zero-padded counter appended
        - create() raises NodeAlreadyExistsError if the node exists
        - get_children() returns bare child names in no particular order
        - calls on a lost session raise ConnectionLossError
    """

    def exists(
        self, path: str, watch: WatchCallback | None = None
    ) -> NodeStat | None:
        """Check whether a node exists, optionally arming a one-shot watch.

        Args:
            path: Absolute node path.
            watch: Callback invoked once with a WatchEvent on the next
                change or deletion of the node.

        Returns:
            NodeStat if the node exists, None otherwise.

        Raises:
            ConnectionLossError: If the session is lost.
        """
        ...

    def create(
        self,
        path: str,
        value: bytes = b"",
        ephemeral: bool = False,
        sequence: bool = False,
    ) -> str:
        """Create a node.

        Args:
            path: Absolute node path (prefix path when sequence=True).
            value: Node payload.
            ephemeral: Bind the node's lifetime to this session.
            sequence: Append a unique, increasing, zero-padded counter.

        Returns:
            The realized absolute path.

        Raises:
            NodeAlreadyExistsError: If the node already exists.
            ConnectionLossError: If the session is lost.
        """
        ...

    def get_children(self, path: str) -> list[str]:
        """List the bare names of a node's children.

        Raises:
            DataInconsistencyError: If the node does not exist.
            ConnectionLossError: If the session is lost.
        """
        ...

    def is_connected(self) -> bool:
        """Return True while the session is usable."""
        ...


@runtime_checkable
class EventEmitterPort(Protocol):
    """Port interface for emitting election state transitions.

    Contract:
        - emit(event) delivers the event to all registered observers
        - emit() is fire-and-forget (no return value, no exceptions propagated)
        - emit() may be called from the watch dispatcher thread
    """

    def emit(self, event: StateTransition) -> None:
        """Emit a state transition to observers.

        Args:
            event: The StateTransition to emit.
        """
        ...
