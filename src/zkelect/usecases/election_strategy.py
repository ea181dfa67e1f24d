"""Election strategy contract and shared state publication.

ElectionStrategy is the interface both NaiveElection and
ContentionFreeElection implement. ElectionStatePublisher is composed into
their ElectionProcess and owns the current-state cell together with its
side effects (metrics, transition events, logging).
"""

from __future__ import annotations

import logging
import struct
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from zkelect.adapters.metrics_port import NoOpMetricsAdapter
from zkelect.domain.events import StateTransition
from zkelect.domain.state import ElectState, ElectStateCell

if TYPE_CHECKING:
    from zkelect.adapters.metrics_port import MetricsPort
    from zkelect.adapters.ports import CoordinationClientPort, EventEmitterPort
    from zkelect.domain.events import WatchEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class ElectionStrategy(Protocol):
    """Contract shared by all leader election strategies.

    Contract:
        - participate() registers one member node and decides LEADING,
          LEADED or LOSTELECTION synchronously; it is one-off per instance
        - resume() re-evaluates that member without registering another
        - when not leading, exactly one watch is armed; its fires are
          re-evaluated asynchronously and reported through update()
        - update() is only invoked by watch handling
        - fetch_candidates() and fetch_election_state() never mutate
          the namespace
        - close() stops watch handling; the member node lives until the
          client session ends
    """

    def participate(
        self, client: CoordinationClientPort | None, start_election: bool
    ) -> ElectState:
        """Join the election.

        Args:
            client: Coordination client; may be None or disconnected.
            start_election: Create the election namespace if it is missing.

        Returns:
            LOSTCONNECTION, NOELECTION, LOSTELECTION, LEADING or LEADED.

        Raises:
            AlreadyParticipatingError: If this instance already has a member.
            MalformedMemberNameError: If the namespace holds an unparsable member.
        """
        ...

    def resume(self, client: CoordinationClientPort | None) -> ElectState:
        """Re-evaluate the member registered by participate() and re-arm its watch.

        Returns:
            LOSTCONNECTION, LOSTELECTION, LEADING or LEADED. LOSTELECTION
            with member_path reset to None means the member node is gone.

        Raises:
            NotParticipatingError: If no member is registered.
        """
        ...

    def update(self, state: ElectState) -> ElectState:
        """Store and return the new current state."""
        ...

    def fetch_candidates(self, client: CoordinationClientPort | None) -> list[str]:
        """Return member names ordered by sequence number.

        Raises:
            ConnectionLossError: If the client is missing or disconnected.
            DataInconsistencyError: If the election namespace does not exist.
        """
        ...

    def fetch_election_state(self, client: CoordinationClientPort | None) -> ElectState:
        """Return LOSTCONNECTION, NOELECTION, VOTING or VOTED."""
        ...

    @property
    def state(self) -> ElectState | None:
        """Last state stored by update(), None until the first watch fire."""
        ...

    @property
    def member_path(self) -> str | None:
        """Path of this instance's member node, None before participating."""
        ...

    def close(self) -> None:
        """Stop handling watch notifications."""
        ...


@dataclass(frozen=True)
class PendingWatch:
    """A watch fire waiting to be handled.

    Attributes:
        event: The notification delivered by the coordination client.
        client_ref: Weak reference to the client the watch was armed on.
    """

    event: WatchEvent
    client_ref: weakref.ReferenceType[CoordinationClientPort]

    def client(self) -> CoordinationClientPort | None:
        """Return the client, or None if it has been torn down."""
        return self.client_ref()


def member_payload(owner: object) -> bytes:
    """Diagnostic member payload: the owner's identity hash, 4 bytes big-endian."""
    return struct.pack(">I", id(owner) & 0xFFFFFFFF)


class ElectionStatePublisher:
    """Owns a strategy's current state and publishes changes.

    Every stored state is pushed to metrics. A StateTransition is emitted
    and logged only when the stored state actually changes.

    Thread safety:
        store() is called by the single watch consumer of a strategy;
        state may be read from any thread (see ElectStateCell).
    """

    def __init__(
        self,
        name: str,
        metrics: MetricsPort | None = None,
        event_emitter: EventEmitterPort | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            name: Strategy name used in log messages.
            metrics: Optional metrics port. Defaults to a no-op adapter.
            event_emitter: Optional observer for state transitions.
        """
        self._name = name
        self._cell = ElectStateCell()
        self._metrics: MetricsPort = metrics if metrics is not None else NoOpMetricsAdapter()
        self._event_emitter = event_emitter

    @property
    def state(self) -> ElectState | None:
        """Last stored state, or None."""
        return self._cell.get()

    @property
    def metrics(self) -> MetricsPort:
        """Metrics port receiving election state updates."""
        return self._metrics

    def store(self, state: ElectState, member_path: str | None) -> ElectState:
        """Store a new current state and publish it.

        Returns:
            The stored state.
        """
        previous = self._cell.set(state)
        self._publish_metrics(state)

        if previous is not state:
            logger.info(
                "%s election %s: state %s -> %s",
                self._name,
                member_path,
                previous.name if previous is not None else None,
                state.name,
            )
            if self._event_emitter is not None:
                self._event_emitter.emit(
                    StateTransition(previous=previous, current=state, member_path=member_path)
                )

        return state

    def report(self, outcome: ElectState, member_path: str | None) -> ElectState:
        """Publish a participate() outcome without storing it.

        Returns:
            The outcome, unchanged.
        """
        self._publish_metrics(outcome)
        if outcome is ElectState.LOSTCONNECTION:
            logger.warning("%s election: participation lost its connection", self._name)
        else:
            logger.info("%s election %s: participated -> %s", self._name, member_path, outcome.name)
        return outcome

    def _publish_metrics(self, state: ElectState) -> None:
        self._metrics.set_election_state(state)
        self._metrics.set_leader_elected(state is ElectState.LEADING)
