"""ContentionFreeElection use case: each follower watches its predecessor.

Members form a watch chain in arrival order. When a member's node goes
away only its immediate successor is woken; that successor either becomes
the head and leads, or re-arms on whoever now precedes it. No deletion ever
wakes more than one follower.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zkelect.domain.members import predecessor_of
from zkelect.domain.settings import CONTENTION_FREE_MEMBER_PREFIX
from zkelect.usecases.election_process import ElectionProcess
from zkelect.usecases.membership import ElectionMembership

if TYPE_CHECKING:
    from zkelect.adapters.metrics_port import MetricsPort
    from zkelect.adapters.ports import CoordinationClientPort, EventEmitterPort
    from zkelect.domain.state import ElectState


class ContentionFreeElection:
    """Leader election where every follower watches its immediate predecessor.

    Implements ElectionStrategy. Members are compared by exact bare name,
    so "ctf_0000000001" never matches "ctf_0000000010". A follower whose
    own member disappears from the candidates reports LOSTELECTION.

    Dependencies:
        - CoordinationClientPort: passed per call, never stored strongly
        - MetricsPort (optional): election state and watch fire metrics
        - EventEmitterPort (optional): receives StateTransition events

    Thread safety:
        Watch callbacks only enqueue; re-evaluation runs on the instance's
        WatchDispatcher consumer. state may be read from any thread.
    """

    name = "contention_free"

    def __init__(
        self,
        member_prefix: str = CONTENTION_FREE_MEMBER_PREFIX,
        *,
        metrics: MetricsPort | None = None,
        event_emitter: EventEmitterPort | None = None,
        autostart: bool = True,
    ) -> None:
        """Initialize the strategy.

        Args:
            member_prefix: Prefix of member node names.
            metrics: Optional metrics port.
            event_emitter: Optional observer for state transitions.
            autostart: Start a daemon thread handling watch fires when the
                first watch is armed. With False, call process_pending().
        """
        self._membership = ElectionMembership(member_prefix)
        self._process = ElectionProcess(
            self.name,
            self._membership,
            predecessor_of,
            metrics=metrics,
            event_emitter=event_emitter,
            autostart=autostart,
        )

    @property
    def state(self) -> ElectState | None:
        return self._process.state

    @property
    def member_path(self) -> str | None:
        return self._process.member_path

    @property
    def watched_member(self) -> str | None:
        """Bare name of the predecessor the last armed watch targets."""
        return self._process.watched_member

    @property
    def membership(self) -> ElectionMembership:
        return self._membership

    def participate(
        self, client: CoordinationClientPort | None, start_election: bool
    ) -> ElectState:
        """Join the election; see ElectionStrategy.participate."""
        return self._process.participate(client, start_election)

    def resume(self, client: CoordinationClientPort | None) -> ElectState:
        """Re-evaluate the existing member; see ElectionStrategy.resume."""
        return self._process.resume(client)

    def update(self, state: ElectState) -> ElectState:
        """Store the new current state. Called by watch handling only."""
        return self._process.update(state)

    def fetch_candidates(self, client: CoordinationClientPort | None) -> list[str]:
        return self._membership.fetch_candidates(client)

    def fetch_election_state(self, client: CoordinationClientPort | None) -> ElectState:
        return self._membership.fetch_election_state(client)

    def process_pending(self) -> int:
        """Handle queued watch fires on the calling thread.

        Returns:
            Number of watch fires handled.
        """
        return self._process.process_pending()

    @property
    def pending_watches(self) -> int:
        """Number of watch fires queued but not yet handled."""
        return self._process.pending_watches

    def close(self) -> None:
        """Stop the watch consumer thread, if any."""
        self._process.close()
