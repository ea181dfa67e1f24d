"""NaiveElection use case: every follower watches the leader.

Followers arm their watch on the head of the ordered membership. When the
leader's node goes away, every follower is woken by the same deletion and
re-evaluates: the new head starts LEADING, everyone else re-arms on it.
That herd effect is the price of the simplest possible watch bookkeeping;
ContentionFreeElection avoids it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zkelect.domain.settings import NAIVE_MEMBER_PREFIX
from zkelect.usecases.election_process import ElectionProcess
from zkelect.usecases.membership import ElectionMembership

if TYPE_CHECKING:
    from zkelect.adapters.metrics_port import MetricsPort
    from zkelect.adapters.ports import CoordinationClientPort, EventEmitterPort
    from zkelect.domain.state import ElectState


def leader_of(candidates: list[str], member_path: str) -> str:
    """Watch target of a naive follower: the head of the ordered candidates."""
    return candidates[0]


class NaiveElection:
    """Leader election where every follower watches the current head.

    Implements ElectionStrategy.

    Dependencies:
        - CoordinationClientPort: passed per call, never stored strongly
        - MetricsPort (optional): election state and watch fire metrics
        - EventEmitterPort (optional): receives StateTransition events

    Thread safety:
        Watch callbacks only enqueue; re-evaluation runs on the instance's
        WatchDispatcher consumer. state may be read from any thread.
    """

    name = "naive"

    def __init__(
        self,
        member_prefix: str = NAIVE_MEMBER_PREFIX,
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
            leader_of,
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
    def membership(self) -> ElectionMembership:
        return self._membership

    def participate(
        self, client: CoordinationClientPort | None, start_election: bool
    ) -> ElectState:
        """Join the election; see ElectionStrategy.participate."""
        return self._process.participate(client, start_election)

    def resume(self, client: CoordinationClientPort | None) -> ElectState:
        return self._process.resume(client)

    def update(self, state: ElectState) -> ElectState:
        return self._process.update(state)

    def fetch_candidates(self, client: CoordinationClientPort | None) -> list[str]:
        return self._membership.fetch_candidates(client)

    def fetch_election_state(self, client: CoordinationClientPort | None) -> ElectState:
        return self._membership.fetch_election_state(client)

    def process_pending(self) -> int:
        """Handle queued watch fires on the calling thread."""
        return self._process.process_pending()

    @property
    def pending_watches(self) -> int:
        return self._process.pending_watches

    def close(self) -> None:
        self._process.close()
