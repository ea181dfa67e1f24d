"""ElectionProcess: the participate / watch / re-arm flow of one member.

Both strategies run the same flow: register a member, order the
candidates, lead if this member is the head, otherwise arm one existence
watch and re-evaluate when it fires. They differ only in which member the
watch targets. ElectionProcess owns that flow and is composed into each
strategy together with the strategy's watch target.
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING

from zkelect.domain.exceptions import (
    AlreadyParticipatingError,
    ConnectionLossError,
    CoordinationError,
    DataInconsistencyError,
    MalformedMemberNameError,
    NotParticipatingError,
)
from zkelect.domain.members import is_head, member_name
from zkelect.domain.state import ElectState
from zkelect.usecases.election_strategy import (
    ElectionStatePublisher,
    PendingWatch,
    member_payload,
)
from zkelect.usecases.watch_dispatcher import WatchDispatcher

if TYPE_CHECKING:
    from collections.abc import Callable

    from zkelect.adapters.metrics_port import MetricsPort
    from zkelect.adapters.ports import CoordinationClientPort, EventEmitterPort
    from zkelect.domain.events import WatchEvent
    from zkelect.usecases.membership import ElectionMembership

    WatchTarget = Callable[[list[str], str], str | None]

logger = logging.getLogger(__name__)


class ElectionProcess:
    """Runs one member's way through an election.

    The watch target receives the ordered candidates and this member's path
    and returns the bare name to watch, or None when this member no longer
    appears among the candidates.

    Dependencies:
        - ElectionMembership: namespace access and watch arming
        - ElectionStatePublisher: stored state, metrics, transition events
        - WatchDispatcher: serialized handling of watch fires

    Thread safety:
        Watch callbacks only enqueue. Fires are handled by the dispatcher
        consumer; participate() and resume() run on the caller thread.
    """

    def __init__(
        self,
        name: str,
        membership: ElectionMembership,
        watch_target: WatchTarget,
        *,
        metrics: MetricsPort | None = None,
        event_emitter: EventEmitterPort | None = None,
        autostart: bool = True,
    ) -> None:
        """Initialize the process.

        Args:
            name: Strategy name used in log messages and the thread name.
            membership: Namespace helper carrying the member prefix.
            watch_target: Picks the member to watch from the ordered candidates.
            metrics: Optional metrics port.
            event_emitter: Optional observer for state transitions.
            autostart: Start a daemon thread handling watch fires when the
                first watch is armed. With False, call process_pending().
        """
        self._name = name
        self._membership = membership
        self._watch_target = watch_target
        self._publisher = ElectionStatePublisher(name, metrics, event_emitter)
        self._autostart = autostart
        self._dispatcher = self._new_dispatcher()
        self._member_path: str | None = None
        self._watched: str | None = None

    @property
    def state(self) -> ElectState | None:
        return self._publisher.state

    @property
    def member_path(self) -> str | None:
        return self._member_path

    @property
    def watched_member(self) -> str | None:
        """Bare name of the member the last armed watch targets."""
        return self._watched

    @property
    def pending_watches(self) -> int:
        return self._dispatcher.pending

    def participate(
        self, client: CoordinationClientPort | None, start_election: bool
    ) -> ElectState:
        """Register a member and decide its standing.

        The outcome is reported, not stored.

        Raises:
            AlreadyParticipatingError: If a member was already registered.
        """
        if self._member_path is not None:
            raise AlreadyParticipatingError(
                f"{self._name} election already participating as {self._member_path}"
            )

        outcome = self._guarded(client, lambda live: self._enter(live, start_election))
        return self._publisher.report(outcome, self._member_path)

    def resume(self, client: CoordinationClientPort | None) -> ElectState:
        """Re-evaluate the registered member and re-arm its watch.

        If the member node is gone, the member path is cleared and
        LOSTELECTION is returned; participate() may then be called again.
        The outcome is stored, so later watch fires compare against it.
        A process stopped by close() gets a new watch consumer.

        Raises:
            NotParticipatingError: If no member was registered.
        """
        if self._member_path is None:
            raise NotParticipatingError(f"{self._name} election has no member to resume")

        if self._dispatcher.closed:
            # close() ended watch handling; the re-armed watch needs a consumer
            self._dispatcher = self._new_dispatcher()

        member = self._member_path
        outcome = self._guarded(client, self._rejoin)
        if self._member_path is None:
            self._publisher.report(outcome, member)
            return outcome
        return self.update(outcome)

    def update(self, state: ElectState) -> ElectState:
        """Store the new current state."""
        return self._publisher.store(state, self._member_path)

    def process_pending(self) -> int:
        return self._dispatcher.drain()

    def close(self) -> None:
        self._dispatcher.stop()

    def _new_dispatcher(self) -> WatchDispatcher[PendingWatch]:
        return WatchDispatcher(
            self._handle_watch,
            name=f"{self._name}-{id(self):x}",
            on_error=self._handle_failure,
            autostart=self._autostart,
        )

    def _guarded(
        self,
        client: CoordinationClientPort | None,
        step: Callable[[CoordinationClientPort], ElectState],
    ) -> ElectState:
        if client is None or not client.is_connected():
            return ElectState.LOSTCONNECTION
        try:
            return step(client)
        except ConnectionLossError:
            return ElectState.LOSTCONNECTION
        except DataInconsistencyError:
            return ElectState.LOSTELECTION

    def _enter(self, client: CoordinationClientPort, start_election: bool) -> ElectState:
        if not self._membership.ensure_election(client, start_election):
            return ElectState.NOELECTION

        self._member_path = self._membership.register_member(client, member_payload(self))
        return self._decide(client, self._membership.fetch_candidates(client))

    def _rejoin(self, client: CoordinationClientPort) -> ElectState:
        member = self._member_path or ""
        try:
            candidates = self._membership.fetch_candidates(client)
        except DataInconsistencyError:
            candidates = []

        if member_name(member) not in candidates:
            logger.info("%s election: member %s is gone", self._name, member)
            self._member_path = None
            self._watched = None
            return ElectState.LOSTELECTION

        return self._decide(client, candidates)

    def _decide(self, client: CoordinationClientPort, candidates: list[str]) -> ElectState:
        if not candidates:
            return ElectState.LOSTELECTION

        member = self._member_path or ""
        if is_head(candidates, member):
            self._watched = None
            return ElectState.LEADING

        target = self._watch_target(candidates, member)
        if target is None:
            return ElectState.LOSTELECTION

        if self._arm(client, target):
            return ElectState.LEADED
        return ElectState.LOSTELECTION

    def _arm(self, client: CoordinationClientPort, target: str) -> bool:
        self._watched = target
        present = self._membership.watch_member(client, target, self._watch_callback(client))
        self._dispatcher.ensure_started()
        return present

    def _watch_callback(
        self, client: CoordinationClientPort
    ) -> Callable[[WatchEvent], None]:
        process_ref = weakref.ref(self)
        client_ref = weakref.ref(client)

        def on_watch(event: WatchEvent) -> None:
            process = process_ref()
            if process is not None:
                process._dispatcher.submit(PendingWatch(event, client_ref))

        return on_watch

    def _handle_watch(self, pending: PendingWatch) -> None:
        event = pending.event
        self._publisher.metrics.record_watch_fired(event.is_deletion)
        logger.debug(
            "%s election %s: watch on %s fired %s",
            self._name,
            self._member_path,
            self._watched,
            event,
        )

        client = pending.client()
        try:
            candidates = self._membership.fetch_candidates(client)
        except CoordinationError as exc:
            logger.warning("%s election %s: lost connection (%s)", self._name, self._member_path, exc)
            self.update(ElectState.LOSTCONNECTION)
            return
        except MalformedMemberNameError as exc:
            logger.error("%s election %s: corrupt namespace: %s", self._name, self._member_path, exc)
            self.update(ElectState.LOSTELECTION)
            return

        if not candidates or not event.is_deletion:
            self.update(ElectState.LOSTELECTION)
            return

        member = self._member_path or ""
        if is_head(candidates, member):
            self._watched = None
            self.update(ElectState.LEADING)
            return

        target = self._watch_target(candidates, member)
        if target is None:
            logger.warning("%s election: own member %s vanished", self._name, member)
            self.update(ElectState.LOSTELECTION)
            return

        assert client is not None
        try:
            present = self._arm(client, target)
        except ConnectionLossError:
            present = False
        self.update(ElectState.LEADED if present else ElectState.LOSTCONNECTION)

    def _handle_failure(self, pending: PendingWatch, exc: Exception) -> None:
        self.update(ElectState.LOSTELECTION)
