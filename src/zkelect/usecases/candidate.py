"""Candidate use case: caller-side participation with retries.

Strategies never retry: participate() reports LOSTCONNECTION or
LOSTELECTION and leaves the decision to the caller. Candidate is that
caller. It applies a RetryPolicy between attempts and follows asynchronous
transitions so it can tell when this process leads or needs to rejoin.

A retry never registers a second member while the session still holds
the one from an earlier attempt: that member is resumed instead. A fresh
strategy is built only once it is gone.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from zkelect.domain.retry import RetryPolicy
from zkelect.domain.state import ElectState

if TYPE_CHECKING:
    from collections.abc import Callable

    from zkelect.adapters.ports import CoordinationClientPort, EventEmitterPort
    from zkelect.domain.events import StateTransition
    from zkelect.usecases.election_strategy import ElectionStrategy

    StrategyFactory = Callable[[EventEmitterPort], ElectionStrategy]

logger = logging.getLogger(__name__)


class Candidate:
    """One process taking part in a leader election.

    Implements EventEmitterPort: strategies it creates report their
    asynchronous transitions back to it.

    Dependencies:
        - CoordinationClientPort: shared session used for every attempt
        - strategy_factory: builds a strategy wired to a given emitter
        - RetryPolicy: how often and how long to wait before re-participating

    Thread safety:
        elect() and lead() are meant for one caller thread. emit() runs on
        strategy watch threads; state and wait_until_leading() may be used
        from any thread.

    Example:
        >>> candidate = Candidate(client, lambda emitter: ContentionFreeElection(
        ...     event_emitter=emitter))
        >>> candidate.elect(start_election=True)
        <ElectState.LEADING: 3>
    """

    def __init__(
        self,
        client: CoordinationClientPort,
        strategy_factory: StrategyFactory,
        retry_policy: RetryPolicy | None = None,
        *,
        start_election: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        on_transition: Callable[[StateTransition], None] | None = None,
    ) -> None:
        """Initialize the candidate.

        Args:
            client: Coordination client shared by all attempts.
            strategy_factory: Called with this candidate as event emitter.
            retry_policy: Re-participation policy. Defaults to RetryPolicy().
            start_election: Default for elect() and lead(): create the election
                namespace if it is missing.
            sleep: Backoff sleep function, replaceable in tests.
            on_transition: Optional observer called for every transition.
        """
        self._client = client
        self._strategy_factory = strategy_factory
        self._retry_policy = retry_policy if retry_policy is not None else RetryPolicy()
        self._start_election = start_election
        self._sleep = sleep
        self._on_transition = on_transition
        self._condition = threading.Condition()
        self._strategy: ElectionStrategy | None = None
        self._state: ElectState | None = None
        self._rejoin_needed = False
        self.attempts = 0

    @property
    def strategy(self) -> ElectionStrategy | None:
        """Strategy of the current attempt, or None before elect()."""
        return self._strategy

    @property
    def state(self) -> ElectState | None:
        """Latest known state: the last participate() outcome or transition."""
        with self._condition:
            return self._state

    @property
    def is_leader(self) -> bool:
        return self.state is ElectState.LEADING

    @property
    def rejoin_needed(self) -> bool:
        """True once an asynchronous transition asked for re-participation."""
        with self._condition:
            return self._rejoin_needed

    def elect(self, start_election: bool | None = None) -> ElectState:
        """Participate until settled or retries are exhausted.

        LOSTCONNECTION and LOSTELECTION are retried with exponential
        backoff. LEADING, LEADED and NOELECTION end the loop. A retry
        resumes the member of the previous attempt while it exists.

        Args:
            start_election: Create the election namespace if it is missing.
                None uses the value given to the constructor.

        Returns:
            Outcome of the last attempt.

        Raises:
            MalformedMemberNameError: If the namespace is corrupt.
        """
        if start_election is None:
            start_election = self._start_election

        attempt = 0
        while True:
            outcome = self._participate_once(start_election)
            if not self._retry_policy.is_retryable(outcome):
                return outcome

            if not self._retry_policy.should_retry(attempt):
                logger.warning(
                    "Giving up after %d retries, last outcome %s", attempt, outcome.name
                )
                return outcome

            delay = self._retry_policy.calculate_backoff(attempt)
            logger.info(
                "Election outcome %s, retrying in %.2fs (attempt %d/%d)",
                outcome.name,
                delay,
                attempt + 1,
                self._retry_policy.max_retries,
            )
            self._sleep(delay)
            attempt += 1

    def wait_until_leading(self, timeout: float | None = None) -> bool:
        """Block until this candidate leads, needs to rejoin or timeout expires.

        Returns:
            True if the candidate is LEADING.
        """
        with self._condition:
            self._condition.wait_for(
                lambda: self._state is ElectState.LEADING or self._rejoin_needed,
                timeout=timeout,
            )
            return self._state is ElectState.LEADING

    def lead(
        self, start_election: bool | None = None, timeout: float | None = None
    ) -> bool:
        """Keep participating until this candidate leads.

        Rejoins whenever a transition reports LOSTELECTION or
        LOSTCONNECTION, within the retry policy.

        Args:
            start_election: Create the election namespace if it is missing.
                None uses the value given to the constructor.
            timeout: Overall deadline in seconds, None to wait forever.

        Returns:
            True if LEADING, False on timeout, NOELECTION or exhausted retries.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            outcome = self.elect(start_election)
            if outcome is ElectState.LEADING:
                return True
            if outcome is not ElectState.LEADED:
                return False

            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            if self.wait_until_leading(remaining):
                return True
            if not self.rejoin_needed:
                return False
            if deadline is not None and time.monotonic() >= deadline:
                logger.info("Deadline passed before rejoining the election")
                return False

    def emit(self, event: StateTransition) -> None:
        """Receive a transition from the current strategy.

        Transitions of strategies from earlier attempts are ignored.
        """
        strategy = self._strategy
        if strategy is None or event.member_path != strategy.member_path:
            logger.debug("Ignoring transition of stale member %s", event.member_path)
            return

        with self._condition:
            self._state = event.current
            if self._retry_policy.is_retryable(event.current):
                self._rejoin_needed = True
            self._condition.notify_all()

        if event.became_leader:
            logger.info("Became leader as %s", event.member_path)
        elif event.lost_leadership:
            logger.warning("Lost leadership as %s", event.member_path)

        if self._on_transition is not None:
            self._on_transition(event)

    def close(self) -> None:
        """Stop watch handling of the current strategy."""
        if self._strategy is not None:
            self._strategy.close()

    def _participate_once(self, start_election: bool) -> ElectState:
        with self._condition:
            self._rejoin_needed = False
            self._state = None
        self.attempts += 1

        outcome = self._resume_member()
        if outcome is None:
            self.close()
            strategy = self._strategy_factory(self)
            self._strategy = strategy
            outcome = strategy.participate(self._client, start_election)

        with self._condition:
            # a watch fire may already have reported a newer state
            if self._state is None:
                self._state = outcome
            self._condition.notify_all()
        return outcome

    def _resume_member(self) -> ElectState | None:
        # a live member of an earlier attempt is re-evaluated, never duplicated
        strategy = self._strategy
        if strategy is None or strategy.member_path is None:
            return None

        member = strategy.member_path
        outcome = strategy.resume(self._client)
        if strategy.member_path is None:
            return None

        logger.info("Resumed member %s -> %s", member, outcome.name)
        return outcome
