"""Fake metrics adapter for testing.

Provides a test double for MetricsPort that records all metric updates
for assertion in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zkelect.domain.state import ElectState


@dataclass(frozen=True)
class MetricCall:
    """Record of a single metric update.

    Attributes:
        metric_name: Name of the metric that was updated.
        value: Value that was set.
    """

    metric_name: str
    value: float | int | bool | str


class FakeMetricsAdapter:
    """Fake implementation of MetricsPort for testing.

    Records all metric updates for later assertion. Provides methods
    to inspect current state and call history.

    Example:
        >>> fake = FakeMetricsAdapter()
        >>> fake.set_leader_elected(True)
        >>> fake.current_leader_elected
        True
        >>> fake.calls
        [MetricCall(metric_name='leader_elected', value=True)]
    """

    def __init__(self) -> None:
        """Initialize with no recorded state."""
        self._election_state: ElectState | None = None
        self._leader_elected: bool | None = None
        self._watch_fired: dict[str, int] = {"deleted": 0, "other": 0}
        self._calls: list[MetricCall] = []

    @property
    def calls(self) -> list[MetricCall]:
        """Return list of all metric update calls.

        Returns a copy to prevent external modification.

        Returns:
            List of MetricCall objects in order of invocation.
        """
        return list(self._calls)

    @property
    def current_election_state(self) -> ElectState | None:
        """Return last set election state, or None if never set."""
        return self._election_state

    @property
    def current_leader_elected(self) -> bool | None:
        """Return last set leader election state, or None if never set."""
        return self._leader_elected

    def watch_fired_count(self, kind: str) -> int:
        """Return how many watch fires of a kind ("deleted"/"other") were recorded."""
        return self._watch_fired[kind]

    def set_election_state(self, state: ElectState) -> None:
        """Record election state update.

        Args:
            state: The new election state.
        """
        self._election_state = state
        self._calls.append(MetricCall("election_state", state.code))

    def set_leader_elected(self, is_elected: bool) -> None:
        """Record leader election update.

        Args:
            is_elected: True if leader elected.
        """
        self._leader_elected = is_elected
        self._calls.append(MetricCall("leader_elected", is_elected))

    def record_watch_fired(self, deleted: bool) -> None:
        """Record a handled watch fire.

        Args:
            deleted: True for node-deleted events.
        """
        kind = "deleted" if deleted else "other"
        self._watch_fired[kind] += 1
        self._calls.append(MetricCall("watch_fired", kind))

    def clear_calls(self) -> None:
        """Clear the recorded calls list.

        Does not reset current_* state values.
        """
        self._calls.clear()

    def reset(self) -> None:
        """Reset all state and calls.

        Clears both the calls list and all current_* state values.
        """
        self._election_state = None
        self._leader_elected = None
        self._watch_fired = {"deleted": 0, "other": 0}
        self._calls.clear()
