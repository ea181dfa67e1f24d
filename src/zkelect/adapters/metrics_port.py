"""Port interface and no-op implementation for metrics collection.

Metrics ports follow fire-and-forget semantics: implementations may
buffer, sample, or drop metrics as needed. No exceptions should propagate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from zkelect.domain.state import ElectState


@runtime_checkable
class MetricsPort(Protocol):
    """Port interface for metrics collection.

    Implementations handle metrics recording to various backends
    (Prometheus, StatsD, etc.). Abstracts the metrics mechanism from
    election strategies.

    Contract:
        - All methods are fire-and-forget (no return value, no exceptions)
        - set_* methods update gauges to specific values
        - record_* methods increment counters
        - Methods may be called from the watch dispatcher thread
    """

    def set_election_state(self, state: ElectState) -> None:
        """Set the election state gauge to the state's numeric code.

        Args:
            state: The strategy's new current state.
        """
        ...

    def set_leader_elected(self, is_elected: bool) -> None:
        """Set the leader gauge.

        Args:
            is_elected: True if this candidate is LEADING (sets gauge to 1),
                       False otherwise (sets gauge to 0).
        """
        ...

    def record_watch_fired(self, deleted: bool) -> None:
        """Count a watch notification handled by a strategy.

        Args:
            deleted: True for node-deleted events, False for any other kind.
        """
        ...


class NoOpMetricsAdapter:
    """No-operation metrics adapter for when metrics are disabled.

    All methods are no-ops. This allows strategies to unconditionally
    call metrics methods without checking if metrics are enabled.

    Example:
        >>> adapter = NoOpMetricsAdapter()
        >>> adapter.set_leader_elected(True)  # Does nothing
    """

    def set_election_state(self, state: ElectState) -> None:
        """No-op."""
        pass

    def set_leader_elected(self, is_elected: bool) -> None:
        """No-op."""
        pass

    def record_watch_fired(self, deleted: bool) -> None:
        """No-op."""
        pass
