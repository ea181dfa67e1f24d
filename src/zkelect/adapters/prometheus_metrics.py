"""Prometheus metrics adapter for zkelect.

Implements MetricsPort using prometheus-client library.
Gracefully handles missing prometheus-client (raises ImportError at init).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prometheus_client import CollectorRegistry, Counter, Gauge

    from zkelect.domain.state import ElectState


class PrometheusMetricsAdapter:
    """Prometheus implementation of MetricsPort.

    Creates and manages Prometheus collectors for election metrics.
    All names use a configurable prefix (default 'zkelect') for namespace
    clarity.

    Example:
        >>> adapter = PrometheusMetricsAdapter(prefix="myapp_election")
        >>> adapter.set_leader_elected(True)  # Sets myapp_election_is_leader to 1

    Raises:
        ImportError: If prometheus-client is not installed.
    """

    def __init__(
        self,
        prefix: str = "zkelect",
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Initialize Prometheus collectors.

        Args:
            prefix: Metric name prefix. Defaults to "zkelect".
            registry: Registry to register collectors in. Defaults to the
                     process-wide default registry.

        Raises:
            ImportError: If prometheus-client is not installed.
        """
        # Import here to make prometheus-client optional
        from prometheus_client import REGISTRY, Counter, Gauge

        registry = registry if registry is not None else REGISTRY

        self._election_state: Gauge = Gauge(
            f"{prefix}_election_state",
            "Current election state code: 3=LEADING, 4=LEADED, -1=LOSTELECTION, -2=LOSTCONNECTION",
            registry=registry,
        )
        self._leader_elected: Gauge = Gauge(
            f"{prefix}_is_leader",
            "Leader status of this candidate: 1=leading, 0=not leading",
            registry=registry,
        )
        self._watch_fired: Counter = Counter(
            f"{prefix}_watch_fired",
            "Watch notifications handled, by event kind",
            ["kind"],
            registry=registry,
        )

    def set_election_state(self, state: ElectState) -> None:
        """Set election state gauge to the state's numeric code."""
        self._election_state.set(state.code)

    def set_leader_elected(self, is_elected: bool) -> None:
        """Set leader gauge.

        Args:
            is_elected: True if leading (1), False otherwise (0).
        """
        self._leader_elected.set(1 if is_elected else 0)

    def record_watch_fired(self, deleted: bool) -> None:
        """Increment the watch counter under kind="deleted" or kind="other"."""
        self._watch_fired.labels(kind="deleted" if deleted else "other").inc()
