"""Factory functions for creating election strategies, clients and candidates.

Provides factory methods to instantiate zkelect components from settings.
Handles optional dependency imports gracefully.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zkelect.domain.settings import ElectionConfig, ElectionSettings
from zkelect.usecases.candidate import Candidate
from zkelect.usecases.contention_free_election import ContentionFreeElection
from zkelect.usecases.naive_election import NaiveElection

if TYPE_CHECKING:
    from zkelect.adapters.kazoo_client import KazooCoordinationClient
    from zkelect.adapters.metrics_port import MetricsPort
    from zkelect.adapters.ports import CoordinationClientPort, EventEmitterPort
    from zkelect.usecases.election_strategy import ElectionStrategy


class KazooNotInstalledError(ImportError):
    """Raised when kazoo is required but not installed.

    Install with: pip install zkelect[zookeeper]
    """

    def __init__(self) -> None:
        super().__init__(
            "kazoo is not installed. "
            "Install with: pip install zkelect[zookeeper]"
        )


def create_strategy(
    settings: ElectionSettings,
    metrics: MetricsPort | None = None,
    event_emitter: EventEmitterPort | None = None,
    autostart: bool = True,
) -> ElectionStrategy:
    """Create the election strategy selected by settings.strategy.

    Args:
        settings: Election settings naming the strategy and member prefix.
        metrics: Optional metrics port.
        event_emitter: Optional observer for state transitions.
        autostart: Handle watch fires on a daemon thread.

    Returns:
        A NaiveElection or ContentionFreeElection.

    Example:
        >>> strategy = create_strategy(ElectionSettings(strategy="naive"))
        >>> strategy.membership.member_prefix
        'naive_'
    """
    strategy_cls = NaiveElection if settings.strategy == "naive" else ContentionFreeElection
    return strategy_cls(
        settings.resolved_prefix,
        metrics=metrics,
        event_emitter=event_emitter,
        autostart=autostart,
    )


def create_client(settings: ElectionSettings) -> KazooCoordinationClient:
    """Create a kazoo-backed coordination client from settings.

    The client is not started; call start() before participating.

    Raises:
        KazooNotInstalledError: If kazoo is not installed.
    """
    # Import kazoo adapter (optional dependency)
    try:
        from zkelect.adapters.kazoo_client import KazooCoordinationClient
    except ImportError as exc:
        raise KazooNotInstalledError() from exc

    return KazooCoordinationClient.from_settings(settings)


def create_candidate(
    config: ElectionConfig,
    client: CoordinationClientPort,
    metrics: MetricsPort | None = None,
) -> Candidate:
    """Create a Candidate running the configured strategy with its retry policy.

    settings.start_election becomes the default of Candidate.elect() and
    Candidate.lead().

    Args:
        config: Loaded configuration (see ElectionConfigParser).
        client: Coordination client, typically from create_client().
        metrics: Optional metrics port shared by every attempt.
    """
    settings = config.settings

    def strategy_factory(emitter: EventEmitterPort) -> ElectionStrategy:
        return create_strategy(settings, metrics=metrics, event_emitter=emitter)

    return Candidate(
        client,
        strategy_factory,
        config.retry,
        start_election=settings.start_election,
    )
