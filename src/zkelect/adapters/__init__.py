"""Interface adapters: coordination client and metrics ports.

The kazoo-backed client lives in zkelect.adapters.kazoo_client and is not
imported here, so the core works without the zookeeper extra installed.
"""

from zkelect.adapters.ports import (
    CoordinationClientPort,
    EventEmitterPort,
    NodeStat,
)
from zkelect.adapters.metrics_port import MetricsPort, NoOpMetricsAdapter

__all__ = [
    "CoordinationClientPort",
    "EventEmitterPort",
    "NodeStat",
    "MetricsPort",
    "NoOpMetricsAdapter",
]
