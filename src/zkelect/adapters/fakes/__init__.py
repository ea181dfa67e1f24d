"""Fake adapters for testing.

This module provides test doubles for port interfaces, enabling
deterministic testing without a running coordination service.
"""

from zkelect.adapters.fakes.fake_coordination_client import (
    FakeCoordinationClient,
    FakeCoordinationEnsemble,
)
from zkelect.adapters.fakes.fake_metrics import FakeMetricsAdapter, MetricCall

__all__ = [
    "FakeCoordinationClient",
    "FakeCoordinationEnsemble",
    "FakeMetricsAdapter",
    "MetricCall",
]
