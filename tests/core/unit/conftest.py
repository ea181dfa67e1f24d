"""Shared fixtures for zkelect core unit tests."""

from __future__ import annotations

import pytest

from zkelect.adapters.fakes import (
    FakeCoordinationClient,
    FakeCoordinationEnsemble,
    FakeMetricsAdapter,
)
from zkelect.domain.members import ELECTION_ROOT


@pytest.fixture
def ensemble() -> FakeCoordinationEnsemble:
    """Empty in-memory coordination service."""
    return FakeCoordinationEnsemble()


@pytest.fixture
def client(ensemble: FakeCoordinationEnsemble) -> FakeCoordinationClient:
    """A connected session against an ensemble with no election started."""
    return ensemble.connect()


@pytest.fixture
def started(ensemble: FakeCoordinationEnsemble) -> FakeCoordinationEnsemble:
    """Ensemble whose election namespace already exists."""
    admin = ensemble.connect()
    admin.create(ELECTION_ROOT)
    return ensemble


@pytest.fixture
def metrics() -> FakeMetricsAdapter:
    """Recording metrics adapter."""
    return FakeMetricsAdapter()


class RecordingEmitter:
    """EventEmitterPort double collecting every emitted transition."""

    def __init__(self) -> None:
        self.events: list = []

    def emit(self, event) -> None:
        self.events.append(event)


@pytest.fixture
def emitter() -> RecordingEmitter:
    """Transition recorder."""
    return RecordingEmitter()
