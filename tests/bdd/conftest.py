"""Shared fixtures for BDD tests."""

import pytest

from zkelect.adapters.fakes import FakeCoordinationEnsemble


@pytest.fixture
def ensemble() -> FakeCoordinationEnsemble:
    """Create an in-memory coordination service.

    Returns:
        Ensemble with no election namespace.
    """
    return FakeCoordinationEnsemble()
