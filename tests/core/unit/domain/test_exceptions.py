"""Unit tests for the exception hierarchy and domain events."""

import pytest

from zkelect.domain.events import StateTransition, WatchEvent, WatchEventType
from zkelect.domain.exceptions import (
    AlreadyParticipatingError,
    ConnectionLossError,
    CoordinationError,
    DataInconsistencyError,
    ElectConfigError,
    ElectError,
    MalformedMemberNameError,
    NodeAlreadyExistsError,
    NotParticipatingError,
)
from zkelect.domain.state import ElectState


@pytest.mark.tier(0)
@pytest.mark.tra("Domain.Invariant.ExceptionHierarchy")
class TestExceptionHierarchy:
    """Every zkelect error is an ElectError."""

    @pytest.mark.parametrize(
        "exc_type",
        [
            ElectConfigError,
            MalformedMemberNameError,
            AlreadyParticipatingError,
            NotParticipatingError,
            CoordinationError,
        ],
    )
    def test_direct_subclasses(self, exc_type: type) -> None:
        assert issubclass(exc_type, ElectError)

    @pytest.mark.parametrize(
        "exc_type", [ConnectionLossError, DataInconsistencyError, NodeAlreadyExistsError]
    )
    def test_coordination_errors(self, exc_type: type) -> None:
        assert issubclass(exc_type, CoordinationError)

    def test_coordination_error_carries_context(self) -> None:
        cause = RuntimeError("socket closed")
        error = ConnectionLossError("lost", path="/elect", original_error=cause)
        assert error.path == "/elect"
        assert error.original_error is cause
        assert str(error) == "lost"

    def test_malformed_member_message(self) -> None:
        error = MalformedMemberNameError("m_x")
        assert error.name == "m_x"
        assert "m_x" in str(error)


@pytest.mark.tier(0)
@pytest.mark.tra("Domain.Invariant.ElectionEvents")
class TestEvents:
    """Test watch events and state transitions."""

    def test_deletion_flag(self) -> None:
        assert WatchEvent(WatchEventType.NODE_DELETED, "/elect/a_0000000001").is_deletion
        assert not WatchEvent(WatchEventType.NODE_DATA_CHANGED, "/elect/a").is_deletion
        assert not WatchEvent(WatchEventType.SESSION, "").is_deletion

    def test_became_leader(self) -> None:
        assert StateTransition(ElectState.LEADED, ElectState.LEADING).became_leader
        assert StateTransition(None, ElectState.LEADING).became_leader
        assert not StateTransition(ElectState.LEADING, ElectState.LEADING).became_leader

    def test_lost_leadership(self) -> None:
        assert StateTransition(ElectState.LEADING, ElectState.LOSTCONNECTION).lost_leadership
        assert not StateTransition(ElectState.LEADED, ElectState.LOSTELECTION).lost_leadership
