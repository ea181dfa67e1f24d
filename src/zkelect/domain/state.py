"""Election state vocabulary.

Remote states reflect what the coordination service shows; local states
reflect this candidate's own standing in the election.
"""

from __future__ import annotations

import threading
from enum import Enum


class ElectState(Enum):
    """Outcome of an election attempt or of a watch re-evaluation.

    Each member carries a stable numeric code for cross-process and log
    comparison. ``str(state)`` renders that code.

    Attributes:
        NOELECTION: Election namespace does not exist.
        VOTING: Namespace exists but holds no members.
        VOTED: Namespace exists and holds members.
        LOSTELECTION: Membership vanished or changed unexpectedly; re-participate.
        LOSTCONNECTION: Coordination client unreachable; reconnect, then re-participate.
        LEADING: This member is first in order.
        LEADED: This member follows and is watching.
    """

    NOELECTION = 0
    VOTING = 1
    VOTED = 2
    LOSTELECTION = -1
    LOSTCONNECTION = -2
    LEADING = 3
    LEADED = 4

    @property
    def code(self) -> int:
        """Stable numeric code of this state."""
        return self.value

    @property
    def is_local(self) -> bool:
        """True for states describing this candidate's own standing."""
        return self in _LOCAL_STATES

    @property
    def is_remote(self) -> bool:
        """True for states observed on the coordination service."""
        return not self.is_local

    @classmethod
    def from_code(cls, code: int) -> ElectState:
        """Resolve a numeric code back to its state.

        Raises:
            ValueError: If the code is unknown.
        """
        return cls(code)

    def __str__(self) -> str:
        return str(self.value)


_LOCAL_STATES = frozenset({ElectState.LEADING, ElectState.LEADED, ElectState.LOSTELECTION})


class ElectStateCell:
    """Single-writer, multi-reader holder for the current election state.

    The watch handler of one strategy instance is the only writer at a
    time; caller threads read the latest published value. Starts empty
    (``None``) until the first update.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: ElectState | None = None

    def get(self) -> ElectState | None:
        """Return the last published state, or None if never set."""
        with self._lock:
            return self._state

    def set(self, state: ElectState) -> ElectState | None:
        """Publish a new state.

        Returns:
            The previously published state, or None.
        """
        with self._lock:
            previous = self._state
            self._state = state
            return previous
