"""In-memory coordination service for testing.

FakeCoordinationEnsemble models the parts of a ZooKeeper-like service the
election core relies on: a node tree, per-parent sequence counters,
ephemeral nodes bound to sessions and one-shot existence watches.
FakeCoordinationClient is one session against it and implements
CoordinationClientPort.

Watches fire synchronously on the thread that caused the change, after the
ensemble lock is released.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from zkelect.adapters.ports import NodeStat
from zkelect.domain.events import WatchEvent, WatchEventType
from zkelect.domain.exceptions import (
    ConnectionLossError,
    DataInconsistencyError,
    NodeAlreadyExistsError,
)
from zkelect.domain.members import SEQUENCE_WIDTH

if TYPE_CHECKING:
    from collections.abc import Callable

    WatchCallback = Callable[[WatchEvent], None]


@dataclass
class _Node:
    value: bytes
    ephemeral_owner: int = 0
    version: int = 0


@dataclass(frozen=True)
class _Watch:
    session_id: int
    callback: WatchCallback


def _parent_of(path: str) -> str:
    parent = path.rsplit("/", 1)[0]
    return parent or "/"


class FakeCoordinationEnsemble:
    """Shared in-memory node tree serving any number of fake sessions.

    Example:
        >>> ensemble = FakeCoordinationEnsemble()
        >>> client = ensemble.connect()
        >>> client.create("/elect")
        '/elect'
        >>> client.create("/elect/m_", ephemeral=True, sequence=True)
        '/elect/m_0000000000'
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._nodes: dict[str, _Node] = {"/": _Node(value=b"")}
        self._sequences: dict[str, int] = {}
        self._watches: dict[str, list[_Watch]] = {}
        self._session_ids = itertools.count(1)

    def connect(self) -> FakeCoordinationClient:
        """Open a new session."""
        return FakeCoordinationClient(self, next(self._session_ids))

    # ------------------------------------------------------------------
    # Inspection helpers for tests
    # ------------------------------------------------------------------

    def node_exists(self, path: str) -> bool:
        """Return True if the node exists."""
        with self._lock:
            return path in self._nodes

    def children(self, path: str) -> list[str]:
        """Return bare child names of path, sorted by name."""
        with self._lock:
            return sorted(self._children_of(path))

    def data(self, path: str) -> bytes:
        """Return the payload of a node."""
        with self._lock:
            return self._nodes[path].value

    def watch_count(self, path: str) -> int:
        """Return the number of armed watches on path."""
        with self._lock:
            return len(self._watches.get(path, []))

    # ------------------------------------------------------------------
    # Mutations performed outside any session
    # ------------------------------------------------------------------

    def delete(self, path: str) -> None:
        """Delete a node as an administrator would, firing its watches."""
        with self._lock:
            if path not in self._nodes:
                raise DataInconsistencyError(f"node does not exist: {path}", path=path)
            del self._nodes[path]
            fired = self._take_watches(path)
        self._fire(fired, WatchEvent(WatchEventType.NODE_DELETED, path))

    def set_data(self, path: str, value: bytes) -> None:
        """Overwrite a node's payload, firing its watches."""
        with self._lock:
            node = self._nodes[path]
            node.value = value
            node.version += 1
            fired = self._take_watches(path)
        self._fire(fired, WatchEvent(WatchEventType.NODE_DATA_CHANGED, path))

    # ------------------------------------------------------------------
    # Session operations, called through FakeCoordinationClient
    # ------------------------------------------------------------------

    def _exists(
        self, session_id: int, path: str, watch: WatchCallback | None
    ) -> NodeStat | None:
        with self._lock:
            if watch is not None:
                self._watches.setdefault(path, []).append(_Watch(session_id, watch))
            node = self._nodes.get(path)
            if node is None:
                return None
            return NodeStat(
                version=node.version,
                ephemeral_owner=node.ephemeral_owner,
                num_children=len(self._children_of(path)),
            )

    def _create(
        self,
        session_id: int,
        path: str,
        value: bytes,
        ephemeral: bool,
        sequence: bool,
    ) -> str:
        with self._lock:
            parent = _parent_of(path)
            if parent not in self._nodes:
                raise DataInconsistencyError(f"parent of {path} does not exist", path=path)

            if sequence:
                counter = self._sequences.get(parent, 0)
                self._sequences[parent] = counter + 1
                path = f"{path}{counter:0{SEQUENCE_WIDTH}d}"

            if path in self._nodes:
                raise NodeAlreadyExistsError(f"node already exists: {path}", path=path)

            self._nodes[path] = _Node(
                value=value, ephemeral_owner=session_id if ephemeral else 0
            )
            fired = self._take_watches(path)
        self._fire(fired, WatchEvent(WatchEventType.NODE_CREATED, path))
        return path

    def _get_children(self, path: str) -> list[str]:
        with self._lock:
            if path not in self._nodes:
                raise DataInconsistencyError(f"node does not exist: {path}", path=path)
            return self._children_of(path)

    def _close_session(self, session_id: int) -> None:
        """Expire a session: drop its watches, delete its ephemeral nodes."""
        deletions: list[tuple[str, list[_Watch]]] = []
        with self._lock:
            self._drop_session_watches(session_id)
            owned = [
                path
                for path, node in self._nodes.items()
                if node.ephemeral_owner == session_id
            ]
            for path in owned:
                del self._nodes[path]
                deletions.append((path, self._take_watches(path)))

        for path, fired in deletions:
            self._fire(fired, WatchEvent(WatchEventType.NODE_DELETED, path))

    def _disconnect_session(self, session_id: int, notify: bool) -> None:
        """Sever a session's connection without expiring it."""
        with self._lock:
            fired = self._drop_session_watches(session_id)
        if notify:
            for path, watch in fired:
                watch.callback(WatchEvent(WatchEventType.SESSION, path))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _children_of(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return [
            candidate[len(prefix):]
            for candidate in self._nodes
            if candidate.startswith(prefix) and "/" not in candidate[len(prefix):]
        ]

    def _take_watches(self, path: str) -> list[_Watch]:
        return self._watches.pop(path, [])

    def _drop_session_watches(self, session_id: int) -> list[tuple[str, _Watch]]:
        dropped: list[tuple[str, _Watch]] = []
        for path in list(self._watches):
            kept = []
            for watch in self._watches[path]:
                if watch.session_id == session_id:
                    dropped.append((path, watch))
                else:
                    kept.append(watch)
            if kept:
                self._watches[path] = kept
            else:
                del self._watches[path]
        return dropped

    @staticmethod
    def _fire(watches: list[_Watch], event: WatchEvent) -> None:
        for watch in watches:
            watch.callback(event)


class FakeCoordinationClient:
    """One session against a FakeCoordinationEnsemble.

    Implements CoordinationClientPort. Calls on a disconnected or closed
    session raise ConnectionLossError.
    """

    def __init__(self, ensemble: FakeCoordinationEnsemble, session_id: int) -> None:
        self._ensemble = ensemble
        self._session_id = session_id
        self._connected = True
        self._closed = False

    @property
    def session_id(self) -> int:
        """Identifier used as ephemeral owner of this session's nodes."""
        return self._session_id

    def is_connected(self) -> bool:
        """Return True while the session is usable."""
        return self._connected

    def exists(
        self, path: str, watch: WatchCallback | None = None
    ) -> NodeStat | None:
        """Check node existence, optionally arming a one-shot watch."""
        self._ensure_connected(path)
        return self._ensemble._exists(self._session_id, path, watch)

    def create(
        self,
        path: str,
        value: bytes = b"",
        ephemeral: bool = False,
        sequence: bool = False,
    ) -> str:
        """Create a node and return its realized path."""
        self._ensure_connected(path)
        return self._ensemble._create(self._session_id, path, value, ephemeral, sequence)

    def get_children(self, path: str) -> list[str]:
        """List bare child names of a node."""
        self._ensure_connected(path)
        return self._ensemble._get_children(path)

    def close(self) -> None:
        """End the session; the ensemble deletes its ephemeral nodes."""
        if self._closed:
            return
        self._closed = True
        self._connected = False
        self._ensemble._close_session(self._session_id)

    def disconnect(self, notify: bool = False) -> None:
        """Lose the connection while the session (and its nodes) survives.

        Args:
            notify: Deliver a SESSION event to this session's armed watches.
        """
        self._connected = False
        self._ensemble._disconnect_session(self._session_id, notify)

    def reconnect(self) -> None:
        """Restore a disconnected, not closed, session."""
        if self._closed:
            raise ConnectionLossError("session is closed")
        self._connected = True

    def _ensure_connected(self, path: str) -> None:
        if not self._connected:
            raise ConnectionLossError(f"session {self._session_id} is disconnected", path=path)
