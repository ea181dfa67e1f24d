"""Coordination client adapter backed by kazoo.

Implements CoordinationClientPort on top of kazoo.client.KazooClient and
translates kazoo events and exceptions into zkelect domain types, so the
election core never imports kazoo directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kazoo.client import KazooClient
from kazoo.exceptions import (
    ConnectionClosedError,
    ConnectionLoss,
    NodeExistsError,
    NoNodeError,
    SessionExpiredError,
)
from kazoo.protocol.states import EventType

from zkelect.adapters.ports import NodeStat
from zkelect.domain.events import WatchEvent, WatchEventType
from zkelect.domain.exceptions import (
    ConnectionLossError,
    DataInconsistencyError,
    NodeAlreadyExistsError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from kazoo.protocol.states import WatchedEvent, ZnodeStat

    from zkelect.domain.settings import ElectionSettings

logger = logging.getLogger(__name__)

_EVENT_TYPES: dict[str, WatchEventType] = {
    EventType.CREATED: WatchEventType.NODE_CREATED,
    EventType.DELETED: WatchEventType.NODE_DELETED,
    EventType.CHANGED: WatchEventType.NODE_DATA_CHANGED,
    EventType.CHILD: WatchEventType.NODE_CHILDREN_CHANGED,
}

_SESSION_ERRORS = (ConnectionLoss, SessionExpiredError, ConnectionClosedError)


def to_watch_event(event: WatchedEvent) -> WatchEvent:
    """Translate a kazoo WatchedEvent into a domain WatchEvent.

    Events kazoo reports with type NONE (session notifications) map to
    WatchEventType.SESSION.
    """
    event_type = _EVENT_TYPES.get(event.type, WatchEventType.SESSION)
    return WatchEvent(event_type=event_type, path=event.path or "")


def _wrap_watch(
    watch: Callable[[WatchEvent], None],
) -> Callable[[WatchedEvent], None]:
    def kazoo_watch(event: WatchedEvent) -> None:
        watch(to_watch_event(event))

    return kazoo_watch


def to_node_stat(stat: ZnodeStat) -> NodeStat:
    """Translate a kazoo ZnodeStat into a domain NodeStat."""
    return NodeStat(
        version=stat.version,
        ephemeral_owner=stat.ephemeralOwner,
        num_children=stat.numChildren,
    )


class KazooCoordinationClient:
    """CoordinationClientPort implementation wrapping a KazooClient.

    The wrapped client may be injected (shared session) or built from
    ElectionSettings via from_settings(). Session lifecycle calls
    (start/stop) are pass-throughs; the election core never calls them.

    Thread safety:
        KazooClient is thread-safe. Watch callbacks run on kazoo's event
        thread and are handed a translated WatchEvent.
    """

    def __init__(self, client: KazooClient) -> None:
        """Initialize adapter with a KazooClient.

        Args:
            client: The kazoo client owning the session.
        """
        self._client = client

    @classmethod
    def from_settings(cls, settings: ElectionSettings) -> KazooCoordinationClient:
        """Build an adapter with a fresh, not yet started, KazooClient.

        Args:
            settings: Election settings providing hosts and session timeout.
        """
        return cls(KazooClient(hosts=settings.hosts, timeout=settings.session_timeout))

    @property
    def client(self) -> KazooClient:
        """The wrapped kazoo client."""
        return self._client

    def start(self, timeout: float = 15.0) -> None:
        """Open the session, blocking until connected or timeout."""
        self._client.start(timeout=timeout)

    def stop(self) -> None:
        """Close the session; ephemeral member nodes are removed by the service."""
        self._client.stop()
        self._client.close()

    def is_connected(self) -> bool:
        """Return True while the kazoo session is connected."""
        return bool(self._client.connected)

    def exists(
        self,
        path: str,
        watch: Callable[[WatchEvent], None] | None = None,
    ) -> NodeStat | None:
        """Check node existence, optionally arming a one-shot watch.

        Raises:
            ConnectionLossError: If the session is lost.
        """
        kazoo_watch = _wrap_watch(watch) if watch is not None else None
        try:
            stat = self._client.exists(path, watch=kazoo_watch)
        except _SESSION_ERRORS as exc:
            raise ConnectionLossError(
                f"connection lost while checking {path}", path=path, original_error=exc
            ) from exc

        logger.debug("exists(%s) -> %s", path, stat)
        return to_node_stat(stat) if stat is not None else None

    def create(
        self,
        path: str,
        value: bytes = b"",
        ephemeral: bool = False,
        sequence: bool = False,
    ) -> str:
        """Create a node and return its realized path.

        Raises:
            NodeAlreadyExistsError: If the node already exists.
            DataInconsistencyError: If the parent node does not exist.
            ConnectionLossError: If the session is lost.
        """
        try:
            return str(
                self._client.create(path, value, ephemeral=ephemeral, sequence=sequence)
            )
        except NodeExistsError as exc:
            raise NodeAlreadyExistsError(
                f"node already exists: {path}", path=path, original_error=exc
            ) from exc
        except NoNodeError as exc:
            raise DataInconsistencyError(
                f"parent of {path} does not exist", path=path, original_error=exc
            ) from exc
        except _SESSION_ERRORS as exc:
            raise ConnectionLossError(
                f"connection lost while creating {path}", path=path, original_error=exc
            ) from exc

    def get_children(self, path: str) -> list[str]:
        """List bare child names of a node.

        Raises:
            DataInconsistencyError: If the node does not exist.
            ConnectionLossError: If the session is lost.
        """
        try:
            return list(self._client.get_children(path))
        except NoNodeError as exc:
            raise DataInconsistencyError(
                f"node does not exist: {path}", path=path, original_error=exc
            ) from exc
        except _SESSION_ERRORS as exc:
            raise ConnectionLossError(
                f"connection lost while listing {path}", path=path, original_error=exc
            ) from exc
