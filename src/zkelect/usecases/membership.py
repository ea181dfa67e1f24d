"""ElectionMembership use case: namespace and member-node operations.

Both election strategies compose one ElectionMembership by value. It owns
everything that does not depend on which node a strategy watches: creating
the election namespace, registering this candidate's member node, reading
ordered membership and arming a watch on a member.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zkelect.domain.exceptions import (
    ConnectionLossError,
    DataInconsistencyError,
    NodeAlreadyExistsError,
)
from zkelect.domain.members import ELECTION_ROOT, MEMBER_SEPARATOR, member_name, order
from zkelect.domain.state import ElectState

if TYPE_CHECKING:
    from collections.abc import Callable

    from zkelect.adapters.ports import CoordinationClientPort
    from zkelect.domain.events import WatchEvent

logger = logging.getLogger(__name__)


def _is_connected(client: CoordinationClientPort | None) -> bool:
    return client is not None and client.is_connected()


class ElectionMembership:
    """Membership operations for one family of member nodes.

    Member nodes live at ``<root>/<member_prefix><sequence>``. Only children
    carrying member_prefix are treated as candidates, so strategy families
    sharing the root never compete for the same ordered positions.

    The coordination client is never cached: every call takes it as an
    argument and re-checks connectivity.
    """

    def __init__(self, member_prefix: str, root: str = ELECTION_ROOT) -> None:
        """Initialize membership for a member prefix.

        Args:
            member_prefix: Prefix of this family's member names, e.g. "ctf_".
            root: Election namespace path.
        """
        self.member_prefix = member_prefix
        self.root = root

    def member_path_for(self, name: str) -> str:
        """Return the absolute path of a member given its bare name or path."""
        return f"{self.root}/{member_name(name)}"

    def ensure_election(
        self, client: CoordinationClientPort, start_election: bool
    ) -> bool:
        """Make sure the election namespace exists.

        Args:
            client: Connected coordination client.
            start_election: Create the namespace if it is missing.

        Returns:
            True if the namespace exists when this returns, False if it is
            absent and start_election is False.

        Raises:
            ConnectionLossError: If the session is lost.
        """
        if client.exists(self.root) is not None:
            return True

        if not start_election:
            return False

        try:
            client.create(self.root)
            logger.info("Started election at %s", self.root)
        except NodeAlreadyExistsError:
            logger.debug("Election at %s was started concurrently", self.root)
        return True

    def register_member(self, client: CoordinationClientPort, payload: bytes) -> str:
        """Create this candidate's ephemeral-sequential member node.

        Returns:
            The realized member path, e.g. "/elect/ctf_0000000004".

        Raises:
            DataInconsistencyError: If the namespace vanished.
            ConnectionLossError: If the session is lost.
        """
        path = client.create(
            f"{self.root}/{self.member_prefix}",
            payload,
            ephemeral=True,
            sequence=True,
        )
        logger.debug("Registered member %s", path)
        return path

    def fetch_candidates(self, client: CoordinationClientPort | None) -> list[str]:
        """Return this family's member names ordered by sequence number.

        Raises:
            ConnectionLossError: If the client is missing or disconnected.
            DataInconsistencyError: If the election namespace does not exist.
            MalformedMemberNameError: If a member name has no numeric suffix.
        """
        if client is None or not client.is_connected():
            raise ConnectionLossError("coordination client is not connected", path=self.root)

        if client.exists(self.root) is None:
            raise DataInconsistencyError(
                f"election namespace {self.root} does not exist", path=self.root
            )

        children = [
            child for child in client.get_children(self.root)
            if child.startswith(self.member_prefix)
        ]
        return order(children, MEMBER_SEPARATOR)

    def fetch_election_state(self, client: CoordinationClientPort | None) -> ElectState:
        """Observe the election namespace without changing it.

        Returns:
            LOSTCONNECTION if the client is missing, disconnected or loses its
            session; NOELECTION if the namespace is absent; VOTING if it has
            no children; VOTED otherwise.
        """
        if not _is_connected(client):
            return ElectState.LOSTCONNECTION

        try:
            if client.exists(self.root) is None:
                return ElectState.NOELECTION
            children = client.get_children(self.root)
        except ConnectionLossError:
            return ElectState.LOSTCONNECTION
        except DataInconsistencyError:
            return ElectState.NOELECTION

        return ElectState.VOTED if children else ElectState.VOTING

    def watch_member(
        self,
        client: CoordinationClientPort,
        name: str,
        callback: Callable[[WatchEvent], None],
    ) -> bool:
        """Arm a one-shot existence watch on a member node.

        Returns:
            True if the member still existed when the watch was armed.

        Raises:
            ConnectionLossError: If the session is lost.
        """
        path = self.member_path_for(name)
        present = client.exists(path, watch=callback) is not None
        logger.debug("Armed watch on %s (present=%s)", path, present)
        return present
