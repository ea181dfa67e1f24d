"""Election settings domain entity."""

from dataclasses import dataclass, field
from typing import Literal

from zkelect.domain.exceptions import ElectConfigError
from zkelect.domain.members import MEMBER_SEPARATOR
from zkelect.domain.retry import RetryPolicy

StrategyName = Literal["naive", "contention_free"]

NAIVE_MEMBER_PREFIX = "naive_"
CONTENTION_FREE_MEMBER_PREFIX = "ctf_"

_DEFAULT_PREFIXES: dict[str, str] = {
    "naive": NAIVE_MEMBER_PREFIX,
    "contention_free": CONTENTION_FREE_MEMBER_PREFIX,
}


@dataclass(frozen=True)
class ElectionSettings:
    """Leader election configuration.

    Value object describing how to reach the coordination service and how
    this candidate's member nodes are named. The election root itself is
    fixed (see zkelect.domain.members.ELECTION_ROOT); only the member prefix
    distinguishing strategy families is configurable.

    Attributes:
        hosts: Comma-separated "host:port" list of the ensemble.
        session_timeout: Session timeout in seconds. Must be > 0.
        strategy: Which election strategy to run.
        member_prefix: Member name prefix. Defaults to "naive_" or "ctf_"
                       depending on strategy. Must end with the separator
                       and must not contain "/".
        start_election: Create the election namespace if it is missing.
    """

    hosts: str = "127.0.0.1:2181"
    session_timeout: float = 10.0
    strategy: StrategyName = "contention_free"
    member_prefix: str | None = None
    start_election: bool = False

    def __post_init__(self) -> None:
        """Validate settings and resolve the default member prefix."""
        self._validate_hosts()
        self._validate_session_timeout()
        self._validate_strategy()
        self._resolve_member_prefix()
        self._validate_member_prefix()

    def _validate_hosts(self) -> None:
        """Validate hosts is a non-empty list of host:port entries."""
        if not self.hosts or not self.hosts.strip():
            raise ElectConfigError("hosts cannot be empty")

        for host in self.hosts.split(","):
            if not host.strip():
                raise ElectConfigError(f"hosts contains an empty entry, got: {self.hosts!r}")

    def _validate_session_timeout(self) -> None:
        """Validate session_timeout is positive."""
        if self.session_timeout <= 0:
            raise ElectConfigError(
                f"session_timeout must be positive, got: {self.session_timeout}"
            )

    def _validate_strategy(self) -> None:
        """Validate strategy name."""
        if self.strategy not in _DEFAULT_PREFIXES:
            raise ElectConfigError(
                f"strategy must be 'naive' or 'contention_free', got: {self.strategy}"
            )

    def _resolve_member_prefix(self) -> None:
        if self.member_prefix is None:
            object.__setattr__(self, "member_prefix", _DEFAULT_PREFIXES[self.strategy])

    def _validate_member_prefix(self) -> None:
        """Validate member_prefix can be parsed back out of a member name."""
        prefix = self.resolved_prefix
        if not prefix.strip(MEMBER_SEPARATOR):
            raise ElectConfigError("member_prefix cannot be empty")

        if "/" in prefix:
            raise ElectConfigError(f"member_prefix cannot contain '/', got: {prefix!r}")

        if not prefix.endswith(MEMBER_SEPARATOR):
            raise ElectConfigError(
                f"member_prefix must end with {MEMBER_SEPARATOR!r}, got: {prefix!r}"
            )

    @property
    def resolved_prefix(self) -> str:
        """Member prefix with the strategy default applied."""
        return self.member_prefix or _DEFAULT_PREFIXES[self.strategy]


@dataclass(frozen=True)
class ElectionConfig:
    """Complete candidate configuration as loaded from a config file.

    Attributes:
        settings: Coordination service and member naming settings.
        retry: Re-participation policy applied by the caller.
    """

    settings: ElectionSettings
    retry: RetryPolicy = field(default_factory=RetryPolicy)
