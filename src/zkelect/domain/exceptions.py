"""Domain exceptions.

Exception hierarchy:
- ElectError: Base domain exception.
  - ElectConfigError: Invalid settings or configuration file.
  - MalformedMemberNameError: A member node name has no parsable sequence suffix.
  - AlreadyParticipatingError: participate() called twice on one strategy instance.
  - NotParticipatingError: resume() called before a member was registered.
  - CoordinationError: Failures reported by the coordination client.
    - ConnectionLossError: Client disconnected or session lost.
    - DataInconsistencyError: Election namespace missing where it must exist.
    - NodeAlreadyExistsError: Node creation raced with another writer.
"""


class ElectError(Exception):
    """Base exception for all zkelect errors."""

    pass


class ElectConfigError(ElectError):
    """Raised when election configuration is invalid.

    Raised by domain value objects (e.g., ElectionSettings, RetryPolicy) and
    by ElectionConfigParser when validation fails.
    """

    pass


class MalformedMemberNameError(ElectError):
    """Raised when a member name carries no numeric sequence suffix.

    A corrupt namespace is not retried: it indicates a colliding,
    incompatible writer under the election root.

    Attributes:
        name: The offending member name.
    """

    def __init__(self, name: str, reason: str = "missing numeric sequence suffix") -> None:
        """Initialize MalformedMemberNameError.

        Args:
            name: The member name that could not be parsed.
            reason: Human-readable explanation.
        """
        super().__init__(f"malformed member name {name!r}: {reason}")
        self.name = name
        self.reason = reason


class AlreadyParticipatingError(ElectError):
    """Raised when a strategy instance is asked to participate twice.

    Each participate() call registers a new member node, so a second call on
    the same instance would give one candidate two positions in the election.
    """

    pass


class NotParticipatingError(ElectError):
    """Raised when a strategy is asked to resume without a registered member."""

    pass


class CoordinationError(ElectError):
    """Base class for errors surfaced by the coordination client.

    Attributes:
        path: Node path involved in the failed call (optional).
        original_error: The underlying client exception (optional).
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize CoordinationError.

        Args:
            message: Human-readable error description.
            path: Node path involved in the failed call.
            original_error: The underlying exception that caused the failure.
        """
        super().__init__(message)
        self.message = message
        self.path = path
        self.original_error = original_error


class ConnectionLossError(CoordinationError):
    """Raised when the coordination client is disconnected."""

    pass


class DataInconsistencyError(CoordinationError):
    """Raised when the election namespace is absent but expected to exist."""

    pass


class NodeAlreadyExistsError(CoordinationError):
    """Raised when creating a node that already exists."""

    pass
