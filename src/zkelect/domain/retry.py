"""Re-participation policy domain value object."""

from dataclasses import dataclass

from zkelect.domain.exceptions import ElectConfigError
from zkelect.domain.state import ElectState

# States after which a caller should try participate() again
_RETRYABLE_STATES = frozenset({ElectState.LOSTCONNECTION, ElectState.LOSTELECTION})


@dataclass(frozen=True)
class RetryPolicy:
    """How a caller re-participates after LOSTCONNECTION or LOSTELECTION.

    Strategies never retry coordination calls themselves; this policy lives
    with the caller (see zkelect.usecases.candidate.Candidate).

    Attributes:
        max_retries: Maximum number of re-participation attempts. 0 means
                    no retries. Must be non-negative.
        backoff_base: Base delay in seconds. Delay = backoff_base * 2^attempt.
                     Must be positive.
        max_backoff: Cap on the delay in seconds. Must be positive.
    """

    max_retries: int = 3
    backoff_base: float = 1.0
    max_backoff: float = 30.0

    def __post_init__(self) -> None:
        """Validate retry policy configuration."""
        self._validate_max_retries()
        self._validate_backoff_base()
        self._validate_max_backoff()

    def _validate_max_retries(self) -> None:
        """Validate max_retries is non-negative."""
        if self.max_retries < 0:
            raise ElectConfigError("max_retries cannot be negative")

    def _validate_backoff_base(self) -> None:
        """Validate backoff_base is positive."""
        if self.backoff_base <= 0:
            raise ElectConfigError("backoff_base must be positive")

    def _validate_max_backoff(self) -> None:
        """Validate max_backoff is positive."""
        if self.max_backoff <= 0:
            raise ElectConfigError("max_backoff must be positive")

    def calculate_backoff(self, attempt: int) -> float:
        """Calculate exponential backoff delay for a given attempt.

        Args:
            attempt: The retry attempt number (0-indexed).

        Returns:
            Delay in seconds, capped at max_backoff.
        """
        delay = self.backoff_base * (2**attempt)
        return float(min(delay, self.max_backoff))

    def should_retry(self, attempt: int) -> bool:
        """Return True if attempt < max_retries."""
        return attempt < self.max_retries

    def is_retryable(self, state: ElectState) -> bool:
        """Determine if an election outcome calls for re-participation.

        Args:
            state: Outcome of participate() or of an asynchronous update.

        Returns:
            True for LOSTCONNECTION and LOSTELECTION, False otherwise.
        """
        return state in _RETRYABLE_STATES
