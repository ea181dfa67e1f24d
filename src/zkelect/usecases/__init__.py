"""Use cases: Application logic layer."""

from zkelect.usecases.election_strategy import (
    ElectionStatePublisher,
    ElectionStrategy,
    PendingWatch,
)
from zkelect.usecases.membership import ElectionMembership
from zkelect.usecases.watch_dispatcher import WatchDispatcher
from zkelect.usecases.election_process import ElectionProcess
from zkelect.usecases.naive_election import NaiveElection
from zkelect.usecases.contention_free_election import ContentionFreeElection
from zkelect.usecases.candidate import Candidate
from zkelect.usecases.config_parser import ElectionConfigParser

__all__ = [
    "ElectionStatePublisher",
    "ElectionStrategy",
    "PendingWatch",
    "ElectionMembership",
    "WatchDispatcher",
    "ElectionProcess",
    "NaiveElection",
    "ContentionFreeElection",
    "Candidate",
    "ElectionConfigParser",
]
