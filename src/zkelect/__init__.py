"""zkelect: leader election recipes for ZooKeeper-style coordination services."""

__version__ = "0.1.0"

from zkelect.domain.settings import ElectionConfig, ElectionSettings
from zkelect.domain.state import ElectState
from zkelect.domain.exceptions import ElectConfigError, ElectError
from zkelect.usecases.naive_election import NaiveElection
from zkelect.usecases.contention_free_election import ContentionFreeElection
from zkelect.usecases.candidate import Candidate
from zkelect.usecases.config_parser import ElectionConfigParser

__all__ = [
    "ElectionConfig",
    "ElectionSettings",
    "ElectState",
    "ElectConfigError",
    "ElectError",
    "NaiveElection",
    "ContentionFreeElection",
    "Candidate",
    "ElectionConfigParser",
]
