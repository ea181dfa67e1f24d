"""Config parser use case for zkelect."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from zkelect.domain.exceptions import ElectConfigError
from zkelect.domain.retry import RetryPolicy
from zkelect.domain.settings import ElectionConfig, ElectionSettings

_SECTIONS = ("zookeeper", "election", "retry")


class ElectionConfigParser:
    """Parses zkelect YAML configuration to an ElectionConfig.

    Expected shape (every section and key optional, defaults as in
    ElectionSettings and RetryPolicy)::

        zookeeper:
          hosts: "zk1:2181,zk2:2181"
          session_timeout: 10.0
        election:
          strategy: contention_free
          member_prefix: ctf_
          start_election: true
        retry:
          max_retries: 3
          backoff_base: 1.0
          max_backoff: 30.0
    """

    def parse(self, yaml_str: str) -> ElectionConfig:
        """Parse zkelect YAML config.

        Args:
            yaml_str: YAML document.

        Returns:
            ElectionConfig domain object

        Raises:
            ElectConfigError: If YAML is invalid, a section is not a mapping,
                a key is unknown or a value fails validation.
        """
        try:
            config = yaml.safe_load(yaml_str)
        except yaml.YAMLError as e:
            raise ElectConfigError(f"Invalid YAML: {e}") from e

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ElectConfigError("Config must be a dictionary")

        unknown = set(config) - set(_SECTIONS)
        if unknown:
            raise ElectConfigError(f"Unknown config sections: {sorted(unknown)}")

        zookeeper = self._section(config, "zookeeper")
        election = self._section(config, "election")
        retry = self._section(config, "retry")

        try:
            settings = ElectionSettings(**zookeeper, **election)
            retry_policy = RetryPolicy(**retry)
        except TypeError as e:
            raise ElectConfigError(f"Invalid config field: {e}") from e

        return ElectionConfig(settings=settings, retry=retry_policy)

    def load(self, path: str | Path) -> ElectionConfig:
        """Read and parse a YAML config file.

        Raises:
            ElectConfigError: If the file cannot be read or is invalid.
        """
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ElectConfigError(f"Cannot read config file {path}: {e}") from e
        return self.parse(text)

    @staticmethod
    def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
        section = config.get(name) or {}
        if not isinstance(section, dict):
            raise ElectConfigError(f"Config section '{name}' must be a dictionary")
        return section
