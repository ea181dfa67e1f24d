"""Unit tests for ElectionConfigParser."""

from __future__ import annotations

import pytest

from zkelect.domain.exceptions import ElectConfigError
from zkelect.domain.retry import RetryPolicy
from zkelect.domain.settings import ElectionSettings
from zkelect.usecases.config_parser import ElectionConfigParser

FULL_CONFIG = """
zookeeper:
  hosts: "zk1:2181,zk2:2181,zk3:2181"
  session_timeout: 15.0
election:
  strategy: naive
  member_prefix: web_
  start_election: true
retry:
  max_retries: 5
  backoff_base: 0.25
  max_backoff: 4.0
"""


@pytest.fixture
def parser() -> ElectionConfigParser:
    return ElectionConfigParser()


@pytest.mark.tier(1)
@pytest.mark.tra("UseCase.ConfigParser")
class TestElectionConfigParser:
    """YAML configuration loading."""

    def test_full_document(self, parser) -> None:
        config = parser.parse(FULL_CONFIG)

        assert config.settings == ElectionSettings(
            hosts="zk1:2181,zk2:2181,zk3:2181",
            session_timeout=15.0,
            strategy="naive",
            member_prefix="web_",
            start_election=True,
        )
        assert config.retry == RetryPolicy(max_retries=5, backoff_base=0.25, max_backoff=4.0)

    @pytest.mark.parametrize("document", ["", "# nothing configured\n", "zookeeper:\n"])
    def test_empty_document_uses_defaults(self, parser, document) -> None:
        config = parser.parse(document)
        assert config.settings == ElectionSettings()
        assert config.retry == RetryPolicy()

    def test_default_prefix_follows_strategy(self, parser) -> None:
        config = parser.parse("election:\n  strategy: naive\n")
        assert config.settings.resolved_prefix == "naive_"

    def test_invalid_yaml(self, parser) -> None:
        with pytest.raises(ElectConfigError, match="Invalid YAML"):
            parser.parse("zookeeper: [unclosed")

    def test_document_must_be_mapping(self, parser) -> None:
        with pytest.raises(ElectConfigError, match="must be a dictionary"):
            parser.parse("- zookeeper\n- election\n")

    def test_section_must_be_mapping(self, parser) -> None:
        with pytest.raises(ElectConfigError, match="'retry' must be a dictionary"):
            parser.parse("retry: 3\n")

    def test_unknown_section(self, parser) -> None:
        with pytest.raises(ElectConfigError, match="Unknown config sections"):
            parser.parse("logging:\n  level: debug\n")

    def test_unknown_key(self, parser) -> None:
        with pytest.raises(ElectConfigError, match="Invalid config field"):
            parser.parse("zookeeper:\n  port: 2181\n")

    def test_key_in_two_sections(self, parser) -> None:
        with pytest.raises(ElectConfigError):
            parser.parse("zookeeper:\n  strategy: naive\nelection:\n  strategy: naive\n")

    def test_value_validation_is_reported(self, parser) -> None:
        with pytest.raises(ElectConfigError, match="session_timeout"):
            parser.parse("zookeeper:\n  session_timeout: 0\n")

    def test_invalid_retry_policy(self, parser) -> None:
        with pytest.raises(ElectConfigError, match="max_retries"):
            parser.parse("retry:\n  max_retries: -1\n")

    def test_load_from_file(self, parser, tmp_path) -> None:
        path = tmp_path / "zkelect.yaml"
        path.write_text(FULL_CONFIG, encoding="utf-8")
        assert parser.load(path).settings.strategy == "naive"
        assert parser.load(str(path)).retry.max_retries == 5

    def test_load_missing_file(self, parser, tmp_path) -> None:
        with pytest.raises(ElectConfigError, match="Cannot read config file"):
            parser.load(tmp_path / "absent.yaml")
