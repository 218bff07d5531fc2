"""
Unit tests for configuration management.

Tests the configuration schema, merging of host-supplied configurations
and environment variable overrides.
"""

import os

import pytest

from ghexecutor.config import GitHubConfig, load_config, merge_configs
from ghexecutor.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from GH_EXECUTOR_* variables."""
    for key in list(os.environ):
        if key.upper().startswith("GH_EXECUTOR_"):
            monkeypatch.delenv(key)


class TestConfigSchema:
    """Test configuration schema defaults."""

    def test_default_config(self):
        config = load_config()

        assert config.github == GitHubConfig()
        assert config.default_namespace == "default"
        assert config.logs_tail_lines == 150
        assert config.command_timeout_seconds == 60.0

    def test_issue_template_aliases(self):
        assert GitHubConfig(issueTemplate="a").issue_template == "a"
        assert GitHubConfig(issuetemplate="b").issue_template == "b"
        assert GitHubConfig(issue_template="c").issue_template == "c"


class TestMergeConfigs:
    """Test merging of host-supplied configurations."""

    def test_single_config(self):
        config = merge_configs([
            {"github": {"token": "t", "repository": "acme/widgets", "issue_template": "x"}},
        ])

        assert config.github.token == "t"
        assert config.github.repository == "acme/widgets"
        assert config.github.issue_template == "x"

    def test_later_configs_win_key_by_key(self):
        config = merge_configs([
            {"github": {"token": "old", "repository": "acme/widgets"}},
            {"github": {"token": "new"}},
        ])

        assert config.github.token == "new"
        assert config.github.repository == "acme/widgets"

    def test_empty_entries_are_skipped(self):
        config = merge_configs([{}, None, {"logs_tail_lines": 10}])

        assert config.logs_tail_lines == 10

    def test_invalid_value_raises(self):
        with pytest.raises(ConfigError):
            merge_configs([{"logs_tail_lines": 0}])

    def test_non_mapping_raises(self):
        with pytest.raises(ConfigError, match="mapping"):
            merge_configs(["github: {}"])

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("GH_EXECUTOR_GITHUB__REPOSITORY", "env/repo")

        config = merge_configs([])

        assert config.github.repository == "env/repo"

    def test_host_config_beats_env(self, monkeypatch):
        monkeypatch.setenv("GH_EXECUTOR_DEFAULT_NAMESPACE", "from-env")

        config = merge_configs([{"default_namespace": "from-host"}])

        assert config.default_namespace == "from-host"

