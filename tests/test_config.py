"""
Tests for settings loading and validation.
"""

import textwrap
from pathlib import Path

import pytest

from rsc_quickstart.core.config.loader import CONFIG_ENV_VAR, load_settings, resolve_config_path
from rsc_quickstart.core.errors import ConfigError
from rsc_quickstart.core.models.settings import QuickstartSettings


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestDefaults:
    def test_defaults_match_stock_quickstart(self):
        s = load_settings()
        assert s.template_url.endswith("/redwood/archive/refs/heads/main.zip")
        assert s.template_path == "__fixtures__/test-project-rsc-kitchen-sink"
        assert s.framework_package == "@redwoodjs/core"
        assert s.dist_tag == "canary"
        assert s.dependency_prefix == "@redwoodjs/"
        assert s.node.minimum_major == 20
        assert s.yarn.minimum_major == 4
        assert s.managed_segment == "corepack"
        assert s.continue_on_error is False


class TestLoadSettings:
    def test_overrides(self, tmp_path: Path):
        path = tmp_path / "quickstart.yml"
        path.write_text(textwrap.dedent("""\
            template_url: https://example.test/fork.zip
            dist_tag: rc
            continue_on_error: true
            node:
              tool: node
              minimum_major: 22
        """))
        s = load_settings(path)
        assert s.template_url == "https://example.test/fork.zip"
        assert s.dist_tag == "rc"
        assert s.continue_on_error is True
        assert s.node.minimum_major == 22
        assert s.yarn.minimum_major == 4

    def test_empty_file_is_defaults(self, tmp_path: Path):
        path = tmp_path / "quickstart.yml"
        path.write_text("")
        assert load_settings(path) == QuickstartSettings()

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "env.yml"
        path.write_text("dist_tag: next\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert resolve_config_path() == path
        assert load_settings().dist_tag == "next"

    def test_explicit_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "env.yml"))
        assert resolve_config_path(tmp_path / "cli.yml") == tmp_path / "cli.yml"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text("key: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_unknown_key(self, tmp_path: Path):
        path = tmp_path / "typo.yml"
        path.write_text("dependency_prefx: '@acme/'\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)

    def test_bad_value(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text("http_timeout: -1\n")
        with pytest.raises(ConfigError):
            load_settings(path)
