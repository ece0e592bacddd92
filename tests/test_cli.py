"""
Tests for the CLI entrypoint: output modes and exit codes.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from rsc_quickstart.core.errors import ManifestParseError, VersionTooOldError
from rsc_quickstart.core.services.manifest_rewriter import RewriteReport
from rsc_quickstart.core.use_cases import bootstrap
from rsc_quickstart.core.use_cases.bootstrap import BootstrapResult
from rsc_quickstart.main import cli


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in ("RSCQ_CONFIG", "RSCQ_LOG_LEVEL", "RSCQ_LOG_FILE", "RSCQ_LOG_FILE_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    """Replace the real bootstrap with a recorder that succeeds."""
    recorded: list[dict] = []

    def fake_run_bootstrap(installation_dir, settings=None, runner=None, *, progress=None, verbose=False):
        recorded.append({"dir": installation_dir, "settings": settings, "verbose": verbose})
        if progress is not None:
            progress("Initializing git")
        return BootstrapResult(installation_dir=installation_dir, canary_version="8.0.0-canary.1")

    monkeypatch.setattr(bootstrap, "run_bootstrap", fake_run_bootstrap)
    return recorded


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "React Server Components" in result.output
        assert "INSTALLATION_DIR" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_argument(self):
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 2

    def test_empty_argument(self):
        result = CliRunner().invoke(cli, [""])
        assert result.exit_code == 2
        assert "must not be empty" in result.output


class TestCLIRun:
    def test_success_message(self, calls):
        result = CliRunner().invoke(cli, ["my-rsc-app"])
        assert result.exit_code == 0
        assert "Initializing git" in result.output
        assert "Done! You can now run `yarn rw dev` in the `my-rsc-app` directory." in result.output
        assert calls[0]["dir"] == Path("my-rsc-app")
        assert calls[0]["verbose"] is False

    def test_verbose_flag_reaches_bootstrap(self, calls):
        CliRunner().invoke(cli, ["-v", "app"])
        assert calls[0]["verbose"] is True

    def test_json_output(self, calls):
        result = CliRunner().invoke(cli, ["--json", "app"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["canary_version"] == "8.0.0-canary.1"
        assert data["installation_dir"] == "app"

    def test_config_file(self, calls, tmp_path: Path):
        config = tmp_path / "quickstart.yml"
        config.write_text("dist_tag: rc\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "app"])
        assert result.exit_code == 0
        assert calls[0]["settings"].dist_tag == "rc"

    def test_missing_config_file(self, calls, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.yml"), "app"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output
        assert calls == []

    def test_rewrite_failures_are_warned(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        report = RewriteReport(manifests_found=2, manifests_modified=1)
        report.failures.append(ManifestParseError(tmp_path / "package.json", "bad JSON"))

        def fake_run_bootstrap(installation_dir, settings=None, runner=None, *, progress=None, verbose=False):
            return BootstrapResult(installation_dir=installation_dir, rewrite=report)

        monkeypatch.setattr(bootstrap, "run_bootstrap", fake_run_bootstrap)
        result = CliRunner().invoke(cli, ["app"])
        assert result.exit_code == 0
        assert "Failed to parse" in result.output
        assert "Done!" in result.output


class TestCLIFailure:
    def _fail_with(self, monkeypatch: pytest.MonkeyPatch, err: Exception) -> None:
        def fake_run_bootstrap(*args, **kwargs):
            raise err

        monkeypatch.setattr(bootstrap, "run_bootstrap", fake_run_bootstrap)

    def test_fatal_error_exits_1(self, monkeypatch: pytest.MonkeyPatch):
        self._fail_with(monkeypatch, VersionTooOldError(
            "Your Node version is too old. Please install Node v20 or newer",
            hints=["Found node v18.0.0"],
        ))
        result = CliRunner().invoke(cli, ["app"])
        assert result.exit_code == 1
        assert "Node v20 or newer" in result.output
        assert "Found node v18.0.0" in result.output
        assert "Done!" not in result.output

    def test_fatal_error_as_json(self, monkeypatch: pytest.MonkeyPatch):
        self._fail_with(monkeypatch, VersionTooOldError("too old"))
        result = CliRunner().invoke(cli, ["--json", "app"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data == {"error": "too old", "kind": "VersionTooOldError", "hints": []}
