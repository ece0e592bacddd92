"""
Tests for version parsing and major-version floors.
"""

import pytest

from rsc_quickstart.adapters.mock import MockCommandAdapter
from rsc_quickstart.core.errors import CommandFailedError, ParseError, VersionParseError
from rsc_quickstart.core.models.toolchain import Version, VersionConstraint
from rsc_quickstart.core.services.version_oracle import (
    VersionOracle,
    check_minimum,
    parse_version,
)

# ── Parsing ─────────────────────────────────────────────────────────


class TestParseVersion:
    def test_plain(self):
        assert parse_version("20.11.1") == Version(20, 11, 1)

    def test_leading_v(self):
        assert parse_version("v18.0.3") == Version(18, 0, 3)

    def test_surrounding_whitespace(self):
        assert parse_version("  4.1.0\n") == Version(4, 1, 0)

    def test_prerelease_and_build(self):
        v = parse_version("8.0.0-canary.123+abc")
        assert v.major == 8
        assert v.prerelease == "canary.123"
        assert str(v) == "8.0.0-canary.123"

    @pytest.mark.parametrize(
        "text",
        ["not-a-version", "", "20", "20.1", "v", "20.1.x", "1.2.3.4", "01.2.3"],
    )
    def test_rejects_garbage(self, text):
        with pytest.raises(VersionParseError):
            parse_version(text)

    def test_parse_error_is_a_parse_error(self):
        with pytest.raises(ParseError):
            parse_version("not-a-version")


# ── Major floor ─────────────────────────────────────────────────────


class TestCheckMinimum:
    def test_below_floor(self):
        assert check_minimum("19.9.0", 20) is False

    def test_exact_floor(self):
        assert check_minimum("20.0.0", 20) is True

    def test_leading_v_tolerated(self):
        assert check_minimum("v20.1.3", 20) is True

    def test_minor_and_patch_ignored(self):
        assert check_minimum("4.0.0", 4) is True
        assert check_minimum("3.99.99", 4) is False

    def test_above_floor(self):
        assert check_minimum("22.3.0", 20) is True

    def test_malformed_raises(self):
        with pytest.raises(ParseError):
            check_minimum("not-a-version", 20)


# ── Tool queries ────────────────────────────────────────────────────


class TestVersionOracle:
    def test_query_trims_output(self):
        runner = MockCommandAdapter()
        runner.set_output("node --version", "v20.11.0\n")
        oracle = VersionOracle(runner)
        assert oracle.query("node") == "v20.11.0"
        assert runner.commands == ["node --version"]

    def test_query_passes_cwd(self, tmp_path):
        runner = MockCommandAdapter()
        runner.set_output("yarn --version", "4.1.1\n")
        VersionOracle(runner).query("yarn", cwd=tmp_path)
        assert runner.call_log[0].cwd == str(tmp_path)

    def test_satisfies(self):
        runner = MockCommandAdapter()
        runner.set_output("node", "v18.19.0\n")
        oracle = VersionOracle(runner, verbose=True)
        ok, reported = oracle.satisfies(VersionConstraint(tool="node", minimum_major=20))
        assert ok is False
        assert reported == "v18.19.0"

    def test_command_failure_propagates(self):
        runner = MockCommandAdapter()
        runner.set_failure("node --version", return_code=127)
        with pytest.raises(CommandFailedError) as exc:
            VersionOracle(runner).query("node")
        assert exc.value.return_code == 127
