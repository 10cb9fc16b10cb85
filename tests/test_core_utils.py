#!/usr/bin/env python3
"""
Tests for core utilities: environment lookups and runner commands
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core import utils  # noqa: E402
from src.core.utils import (  # noqa: E402
    DEFAULT_AGENT_OUTPUT_PATH,
    DEFAULT_ALLOWED_DOMAINS,
    get_agent_output_path,
    get_allowed_domains,
    get_env,
    parse_domain_list,
)


class TestEnvironment:
    """Test environment variable helpers"""

    def test_get_env_strips(self, monkeypatch) -> None:
        """Test values are stripped"""
        monkeypatch.setenv("SAFE_OUTPUTS_TEST_VAR", "  value \n")
        assert get_env("SAFE_OUTPUTS_TEST_VAR") == "value"

    def test_get_env_default(self) -> None:
        """Test the default is used for unset variables"""
        assert get_env("SAFE_OUTPUTS_UNSET_VAR", "fallback") == "fallback"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, None),
            ("", None),
            ("github.com", ["github.com"]),
            (" a.com , b.com ,, ", ["a.com", "b.com"]),
            (" , ", []),
        ],
    )
    def test_parse_domain_list(self, value, expected) -> None:
        """Test parsing the comma separated override"""
        assert parse_domain_list(value) == expected

    def test_allowed_domains_default(self) -> None:
        """Test the GitHub defaults apply without an override"""
        domains = get_allowed_domains()
        assert domains == DEFAULT_ALLOWED_DOMAINS
        domains.append("mutated.example")
        assert "mutated.example" not in DEFAULT_ALLOWED_DOMAINS

    def test_allowed_domains_override(self, monkeypatch) -> None:
        """Test the override replaces the defaults"""
        monkeypatch.setenv("GITHUB_AW_ALLOWED_DOMAINS", "example.com")
        assert get_allowed_domains() == ["example.com"]

    def test_agent_output_path(self, monkeypatch) -> None:
        """Test the validated output path override"""
        assert get_agent_output_path() == DEFAULT_AGENT_OUTPUT_PATH
        monkeypatch.setenv("GITHUB_AW_AGENT_OUTPUT_PATH", "/work/out.json")
        assert get_agent_output_path() == "/work/out.json"


class TestRunnerCommands:
    """Test GitHub Actions runner integration"""

    def test_annotations(self, capsys) -> None:
        """Test warning and error annotations escape newlines"""
        utils.warning("first\nsecond")
        utils.error("100% broken")
        err = capsys.readouterr().err
        assert "::warning::first%0Asecond" in err
        assert "::error::100%25 broken" in err

    def test_set_output_file(self, tmp_path, monkeypatch) -> None:
        """Test outputs are appended to GITHUB_OUTPUT in delimiter form"""
        output_file = tmp_path / "github_output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
        utils.set_output("output", "line one\nline two")
        lines = output_file.read_text().split("\n")
        assert lines[0].startswith("output<<ghadelimiter_")
        assert lines[1:3] == ["line one", "line two"]
        assert lines[3] == lines[0].split("<<", 1)[1]

    def test_set_output_without_runner(self, capsys) -> None:
        """Test outputs are echoed outside a runner"""
        utils.set_output("output", "a\nb")
        assert "::set-output name=output::a%0Ab" in capsys.readouterr().out

    def test_export_variable(self, tmp_path, monkeypatch) -> None:
        """Test exported variables are visible now and to later steps"""
        env_file = tmp_path / "github_env"
        monkeypatch.setenv("GITHUB_ENV", str(env_file))
        utils.export_variable("GITHUB_AW_AGENT_OUTPUT", "/tmp/x.json")
        assert os.environ["GITHUB_AW_AGENT_OUTPUT"] == "/tmp/x.json"
        assert "GITHUB_AW_AGENT_OUTPUT<<ghadelimiter_" in env_file.read_text()

    def test_step_summary(self, tmp_path, monkeypatch) -> None:
        """Test markdown is appended to the step summary"""
        assert utils.append_step_summary("# nope") is False
        summary = tmp_path / "summary.md"
        monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary))
        assert utils.append_step_summary("# one") is True
        assert utils.append_step_summary("two\n") is True
        assert summary.read_text() == "# one\ntwo\n"
