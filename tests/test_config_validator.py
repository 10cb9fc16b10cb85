#!/usr/bin/env python3
"""
Tests for config_validator module
"""

import json
import os
import sys
import tempfile

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Third-party imports
import yaml  # noqa: E402
from click.testing import CliRunner  # noqa: E402

# Local imports
from src.validators.config_validator import ConfigValidator, main  # noqa: E402


class TestConfigValidator:
    """Tests for ConfigValidator class"""

    def setup_method(self) -> None:
        """Set up test fixtures"""
        self.validator = ConfigValidator()
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self) -> None:
        """Clean up temp files"""
        import shutil

        shutil.rmtree(self.temp_dir)

    def create_config_file(self, filename, content):
        """Helper to create config files"""
        filepath = os.path.join(self.temp_dir, filename)
        with open(filepath, "w") as f:
            if isinstance(content, dict):
                yaml.dump(content, f)
            else:
                f.write(content)
        return filepath

    def test_valid_output_types(self) -> None:
        """Test with a valid output types mapping"""
        config = {
            "create-issue": True,
            "add-issue-label": {"max": 3},
            "missing-tool": {},
        }
        assert self.validator.validate_output_types(config) is True
        assert len(self.validator.errors) == 0
        assert len(self.validator.warnings) == 0

    def test_unknown_output_type(self) -> None:
        """Test with an output type that does not exist"""
        assert self.validator.validate_output_types({"delete-repo": True}) is False
        assert len(self.validator.errors) == 1
        assert "Unknown output type 'delete-repo'" in self.validator.errors[0]

    def test_disabled_output_type(self) -> None:
        """Test a type listed as false is reported but valid"""
        assert self.validator.validate_output_types({"create-issue": False}) is True
        assert self.validator.warnings == ["create-issue is listed but disabled"]

    def test_settings_not_a_mapping(self) -> None:
        """Test settings that are neither true nor a mapping"""
        assert self.validator.validate_output_types({"create-issue": "yes"}) is False
        assert "create-issue must be true or a mapping of settings" in self.validator.errors

    @pytest.mark.parametrize("max_value", [0, -1, "many", 1.5, True])
    def test_invalid_max(self, max_value) -> None:
        """Test max values that are not positive integers"""
        config = {"add-issue-label": {"max": max_value}}
        assert self.validator.validate_output_types(config) is False
        assert "add-issue-label.max must be a positive integer" in self.validator.errors

    def test_max_far_above_default(self) -> None:
        """Test a very large max is valid but warned about"""
        assert self.validator.validate_output_types({"create-issue": {"max": 200}}) is True
        assert self.validator.warnings == ["create-issue.max of 200 is far above the default (1)"]

    def test_empty_output_types(self) -> None:
        """Test an empty mapping warns that everything is rejected"""
        assert self.validator.validate_output_types({}) is True
        assert len(self.validator.warnings) == 1
        assert "No output types are enabled" in self.validator.warnings[0]

    def test_allowed_domains(self) -> None:
        """Test plain and wildcard domains are accepted"""
        assert self.validator.validate_allowed_domains(["github.com", "*.example.com"]) is True
        assert self.validator.errors == []

    def test_allowed_domains_with_scheme(self) -> None:
        """Test a URL is not accepted as a domain"""
        assert self.validator.validate_allowed_domains(["https://github.com"]) is False
        assert "must not include a scheme" in self.validator.errors[0]

    def test_allowed_domains_malformed(self) -> None:
        """Test malformed domain entries"""
        assert self.validator.validate_allowed_domains(["git hub.com", "github.*"]) is False
        assert len(self.validator.errors) == 2

    def test_allowed_domains_unset(self) -> None:
        """Test no override is valid without warnings"""
        assert self.validator.validate_allowed_domains(None) is True
        assert self.validator.warnings == []

    def test_allowed_domains_empty(self) -> None:
        """Test an empty override warns that every URL is redacted"""
        assert self.validator.validate_allowed_domains([]) is True
        assert "Allowed domains list is empty" in self.validator.warnings[0]

    def test_config_from_yaml_file(self) -> None:
        """Test loading the config from a YAML file"""
        config_path = self.create_config_file(
            "safe-outputs.yaml", {"create-issue": True, "add-issue-label": {"max": 3}}
        )
        config = self.validator.validate_config_value(config_path)
        assert config == {"create-issue": True, "add-issue-label": {"max": 3}}
        assert self.validator.errors == []

    def test_config_from_json_file(self) -> None:
        """Test loading the config from a JSON file"""
        config_path = self.create_config_file(
            "safe-outputs.json", json.dumps({"add-issue-comment": {"max": 2}})
        )
        assert self.validator.validate_config_value(config_path) == {
            "add-issue-comment": {"max": 2}
        }

    def test_invalid_yaml(self) -> None:
        """Test with invalid YAML syntax"""
        config_path = self.create_config_file("safe-outputs.yaml", "invalid: yaml: content:")
        assert self.validator.validate_config_value(config_path) is None
        assert len(self.validator.errors) == 1
        assert "Invalid YAML" in self.validator.errors[0]

    def test_config_not_a_mapping(self) -> None:
        """Test a config document that is a list"""
        config_path = self.create_config_file("safe-outputs.yaml", "- create-issue\n")
        assert self.validator.validate_config_value(config_path) is None
        assert "must be a mapping" in self.validator.errors[0]

    def test_inline_json_invalid(self) -> None:
        """Test inline JSON that does not parse"""
        assert self.validator.validate_config_value('{"create-issue": tru') is None
        assert "Could not parse safe-outputs config" in self.validator.errors[0]

    def test_missing_config_file(self) -> None:
        """Test a value that is neither JSON nor an existing file"""
        assert self.validator.validate_config_value("nonexistent.yaml") is None
        assert "path of an existing file" in self.validator.errors[0]

    def test_empty_config_value(self) -> None:
        """Test an empty value loads as an empty mapping"""
        with pytest.warns(RuntimeWarning):
            assert self.validator.validate_config_value("") == {}
        assert "No output types are enabled" in self.validator.warnings[0]

    def test_validate_all(self) -> None:
        """Test validate_all combines config and domain checks"""
        valid, errors, warnings = self.validator.validate_all(
            '{"create-issue": true, "bogus": true}', "github.com, https://evil.com"
        )
        assert valid is False
        assert len(errors) == 2
        assert warnings == []


class TestCLI:
    """Tests for CLI interface"""

    def setup_method(self) -> None:
        """Set up test fixtures"""
        self.runner = CliRunner()
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self) -> None:
        """Clean up temp files"""
        import shutil

        shutil.rmtree(self.temp_dir)

    def create_config_file(self, filename, content):
        """Helper to create config files"""
        filepath = os.path.join(self.temp_dir, filename)
        with open(filepath, "w") as f:
            yaml.dump(content, f)
        return filepath

    def test_cli_valid_config(self) -> None:
        """Test CLI with valid configuration"""
        config_path = self.create_config_file(
            "safe-outputs.yaml", {"create-issue": True, "add-issue-comment": {"max": 2}}
        )

        result = self.runner.invoke(main, ["--config", config_path])
        assert result.exit_code == 0
        assert "All configurations are valid" in result.output

    def test_cli_with_errors(self) -> None:
        """Test CLI with configuration errors"""
        config_path = self.create_config_file("safe-outputs.yaml", {"delete-repo": True})

        result = self.runner.invoke(main, ["--config", config_path])
        assert result.exit_code == 1
        assert "Errors:" in result.output
        assert "❌" in result.output

    def test_cli_with_warnings(self) -> None:
        """Test CLI with warnings"""
        config_path = self.create_config_file(
            "safe-outputs.yaml", {"create-issue": True, "create-discussion": False}
        )

        result = self.runner.invoke(main, ["--config", config_path])
        assert result.exit_code == 0
        assert "Warnings:" in result.output
        assert "⚠️" in result.output

    def test_cli_strict_mode(self) -> None:
        """Test CLI strict mode treats warnings as errors"""
        config_path = self.create_config_file(
            "safe-outputs.yaml", {"create-issue": True, "create-discussion": False}
        )

        result = self.runner.invoke(main, ["--config", config_path, "--strict"])
        assert result.exit_code == 1

    def test_cli_config_from_environment(self) -> None:
        """Test the config and domains are read from the environment"""
        result = self.runner.invoke(
            main,
            [],
            env={
                "GITHUB_AW_SAFE_OUTPUTS_CONFIG": '{"missing-tool": true}',
                "GITHUB_AW_ALLOWED_DOMAINS": "github.com,*.example.com",
            },
        )
        assert result.exit_code == 0
        assert "All configurations are valid" in result.output

    def test_cli_bad_domain(self) -> None:
        """Test an invalid allowed domain fails validation"""
        result = self.runner.invoke(
            main,
            ["--config", '{"create-issue": true}', "--allowed-domains", "https://github.com"],
        )
        assert result.exit_code == 1
        assert "must not include a scheme" in result.output

    def test_cli_empty_config(self) -> None:
        """Test an empty config only warns unless strict"""
        result = self.runner.invoke(main, [])
        assert result.exit_code == 0
        assert "Validating (empty config)" in result.output
        assert "No output types are enabled" in result.output

        result = self.runner.invoke(main, ["--strict"])
        assert result.exit_code == 1
