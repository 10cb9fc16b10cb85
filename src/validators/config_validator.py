#!/usr/bin/env python3
"""
config_validator.py: Static validation of safe-outputs configuration

Checks the allowed-output-types mapping and the allowed-domains list that
the workflow compiler hands to the collector, before any agent output is
processed.
"""

import sys
from typing import Any, List, Mapping, Optional, Tuple

import click

from ..core.config_loader import ConfigError, load_safe_outputs_config
from ..core.utils import ALLOWED_DOMAINS_ENV, SAFE_OUTPUTS_CONFIG_ENV, parse_domain_list
from ..sanitizer.domains import is_valid_domain_pattern
from .output_validators import DEFAULT_MAX_BY_TYPE, parse_positive_int


class ConfigValidator:
    """Validates safe-outputs configuration"""

    def __init__(self) -> None:
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_output_types(self, config: Mapping[str, Any]) -> bool:
        """Validate the mapping of output type name to settings"""
        if not config:
            self.warnings.append("No output types are enabled; all agent output will be rejected")
            return True

        valid = True
        for name, settings in config.items():
            if name not in DEFAULT_MAX_BY_TYPE:
                self.errors.append(
                    f"Unknown output type '{name}'. "
                    f"Expected one of: {', '.join(DEFAULT_MAX_BY_TYPE)}"
                )
                valid = False
                continue

            if settings is None or settings is False:
                self.warnings.append(f"{name} is listed but disabled")
                continue
            if settings is True:
                continue
            if not isinstance(settings, Mapping):
                self.errors.append(f"{name} must be true or a mapping of settings")
                valid = False
                continue

            if "max" in settings:
                max_value = parse_positive_int(settings["max"])
                if max_value is None:
                    self.errors.append(f"{name}.max must be a positive integer")
                    valid = False
                elif max_value > DEFAULT_MAX_BY_TYPE[name] * 10:
                    self.warnings.append(
                        f"{name}.max of {max_value} is far above the default "
                        f"({DEFAULT_MAX_BY_TYPE[name]})"
                    )

        return valid

    def validate_allowed_domains(self, domains: Optional[List[str]]) -> bool:
        """Validate the domain allowlist used for URL filtering"""
        if domains is None:
            return True
        if not domains:
            self.warnings.append("Allowed domains list is empty; every https URL will be redacted")
            return True

        valid = True
        for domain in domains:
            if "://" in domain:
                self.errors.append(f"Allowed domain '{domain}' must not include a scheme")
                valid = False
            elif not is_valid_domain_pattern(domain):
                self.errors.append(
                    f"Allowed domain '{domain}' is not a hostname or '*.' wildcard"
                )
                valid = False
        return valid

    def validate_config_value(self, value: Optional[str]) -> Optional[Mapping[str, Any]]:
        """Load a config value and validate it, returning the mapping if it loads"""
        try:
            config = load_safe_outputs_config(value)
        except ConfigError as e:
            self.errors.append(str(e))
            return None
        self.validate_output_types(config)
        return config

    def validate_all(
        self, config_value: Optional[str], domains_value: Optional[str] = None
    ) -> Tuple[bool, List[str], List[str]]:
        """Validate all configuration"""
        self.validate_config_value(config_value)
        self.validate_allowed_domains(parse_domain_list(domains_value))
        return len(self.errors) == 0, self.errors, self.warnings


@click.command()
@click.option(
    "--config",
    "config_value",
    envvar=SAFE_OUTPUTS_CONFIG_ENV,
    help="Safe-outputs config: inline JSON or path to a JSON/YAML file",
)
@click.option(
    "--allowed-domains",
    envvar=ALLOWED_DOMAINS_ENV,
    help="Comma separated domains allowed in https URLs",
)
@click.option("--strict", is_flag=True, help="Treat warnings as errors")
def main(config_value: Optional[str], allowed_domains: Optional[str], strict: bool) -> None:
    """Validate safe-outputs configuration"""
    validator = ConfigValidator()

    click.echo(f"Validating {config_value or '(empty config)'}...")
    valid, errors, warnings = validator.validate_all(config_value, allowed_domains)

    if errors:
        click.echo("\nErrors:")
        for error in errors:
            click.echo(f"  ❌ {error}")

    if warnings:
        click.echo("\nWarnings:")
        for warning in warnings:
            click.echo(f"  ⚠️  {warning}")

    if valid and not warnings:
        click.echo("\n✅ All configurations are valid!")

    if not valid or (strict and warnings):
        sys.exit(1)


if __name__ == "__main__":
    main()
