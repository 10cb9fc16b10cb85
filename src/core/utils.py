#!/usr/bin/env python3
"""
Core utilities for the safe-outputs toolchain.

Environment lookups and the small part of the GitHub Actions runner
protocol the commands need: step outputs, exported variables, the step
summary and log annotations.
"""

import os
import uuid
from typing import List, Optional

import click

# Environment variables produced by the workflow compiler
SAFE_OUTPUTS_ENV = "GITHUB_AW_SAFE_OUTPUTS"
SAFE_OUTPUTS_CONFIG_ENV = "GITHUB_AW_SAFE_OUTPUTS_CONFIG"
ALLOWED_DOMAINS_ENV = "GITHUB_AW_ALLOWED_DOMAINS"
AGENT_OUTPUT_ENV = "GITHUB_AW_AGENT_OUTPUT"
AGENT_OUTPUT_PATH_ENV = "GITHUB_AW_AGENT_OUTPUT_PATH"
RAW_OUTPUT_ENV = "GITHUB_AW_OUTPUT"

DEFAULT_AGENT_OUTPUT_PATH = "/tmp/safe-outputs/agent_output.json"

DEFAULT_ALLOWED_DOMAINS = [
    "github.com",
    "github.io",
    "githubusercontent.com",
    "githubassets.com",
    "github.dev",
    "codespaces.new",
]


def get_env(name: str, default: str = "") -> str:
    """Return a stripped environment value, or ``default`` when unset."""
    value = os.environ.get(name, default)
    return (value or "").strip()


def parse_domain_list(value: Optional[str]) -> Optional[List[str]]:
    """
    Parse a comma separated domain override.

    Args:
        value: Raw value of the override, may be None

    Returns:
        None when no override is given, otherwise the trimmed non-empty
        entries (possibly an empty list, which denies every domain)
    """
    if not value:
        return None
    return [d.strip() for d in value.split(",") if d.strip()]


def get_allowed_domains() -> List[str]:
    """Allowed domains for URL filtering, from the environment or defaults."""
    override = parse_domain_list(os.environ.get(ALLOWED_DOMAINS_ENV))
    if override is None:
        return list(DEFAULT_ALLOWED_DOMAINS)
    return override


def get_agent_output_path() -> str:
    return get_env(AGENT_OUTPUT_PATH_ENV) or DEFAULT_AGENT_OUTPUT_PATH


def _escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def info(message: str) -> None:
    click.echo(message)


def warning(message: str) -> None:
    """Emit a warning annotation on the workflow run."""
    click.echo(f"::warning::{_escape_command_data(message)}", err=True)


def error(message: str) -> None:
    """Emit an error annotation on the workflow run."""
    click.echo(f"::error::{_escape_command_data(message)}", err=True)


def _append_to_runner_file(env_name: str, key: str, value: str) -> bool:
    path = get_env(env_name)
    if not path:
        return False

    # Multiline-safe form: key<<delimiter ... delimiter
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in key or delimiter in value:
        raise ValueError("Unexpected input: value contains the file delimiter")
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


def set_output(name: str, value: str) -> None:
    """
    Set a step output for later steps and jobs.

    Writes to the file named by GITHUB_OUTPUT; outside a runner the legacy
    workflow command is echoed instead so the value is still visible.
    """
    if not _append_to_runner_file("GITHUB_OUTPUT", name, value):
        click.echo(f"::set-output name={name}::{_escape_command_data(value)}")


def export_variable(name: str, value: str) -> None:
    """Export an environment variable to subsequent steps of the job."""
    os.environ[name] = value
    if not _append_to_runner_file("GITHUB_ENV", name, value):
        info(f"{name}={value}")


def append_step_summary(markdown: str) -> bool:
    """Append markdown to the job summary, returning False outside a runner."""
    path = get_env("GITHUB_STEP_SUMMARY")
    if not path:
        return False
    with open(path, "a", encoding="utf-8") as f:
        f.write(markdown)
        if not markdown.endswith("\n"):
            f.write("\n")
    return True
