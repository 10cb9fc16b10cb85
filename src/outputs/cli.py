#!/usr/bin/env python3
"""
Command line entry points run as workflow steps.

    safe-outputs setup      create the JSONL file the agent writes to
    safe-outputs collect    validate it and publish the result
    safe-outputs sanitize   sanitize a free-text agent output file
"""

import secrets
import sys
from pathlib import Path
from typing import Optional

import click

from ..core import utils
from ..core.config_loader import ConfigError, load_safe_outputs_config
from ..sanitizer.content import ContentSanitizer
from .collector import collect_output, write_validated_output
from .types import ValidatedOutput


def _build_sanitizer(allowed_domains: Optional[str]) -> ContentSanitizer:
    return ContentSanitizer(utils.parse_domain_list(allowed_domains))


def _summary_markdown(raw_path: Optional[str], result: ValidatedOutput) -> str:
    lines = ["## Agent Output (JSONL)", ""]
    if raw_path and Path(raw_path).is_file():
        raw = Path(raw_path).read_text(encoding="utf-8", errors="replace")
        lines += ["``````json", raw.rstrip("\n"), "``````", ""]
    lines.append(f"Valid items: {len(result.items)}, errors: {len(result.errors)}")
    return "\n".join(lines) + "\n"


@click.group()
def cli() -> None:
    """Safe-outputs processing for agentic workflows."""


@cli.command()
@click.option(
    "--directory",
    default="/tmp",
    show_default=True,
    help="Directory for the output file",
)
def setup(directory: str) -> None:
    """Create an empty agent output file and export its path."""
    output_dir = Path(directory)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"aw_output_{secrets.token_hex(8)}.txt"
    output_file.write_text("", encoding="utf-8")
    output_file.chmod(0o644)

    utils.export_variable(utils.SAFE_OUTPUTS_ENV, str(output_file))
    utils.set_output("output_file", str(output_file))
    click.echo(f"Created agentic output file: {output_file}")


@cli.command()
@click.option(
    "--input",
    "input_path",
    envvar=utils.SAFE_OUTPUTS_ENV,
    help="JSONL file written by the agent",
)
@click.option(
    "--config",
    "config_value",
    envvar=utils.SAFE_OUTPUTS_CONFIG_ENV,
    help="Allowed output types: inline JSON or path to a JSON/YAML file",
)
@click.option(
    "--allowed-domains",
    envvar=utils.ALLOWED_DOMAINS_ENV,
    help="Comma separated domains allowed in https URLs",
)
@click.option(
    "--output-path",
    envvar=utils.AGENT_OUTPUT_PATH_ENV,
    default=utils.DEFAULT_AGENT_OUTPUT_PATH,
    show_default=True,
    help="Where to write the validated output",
)
@click.option("--summary", is_flag=True, help="Append the raw output to the step summary")
def collect(
    input_path: Optional[str],
    config_value: Optional[str],
    allowed_domains: Optional[str],
    output_path: str,
    summary: bool,
) -> None:
    """Validate the agent's JSONL output and publish the result."""
    try:
        config = load_safe_outputs_config(config_value)
    except ConfigError as e:
        utils.error(str(e))
        sys.exit(1)

    result = collect_output(input_path, config, sanitizer=_build_sanitizer(allowed_domains))
    for error in result.errors:
        utils.warning(error)

    output_json = result.to_json()
    utils.set_output("output", output_json)

    if summary:
        utils.append_step_summary(_summary_markdown(input_path, result))

    try:
        written = write_validated_output(result, output_path)
    except OSError as e:
        utils.error(f"Failed to write validated output to {output_path}: {e}")
        sys.exit(1)

    utils.export_variable(utils.AGENT_OUTPUT_ENV, str(written))
    click.echo(f"Stored validated output at: {written}")


@cli.command()
@click.option(
    "--input",
    "input_path",
    envvar=utils.RAW_OUTPUT_ENV,
    help="Free-text output file written by the agent",
)
@click.option(
    "--allowed-domains",
    envvar=utils.ALLOWED_DOMAINS_ENV,
    help="Comma separated domains allowed in https URLs",
)
def sanitize(input_path: Optional[str], allowed_domains: Optional[str]) -> None:
    """Sanitize a free-text agent output file and publish it."""
    if not input_path:
        click.echo("GITHUB_AW_OUTPUT not set, no output to collect")
        utils.set_output("output", "")
        return

    path = Path(input_path)
    if not path.exists():
        click.echo(f"Output file does not exist: {input_path}")
        utils.set_output("output", "")
        return

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        utils.error(f"Failed to read output file {input_path}: {e}")
        content = ""
    if not content.strip():
        click.echo("Output file is empty")
        utils.set_output("output", "")
        return

    sanitized = _build_sanitizer(allowed_domains).sanitize(content)
    preview = sanitized[:200] + ("..." if len(sanitized) > 200 else "")
    click.echo(f"Collected agentic output (sanitized): {preview}")
    utils.set_output("output", sanitized)


if __name__ == "__main__":
    cli()
