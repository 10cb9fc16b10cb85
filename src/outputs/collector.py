#!/usr/bin/env python3
"""
collector.py: Collection of agent safe outputs

This component:
1. Reads the JSONL file the agent wrote during its run
2. Validates and sanitizes every line, skipping and recording bad ones
3. Persists the validated result for the action jobs that consume it
"""

import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import click

from ..core import utils
from ..sanitizer.content import ContentSanitizer
from ..validators.output_validators import OutputValidator
from .types import ValidatedOutput


def read_output_file(path: Optional[str]) -> str:
    """
    Read the raw agent output.

    Returns:
        File content, or "" when no path is configured or the file is absent
    """
    if not path:
        click.echo("GITHUB_AW_SAFE_OUTPUTS not set, no output to collect")
        return ""

    file_path = Path(path)
    if not file_path.exists():
        click.echo(f"Output file does not exist: {path}")
        return ""

    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            content = f.read()
    except OSError as e:
        utils.error(f"Failed to read output file {path}: {e}")
        return ""

    if not content.strip():
        click.echo("Output file is empty")
        return ""

    click.echo(f"Raw output content length: {len(content)}")
    return content


def validate_content(content: str, validator: OutputValidator) -> ValidatedOutput:
    """Validate JSONL content line by line, accumulating items and errors."""
    result = ValidatedOutput()
    counts: Counter = Counter()

    for index, raw_line in enumerate(content.split("\n")):
        line = raw_line.strip()
        if not line:
            continue

        line_number = index + 1
        record, error = validator.validate_line(line, counts)
        if record is None:
            result.errors.append(f"Line {line_number}: {error}")
            continue

        click.echo(f"Line {line_number}: Valid {record.TYPE} item")
        counts[record.TYPE] += 1
        result.items.append(record)

    return result


def collect_output(
    path: Optional[str],
    config: Mapping[str, Any],
    sanitizer: Optional[ContentSanitizer] = None,
    default_limits: Optional[Mapping[str, int]] = None,
) -> ValidatedOutput:
    """
    Collect and validate the agent's safe outputs.

    Args:
        path: Path of the JSONL file written by the agent
        config: Allowed output types, each True or a settings mapping
        sanitizer: Sanitizer for free text; built from the environment if omitted
        default_limits: Per-type limits used when the config has no max

    Returns:
        Validated items and the per-line errors, both in input order
    """
    content = read_output_file(path)
    if not content:
        return ValidatedOutput()

    if config:
        click.echo(f"Expected output types: {', '.join(config.keys())}")

    validator = OutputValidator(config, sanitizer=sanitizer, default_limits=default_limits)
    result = validate_content(content, validator)

    if result.errors:
        click.echo("Validation errors found:")
        for error in result.errors:
            click.echo(f"  - {error}")

    click.echo(f"Successfully parsed {len(result.items)} valid output items")
    return result


def write_validated_output(result: ValidatedOutput, path: str) -> Path:
    """Persist the validated output as JSON, creating parent directories."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(json.dumps(result.to_dict(), indent=2))
    return output_path


def load_validated_output(path: Optional[str]) -> Dict[str, Any]:
    """
    Read a persisted validated output, as consumed by the action jobs.

    A missing or malformed file is reported and yields an empty output.
    """
    empty: Dict[str, Any] = {"items": [], "errors": []}
    if not path or not Path(path).exists():
        utils.warning(f"Validated output not found: {path}")
        return empty

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        utils.error(f"Error parsing agent output JSON: {e}")
        return empty

    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        utils.warning("No valid items found in agent output")
        return empty
    data.setdefault("errors", [])
    return data


def items_of_type(output: Mapping[str, Any], item_type: str) -> List[Dict[str, Any]]:
    return [
        item
        for item in output.get("items", [])
        if isinstance(item, dict) and item.get("type") == item_type
    ]
