#!/usr/bin/env python3
"""
json_repair.py: Best-effort repair of near-miss JSON written by an LLM

Agents often emit JSONL records that are almost JSON: single quotes,
unquoted keys, raw newlines inside strings, a missing closing brace or a
trailing comma. The repair pass is a fixed sequence of text transforms;
the order matters (trailing commas are removed only after brackets have
been balanced, since balancing can leave a comma in front of a closer).

This is not a general JSON fixer. If the repaired text still does not
parse, the caller reports the line as invalid.
"""

import json
import re
from typing import Any, Callable, List, Optional

import click

_BARE_KEY = re.compile(r"([{,]\s*)([a-zA-Z_$][a-zA-Z0-9_$]*)\s*:")
_SIMPLE_STRING = re.compile(r'"([^"\\]*)"')
_INNER_QUOTES = re.compile(r'"([^"]*)"([^":,}\]]*)"([^"]*)"(\s*[,:}\]])')
_ARRAY_CLOSED_BY_BRACE = re.compile(r'(\[\s*(?:"[^"]*"(?:\s*,\s*"[^"]*")*\s*),?)\s*}')
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def replace_single_quotes(text: str) -> str:
    return text.replace("'", '"')


def quote_bare_keys(text: str) -> str:
    return _BARE_KEY.sub(r'\1"\2":', text)


def escape_string_whitespace(text: str) -> str:
    """Escape literal newlines, carriage returns and tabs inside strings."""

    def _escape(match: "re.Match[str]") -> str:
        content = match.group(1)
        if "\n" not in content and "\r" not in content and "\t" not in content:
            return match.group(0)
        escaped = (
            content.replace("\\", "\\\\")
            .replace("\n", "\\n")
            .replace("\r", "\\r")
            .replace("\t", "\\t")
        )
        return f'"{escaped}"'

    return _SIMPLE_STRING.sub(_escape, text)


def escape_inner_quotes(text: str) -> str:
    return _INNER_QUOTES.sub(r'"\1\\"\2\\"\3"\4', text)


def fix_array_closers(text: str) -> str:
    """Close string arrays that were ended with ``}`` instead of ``]``."""
    return _ARRAY_CLOSED_BY_BRACE.sub(r"\1]", text)


def _balance(text: str, opener: str, closer: str) -> str:
    opened = text.count(opener)
    closed = text.count(closer)
    if opened > closed:
        return text + closer * (opened - closed)
    if closed > opened:
        return opener * (closed - opened) + text
    return text


def balance_brackets(text: str) -> str:
    text = _balance(text, "{", "}")
    return _balance(text, "[", "]")


def remove_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA.sub(r"\1", text)


REPAIR_STEPS: List[Callable[[str], str]] = [
    replace_single_quotes,
    quote_bare_keys,
    escape_string_whitespace,
    escape_inner_quotes,
    fix_array_closers,
    balance_brackets,
    remove_trailing_commas,
]


def repair_json(text: Any) -> str:
    """
    Apply the repair heuristics to a single JSON line.

    Args:
        text: Candidate JSON text

    Returns:
        Repaired text (not guaranteed to parse); "" for non-string input
    """
    if not isinstance(text, str):
        return ""

    repaired = text.strip()
    for step in REPAIR_STEPS:
        repaired = step(repaired)
    return repaired


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def loads_strict(text: str) -> Any:
    """json.loads without the NaN/Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def parse_json_with_repair(text: Any) -> Optional[Any]:
    """
    Parse JSON, falling back to the repaired text.

    Returns:
        The parsed value, or None when neither attempt succeeds
    """
    if not isinstance(text, str):
        return None

    try:
        return loads_strict(text)
    except (ValueError, RecursionError) as original_error:
        try:
            return loads_strict(repair_json(text))
        except (ValueError, RecursionError) as repair_error:
            click.echo(
                f"JSON parsing failed. Original: {original_error}. "
                f"After repair: {repair_error}",
                err=True,
            )
            return None
