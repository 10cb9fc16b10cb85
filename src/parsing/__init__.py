"""Parsing helpers for agent-produced JSONL."""

from .json_repair import parse_json_with_repair, repair_json

__all__ = ["parse_json_with_repair", "repair_json"]
