"""Validators package for the safe-outputs toolchain.

This package validates everything that crosses the trust boundary between
the agent and the privileged action jobs: the agent's JSONL records and
the configuration that decides which of them are permitted.

Components:
- Per-type record validation with cardinality limits
- Safe-outputs configuration validation (output types, allowed domains)
"""

from .config_validator import ConfigValidator
from .output_validators import (
    DEFAULT_MAX_BY_TYPE,
    OutputValidator,
    parse_positive_int,
)

__all__ = [
    "ConfigValidator",
    "DEFAULT_MAX_BY_TYPE",
    "OutputValidator",
    "parse_positive_int",
]
