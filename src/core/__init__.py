"""
Core utilities for the safe-outputs toolchain.
"""

from .config_loader import ConfigError, load_config_file, load_safe_outputs_config
from .utils import (
    DEFAULT_AGENT_OUTPUT_PATH,
    DEFAULT_ALLOWED_DOMAINS,
    get_allowed_domains,
    get_env,
    parse_domain_list,
)

__all__ = [
    "ConfigError",
    "load_config_file",
    "load_safe_outputs_config",
    "DEFAULT_AGENT_OUTPUT_PATH",
    "DEFAULT_ALLOWED_DOMAINS",
    "get_allowed_domains",
    "get_env",
    "parse_domain_list",
]
