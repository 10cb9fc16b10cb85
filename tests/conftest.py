#!/usr/bin/env python3
"""
Pytest configuration and shared fixtures for safe-outputs tests
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.utils import DEFAULT_ALLOWED_DOMAINS  # noqa: E402
from src.sanitizer.content import ContentSanitizer  # noqa: E402

RUNNER_ENV_VARS = [
    "GITHUB_AW_SAFE_OUTPUTS",
    "GITHUB_AW_SAFE_OUTPUTS_CONFIG",
    "GITHUB_AW_ALLOWED_DOMAINS",
    "GITHUB_AW_AGENT_OUTPUT",
    "GITHUB_AW_AGENT_OUTPUT_PATH",
    "GITHUB_AW_OUTPUT",
    "GITHUB_OUTPUT",
    "GITHUB_ENV",
    "GITHUB_STEP_SUMMARY",
]


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch):
    """Tests never see the runner variables of the machine running them"""
    for name in RUNNER_ENV_VARS:
        # setenv first so anything a command exports is undone afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def sanitizer():
    """Sanitizer with the default GitHub allowlist"""
    return ContentSanitizer(DEFAULT_ALLOWED_DOMAINS)


@pytest.fixture
def write_jsonl(tmp_path):
    """Write agent output lines to a temp file and return its path"""

    def _write(*lines: str) -> str:
        path = tmp_path / "aw_output.txt"
        path.write_text("\n".join(lines), encoding="utf-8")
        return str(path)

    return _write
