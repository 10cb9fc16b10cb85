#!/usr/bin/env python3
"""
content.py: Sanitization of agent-produced free text

Text written by the agent is posted back to GitHub as issue bodies,
comments and pull request descriptions. Before that happens it is passed
through a fixed pipeline that:
1. Neutralizes @mentions so nobody gets pinged
2. Removes control characters and escapes markup
3. Redacts non-https URIs and https URIs to unknown domains
4. Bounds total length and line count
5. Strips terminal escapes and neutralizes issue-closing phrases

The steps run in that order; later steps rely on earlier ones (domain
filtering only sees URIs that survived protocol filtering, and both only
see already-escaped text).
"""

import re
from typing import Any, Iterable, List, Optional

from ..core.utils import get_allowed_domains
from .domains import extract_hostname, is_domain_allowed, normalize_domains

MAX_CONTENT_LENGTH = 524288
MAX_CONTENT_LINES = 65000

LENGTH_TRUNCATION_NOTICE = "\n[Content truncated due to length]"
LINE_TRUNCATION_NOTICE = "\n[Content truncated due to line count]"

REDACTED = "(redacted)"

_MENTION = re.compile(
    r"(^|[^\w`])@([A-Za-z0-9](?:[A-Za-z0-9-]{0,37}[A-Za-z0-9])?(?:/[A-Za-z0-9._-]+)?)",
    re.ASCII,
)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_URI_TAIL = r"[^\s\])}'\"<>&\x00-\x1f]+"
# Only matches at the start of a run of scheme characters
_SCHEME_URI = re.compile(
    r"(?<![\w.+-])([A-Za-z][A-Za-z0-9+.-]*):(?://)?" + _URI_TAIL, re.ASCII
)
_HTTPS_URI = re.compile(r"\bhttps://(" + _URI_TAIL + ")", re.IGNORECASE | re.ASCII)
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")
_BOT_TRIGGER = re.compile(
    r"\b(fixes?|closes?|resolves?|fix|close|resolve)\s+#(\w+)",
    re.IGNORECASE | re.ASCII,
)

_MARKUP_ESCAPES = [
    ("&", "&amp;"),  # first, so later entities are not double-escaped
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
]


def neutralize_mentions(text: str) -> str:
    """Wrap ``@user`` and ``@org/team`` in backticks unless already inside them."""
    return _MENTION.sub(r"\1`@\2`", text)


def remove_control_characters(text: str) -> str:
    return _CONTROL_CHARS.sub("", text)


def escape_markup(text: str) -> str:
    for char, entity in _MARKUP_ESCAPES:
        text = text.replace(char, entity)
    return text


def redact_unsafe_protocols(text: str) -> str:
    """Replace every ``scheme:...`` token whose scheme is not https."""

    def _replace(match: "re.Match[str]") -> str:
        return match.group(0) if match.group(1).lower() == "https" else REDACTED

    return _SCHEME_URI.sub(_replace, text)


def redact_unknown_domains(text: str, allowed_domains: Iterable[str]) -> str:
    """Replace https URIs whose host is not covered by the allowlist."""
    allowed = list(allowed_domains)

    def _replace(match: "re.Match[str]") -> str:
        hostname = extract_hostname(match.group(1))
        return match.group(0) if is_domain_allowed(hostname, allowed) else REDACTED

    return _HTTPS_URI.sub(_replace, text)


def truncate_length(text: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + LENGTH_TRUNCATION_NOTICE
    return text


def truncate_lines(text: str, limit: int = MAX_CONTENT_LINES) -> str:
    lines = text.split("\n")
    if len(lines) > limit:
        return "\n".join(lines[:limit]) + LINE_TRUNCATION_NOTICE
    return text


def strip_ansi_escapes(text: str) -> str:
    return _ANSI_ESCAPE.sub("", text)


def neutralize_bot_triggers(text: str) -> str:
    """
    Wrap ``fixes #123`` style phrases so GitHub does not auto-close issues.

    A phrase is left alone only when a backtick sits on both sides of it.
    """

    def _wrap(match: "re.Match[str]") -> str:
        start, end = match.span()
        if text[start - 1 : start] == "`" and text[end : end + 1] == "`":
            return match.group(0)
        return f"`{match.group(1)} #{match.group(2)}`"

    return _BOT_TRIGGER.sub(_wrap, text)


class ContentSanitizer:
    """Sanitizer bound to one allowed-domains set for the duration of a run."""

    def __init__(self, allowed_domains: Optional[Iterable[str]] = None):
        if allowed_domains is None:
            allowed_domains = get_allowed_domains()
        self.allowed_domains: List[str] = normalize_domains(allowed_domains)

    def sanitize(self, content: Any) -> str:
        """
        Sanitize untrusted text.

        Args:
            content: Text to sanitize; anything that is not a non-empty
                string yields an empty string

        Returns:
            Sanitized text, never raises
        """
        if not content or not isinstance(content, str):
            return ""

        sanitized = neutralize_mentions(content)
        sanitized = remove_control_characters(sanitized)
        sanitized = escape_markup(sanitized)
        sanitized = redact_unsafe_protocols(sanitized)
        sanitized = redact_unknown_domains(sanitized, self.allowed_domains)
        sanitized = truncate_length(sanitized)
        sanitized = truncate_lines(sanitized)
        sanitized = strip_ansi_escapes(sanitized)
        sanitized = neutralize_bot_triggers(sanitized)
        return sanitized.strip()

    __call__ = sanitize


def sanitize_content(content: Any, allowed_domains: Optional[Iterable[str]] = None) -> str:
    """Sanitize text with the given allowlist, or the environment/default one."""
    return ContentSanitizer(allowed_domains).sanitize(content)
