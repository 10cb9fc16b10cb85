"""Sanitization of untrusted, agent-produced text."""

from .content import ContentSanitizer, sanitize_content
from .domains import is_domain_allowed

__all__ = ["ContentSanitizer", "sanitize_content", "is_domain_allowed"]
