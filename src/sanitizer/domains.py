"""Hostname allowlist matching shared by the sanitizer and config validation."""

import re
from typing import Iterable, List

_HOST_DELIMITERS = re.compile(r"[/:?#]")

# Entries are bare domains ("github.com") or wildcards ("*.github.com")
_DOMAIN_PATTERN = re.compile(
    r"^(\*\.)?[a-z0-9](?:[a-z0-9-]*[a-z0-9])?(?:\.[a-z0-9](?:[a-z0-9-]*[a-z0-9])?)*$"
)


def extract_hostname(authority: str) -> str:
    """Hostname of a URL remainder: text up to the first / : ? or #, lower-cased."""
    return _HOST_DELIMITERS.split(authority, 1)[0].lower()


def normalize_domains(domains: Iterable[str]) -> List[str]:
    return [d.strip().lower() for d in domains if d and d.strip()]


def is_domain_allowed(hostname: str, allowed_domains: Iterable[str]) -> bool:
    """
    Check a hostname against an allowlist.

    A bare entry matches itself and any subdomain of it. A wildcard entry
    such as ``*.example.com`` matches strict subdomains only. An empty
    allowlist matches nothing.
    """
    host = hostname.lower()
    if not host:
        return False

    for entry in normalize_domains(allowed_domains):
        if entry.startswith("*."):
            if host.endswith(entry[1:]):
                return True
        elif host == entry or host.endswith("." + entry):
            return True
    return False


def is_valid_domain_pattern(entry: str) -> bool:
    return bool(_DOMAIN_PATTERN.match(entry.strip().lower()))
