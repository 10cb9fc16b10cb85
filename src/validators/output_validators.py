#!/usr/bin/env python3
"""
output_validators.py: Validation of agent-produced safe-output records

Each JSONL line is parsed (with repair), checked against the allowed
output types and their per-type limits, validated field by field and
sanitized. The result of one line is either a typed record or an error
message, never both.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..outputs.types import (
    AddIssueComment,
    AddIssueLabel,
    CreateDiscussion,
    CreateIssue,
    CreatePullRequest,
    CreatePullRequestReviewComment,
    CreateSecurityReport,
    MissingTool,
    OutputRecord,
    PushToBranch,
    UpdateIssue,
)
from ..parsing.json_repair import parse_json_with_repair
from ..sanitizer.content import ContentSanitizer

# Default per-type limits, used when the config gives no explicit max
DEFAULT_MAX_BY_TYPE: Dict[str, int] = {
    "create-issue": 1,
    "add-issue-comment": 1,
    "create-pull-request": 1,
    "add-issue-label": 5,
    "update-issue": 1,
    "push-to-branch": 1,
    "create-pull-request-review-comment": 10,
    "create-discussion": 1,
    "missing-tool": 1000,
    "create-security-report": 1000,
}
FALLBACK_MAX = 1

ISSUE_STATUSES = ("open", "closed")
REVIEW_SIDES = ("LEFT", "RIGHT")


class FieldError(Exception):
    """Raised inside a type validator to reject the record"""


def _require_string(item: Dict[str, Any], key: str, item_type: str) -> str:
    value = item.get(key)
    if not value or not isinstance(value, str):
        raise FieldError(f"{item_type} requires a '{key}' string field")
    return value


def _optional_string(item: Dict[str, Any], key: str, item_type: str) -> Optional[str]:
    value = item.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FieldError(f"{item_type} '{key}' must be a string")
    return value


def _string_list(item: Dict[str, Any], key: str, item_type: str) -> Optional[List[str]]:
    value = item.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise FieldError(f"{item_type} '{key}' must be an array")
    if any(not isinstance(v, str) for v in value):
        raise FieldError(f"{item_type} {key} array must contain only strings")
    return value


def parse_positive_int(value: Any) -> Optional[int]:
    """
    Interpret a JSON number or numeric string as a positive integer.

    Returns:
        The integer, or None if the value is not a positive whole number
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text.isdigit() or not text.isascii():
            return None
        number = int(text)
    else:
        return None
    return number if number > 0 else None


def _optional_number(item: Dict[str, Any], key: str, item_type: str) -> Optional[int]:
    if item.get(key) is None:
        return None
    number = parse_positive_int(item[key])
    if number is None:
        raise FieldError(f"{item_type} '{key}' must be a valid positive integer")
    return number


class OutputValidator:
    """Validates JSONL lines against the safe-outputs configuration"""

    def __init__(
        self,
        config: Mapping[str, Any],
        sanitizer: Optional[ContentSanitizer] = None,
        default_limits: Optional[Mapping[str, int]] = None,
    ):
        self.config = dict(config)
        self.sanitizer = sanitizer if sanitizer is not None else ContentSanitizer()
        self.default_limits = dict(
            DEFAULT_MAX_BY_TYPE if default_limits is None else default_limits
        )
        self._validators: Dict[str, Callable[[Dict[str, Any]], OutputRecord]] = {
            CreateIssue.TYPE: self._create_issue,
            AddIssueComment.TYPE: self._add_issue_comment,
            CreatePullRequest.TYPE: self._create_pull_request,
            AddIssueLabel.TYPE: self._add_issue_label,
            UpdateIssue.TYPE: self._update_issue,
            PushToBranch.TYPE: self._push_to_branch,
            CreatePullRequestReviewComment.TYPE: self._review_comment,
            CreateDiscussion.TYPE: self._create_discussion,
            MissingTool.TYPE: self._missing_tool,
            CreateSecurityReport.TYPE: self._security_report,
        }

    def is_allowed(self, item_type: str) -> bool:
        """A type is allowed when configured as true or as a settings mapping."""
        settings = self.config.get(item_type)
        return settings is True or isinstance(settings, Mapping)

    def max_allowed(self, item_type: str) -> int:
        """Explicit ``max`` from the config, else the default for the type."""
        settings = self.config.get(item_type)
        if isinstance(settings, Mapping):
            explicit = parse_positive_int(settings.get("max"))
            if explicit is not None:
                return explicit
        return self.default_limits.get(item_type, FALLBACK_MAX)

    def validate_line(
        self, line: str, counts: Mapping[str, int]
    ) -> Tuple[Optional[OutputRecord], Optional[str]]:
        """
        Validate one non-empty JSONL line.

        Args:
            line: Trimmed line text
            counts: Records already accepted in this run, by type

        Returns:
            (record, None) when accepted, (None, error message) otherwise
        """
        item = parse_json_with_repair(line)
        if item is None:
            return None, "Invalid JSON - JSON parsing failed"

        if not isinstance(item, dict) or not item.get("type"):
            return None, "Missing required 'type' field"

        item_type = item["type"]
        if not isinstance(item_type, str) or not self.is_allowed(item_type):
            expected = ", ".join(self.config.keys())
            return (
                None,
                f"Unexpected output type '{item_type}'. Expected one of: {expected}",
            )

        max_allowed = self.max_allowed(item_type)
        if counts.get(item_type, 0) >= max_allowed:
            return (
                None,
                f"Too many items of type '{item_type}'. Maximum allowed: {max_allowed}.",
            )

        validator = self._validators.get(item_type)
        if validator is None:
            return None, f"Unknown output type '{item_type}'"

        try:
            return validator(item), None
        except FieldError as e:
            return None, str(e)

    def _clean(self, value: Optional[str]) -> Optional[str]:
        return None if value is None else self.sanitizer.sanitize(value)

    def _clean_list(self, values: Optional[List[str]]) -> Optional[List[str]]:
        return None if values is None else [self.sanitizer.sanitize(v) for v in values]

    # Type validators

    def _create_issue(self, item: Dict[str, Any]) -> OutputRecord:
        t = CreateIssue.TYPE
        title = _require_string(item, "title", t)
        body = _require_string(item, "body", t)
        labels = _string_list(item, "labels", t)
        return CreateIssue(
            title=self.sanitizer.sanitize(title),
            body=self.sanitizer.sanitize(body),
            labels=self._clean_list(labels),
        )

    def _add_issue_comment(self, item: Dict[str, Any]) -> OutputRecord:
        body = _require_string(item, "body", AddIssueComment.TYPE)
        return AddIssueComment(body=self.sanitizer.sanitize(body))

    def _create_pull_request(self, item: Dict[str, Any]) -> OutputRecord:
        t = CreatePullRequest.TYPE
        title = _require_string(item, "title", t)
        body = _require_string(item, "body", t)
        labels = _string_list(item, "labels", t)
        branch = _optional_string(item, "branch", t)
        return CreatePullRequest(
            title=self.sanitizer.sanitize(title),
            body=self.sanitizer.sanitize(body),
            labels=self._clean_list(labels),
            branch=self._clean(branch),
        )

    def _add_issue_label(self, item: Dict[str, Any]) -> OutputRecord:
        t = AddIssueLabel.TYPE
        if not isinstance(item.get("labels"), list):
            raise FieldError(f"{t} requires a 'labels' array field")
        labels = _string_list(item, "labels", t) or []
        return AddIssueLabel(labels=[self.sanitizer.sanitize(v) for v in labels])

    def _update_issue(self, item: Dict[str, Any]) -> OutputRecord:
        t = UpdateIssue.TYPE
        if all(item.get(key) is None for key in ("status", "title", "body")):
            raise FieldError(
                f"{t} requires at least one of: 'status', 'title', or 'body' fields"
            )

        status = item.get("status")
        if status is not None and status not in ISSUE_STATUSES:
            raise FieldError(f"{t} 'status' must be 'open' or 'closed'")

        title = _optional_string(item, "title", t)
        body = _optional_string(item, "body", t)
        for key, value in (("title", title), ("body", body)):
            if value is not None and not value.strip():
                raise FieldError(f"{t} '{key}' must not be empty")
        issue_number = _optional_number(item, "issue_number", t)
        return UpdateIssue(
            status=status,
            title=self._clean(title),
            body=self._clean(body),
            issue_number=issue_number,
        )

    def _push_to_branch(self, item: Dict[str, Any]) -> OutputRecord:
        t = PushToBranch.TYPE
        message = _optional_string(item, "message", t)
        pull_request_number = _optional_number(item, "pull_request_number", t)
        return PushToBranch(
            message=self._clean(message), pull_request_number=pull_request_number
        )

    def _review_comment(self, item: Dict[str, Any]) -> OutputRecord:
        t = CreatePullRequestReviewComment.TYPE
        path = _require_string(item, "path", t)

        if item.get("line") is None:
            raise FieldError(f"{t} requires a 'line' number")
        line = parse_positive_int(item["line"])
        if line is None:
            raise FieldError(f"{t} 'line' must be a positive integer")

        body = _require_string(item, "body", t)

        start_line = None
        if item.get("start_line") is not None:
            start_line = parse_positive_int(item["start_line"])
            if start_line is None:
                raise FieldError(f"{t} 'start_line' must be a positive integer")
            if start_line > line:
                raise FieldError(f"{t} 'start_line' must be less than or equal to 'line'")

        side = item.get("side")
        if side is not None and side not in REVIEW_SIDES:
            raise FieldError(f"{t} 'side' must be 'LEFT' or 'RIGHT'")

        return CreatePullRequestReviewComment(
            path=path,
            line=line,
            body=self.sanitizer.sanitize(body),
            start_line=start_line,
            side=side,
        )

    def _create_discussion(self, item: Dict[str, Any]) -> OutputRecord:
        t = CreateDiscussion.TYPE
        title = _require_string(item, "title", t)
        body = _require_string(item, "body", t)
        return CreateDiscussion(
            title=self.sanitizer.sanitize(title), body=self.sanitizer.sanitize(body)
        )

    def _missing_tool(self, item: Dict[str, Any]) -> OutputRecord:
        t = MissingTool.TYPE
        tool = _require_string(item, "tool", t)
        reason = _require_string(item, "reason", t)
        alternatives = _optional_string(item, "alternatives", t)
        return MissingTool(
            tool=self.sanitizer.sanitize(tool),
            reason=self.sanitizer.sanitize(reason),
            alternatives=self._clean(alternatives),
        )

    def _security_report(self, item: Dict[str, Any]) -> OutputRecord:
        t = CreateSecurityReport.TYPE
        sarif = item.get("sarif")
        if isinstance(sarif, str) and sarif:
            sarif = self.sanitizer.sanitize(sarif)
        elif not isinstance(sarif, dict):
            raise FieldError(f"{t} requires a 'sarif' field")
        category = _optional_string(item, "category", t)
        return CreateSecurityReport(sarif=sarif, category=self._clean(category))
