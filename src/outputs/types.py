#!/usr/bin/env python3
"""
types.py: Validated safe-output records

One dataclass per output type. Records are only built by the validator,
after every free-text field has been sanitized; serialization drops
optional fields that were not supplied.
"""

import json
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Optional, Type, Union


@dataclass
class OutputRecord:
    """Base class for a validated record"""

    TYPE: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.TYPE}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                data[f.name] = value
        return data


@dataclass
class CreateIssue(OutputRecord):
    TYPE: ClassVar[str] = "create-issue"

    title: str
    body: str
    labels: Optional[List[str]] = None


@dataclass
class AddIssueComment(OutputRecord):
    TYPE: ClassVar[str] = "add-issue-comment"

    body: str


@dataclass
class CreatePullRequest(OutputRecord):
    TYPE: ClassVar[str] = "create-pull-request"

    title: str
    body: str
    labels: Optional[List[str]] = None
    branch: Optional[str] = None


@dataclass
class AddIssueLabel(OutputRecord):
    TYPE: ClassVar[str] = "add-issue-label"

    labels: List[str] = field(default_factory=list)


@dataclass
class UpdateIssue(OutputRecord):
    TYPE: ClassVar[str] = "update-issue"

    status: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    issue_number: Optional[int] = None


@dataclass
class PushToBranch(OutputRecord):
    TYPE: ClassVar[str] = "push-to-branch"

    message: Optional[str] = None
    pull_request_number: Optional[int] = None


@dataclass
class CreatePullRequestReviewComment(OutputRecord):
    TYPE: ClassVar[str] = "create-pull-request-review-comment"

    path: str
    line: int
    body: str
    start_line: Optional[int] = None
    side: Optional[str] = None


@dataclass
class CreateDiscussion(OutputRecord):
    TYPE: ClassVar[str] = "create-discussion"

    title: str
    body: str


@dataclass
class MissingTool(OutputRecord):
    TYPE: ClassVar[str] = "missing-tool"

    tool: str
    reason: str
    alternatives: Optional[str] = None


@dataclass
class CreateSecurityReport(OutputRecord):
    TYPE: ClassVar[str] = "create-security-report"

    sarif: Union[Dict[str, Any], str]
    category: Optional[str] = None


RECORD_TYPES: Dict[str, Type[OutputRecord]] = {
    cls.TYPE: cls
    for cls in (
        CreateIssue,
        AddIssueComment,
        CreatePullRequest,
        AddIssueLabel,
        UpdateIssue,
        PushToBranch,
        CreatePullRequestReviewComment,
        CreateDiscussion,
        MissingTool,
        CreateSecurityReport,
    )
}


@dataclass
class ValidatedOutput:
    """Result of one collection run: accepted records and per-line errors"""

    items: List[OutputRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "errors": list(self.errors),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
