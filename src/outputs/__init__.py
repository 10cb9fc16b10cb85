"""Safe-output records, collection and the workflow step commands."""

from .types import RECORD_TYPES, OutputRecord, ValidatedOutput

__all__ = [
    "RECORD_TYPES",
    "OutputRecord",
    "ValidatedOutput",
]
