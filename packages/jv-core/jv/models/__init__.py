from jv.models.pointer import JSONPointer
from jv.models.issues import IssueKind, SchemaIssue, SchemaIssueKind, ValidationIssue
from jv.models.results import (
    AnnotationRecord, OutputLevel, OutputUnit, ValidationError, ValidationResult,
)

__all__ = [
    "JSONPointer",
    "IssueKind", "SchemaIssue", "SchemaIssueKind", "ValidationIssue",
    "AnnotationRecord", "OutputLevel", "OutputUnit", "ValidationError", "ValidationResult",
]
