"""Validation result models — what comes back after validating an instance."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from jv.models.issues import IssueKind
from jv.models.pointer import JSONPointer


class OutputLevel(str, Enum):
    flag = "flag"
    basic = "basic"
    detailed = "detailed"
    verbose = "verbose"


class _LocatedModel(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    keyword_location: JSONPointer = Field(default_factory=JSONPointer)
    absolute_keyword_location: str | None = None
    instance_location: JSONPointer = Field(default_factory=JSONPointer)

    @field_serializer("keyword_location", "instance_location")
    def _pointer_to_str(self, pointer: JSONPointer) -> str:
        return str(pointer)


class ValidationError(_LocatedModel):
    """One failed keyword, with the failures of its subschemas nested below it."""
    keyword: str
    kind: IssueKind
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    errors: list[ValidationError] = Field(default_factory=list)

    def walk(self) -> Iterator[ValidationError]:
        """Yield this error and every nested error, depth first."""
        yield self
        for child in self.errors:
            yield from child.walk()

    def leaves(self) -> Iterator[ValidationError]:
        if not self.errors:
            yield self
            return
        for child in self.errors:
            yield from child.leaves()

    def rebased(self, target: JSONPointer, prefix: JSONPointer) -> ValidationError:
        """Return a copy whose keyword locations under *target* are moved under *prefix*.

        Used when an error surfaces through ``$ref``: the keyword location then
        reads as the evaluation path rather than the referenced document's path.
        """
        location = self.keyword_location
        if location.starts_with(target):
            location = prefix.concat(location.relative_to(target))
        return self.model_copy(update={
            "keyword_location": location,
            "errors": [e.rebased(target, prefix) for e in self.errors],
        })


class AnnotationRecord(_LocatedModel):
    """An annotation produced by a successful keyword."""
    keyword: str
    value: Any = None


class ValidationResult(_LocatedModel):
    """Result of validating an instance against a schema."""
    valid: bool
    errors: list[ValidationError] | None = None
    annotations: list[AnnotationRecord] | None = None

    @property
    def is_valid(self) -> bool:
        return self.valid

    def iter_errors(self) -> Iterator[ValidationError]:
        for error in self.errors or []:
            yield from error.walk()

    def leaf_errors(self) -> list[ValidationError]:
        return [leaf for error in self.errors or [] for leaf in error.leaves()]

    def find(self, kind: IssueKind | str) -> list[ValidationError]:
        """Return every error (at any depth) of the given kind."""
        kind = IssueKind(kind)
        return [e for e in self.iter_errors() if e.kind == kind]


class OutputUnit(BaseModel):
    """One node of the standard JSON Schema output structure."""
    model_config = ConfigDict(populate_by_name=True)

    valid: bool | None = None
    keyword_location: str = Field(alias="keywordLocation")
    absolute_keyword_location: str | None = Field(None, alias="absoluteKeywordLocation")
    instance_location: str = Field(alias="instanceLocation")
    error: str | None = None
    annotation: Any = None
    errors: list[OutputUnit] | None = None
    annotations: list[OutputUnit] | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


ValidationError.model_rebuild()
OutputUnit.model_rebuild()
