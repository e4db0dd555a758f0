"""Output rendering — flag, basic, detailed and verbose output structures."""

from __future__ import annotations

from typing import Any

from jv.models.results import (
    AnnotationRecord,
    OutputLevel,
    OutputUnit,
    ValidationError,
    ValidationResult,
)

FALLBACK_MESSAGE = "Validation failed."


def render_output(result: ValidationResult, level: OutputLevel | str = OutputLevel.basic) -> Any:
    """Render *result* at *level*: a bool for ``flag``, a JSON object otherwise."""
    level = OutputLevel(level)
    if level is OutputLevel.flag:
        return result.valid
    if level is OutputLevel.basic:
        return basic_unit(result).to_json()
    if level is OutputLevel.detailed:
        verbose = verbose_unit(result)
        return (_condense(verbose, is_root=True) or verbose).to_json()
    return verbose_unit(result).to_json()


def basic_unit(result: ValidationResult) -> OutputUnit:
    """One unit whose ``errors`` are the flattened leaf errors."""
    leaves = [_leaf(error) for error in result.leaf_errors()] or None
    return OutputUnit(
        valid=result.valid,
        keyword_location=str(result.keyword_location),
        absolute_keyword_location=result.absolute_keyword_location,
        instance_location=str(result.instance_location),
        error=None if result.valid or leaves else FALLBACK_MESSAGE,
        errors=leaves,
        annotations=_annotations(result),
    )


def verbose_unit(result: ValidationResult) -> OutputUnit:
    """The full error tree."""
    nested = [_tree(error) for error in result.errors or []] or None
    return OutputUnit(
        valid=result.valid,
        keyword_location=str(result.keyword_location),
        absolute_keyword_location=result.absolute_keyword_location,
        instance_location=str(result.instance_location),
        error=None if result.valid or nested else FALLBACK_MESSAGE,
        errors=nested,
        annotations=_annotations(result),
    )


def _annotations(result: ValidationResult) -> list[OutputUnit] | None:
    if not result.valid or not result.annotations:
        return None
    return [_annotation(record) for record in result.annotations]


def _annotation(record: AnnotationRecord) -> OutputUnit:
    return OutputUnit(
        keyword_location=str(record.keyword_location),
        absolute_keyword_location=record.absolute_keyword_location,
        instance_location=str(record.instance_location),
        annotation=record.value,
    )


def _leaf(error: ValidationError) -> OutputUnit:
    return OutputUnit(
        valid=False,
        keyword_location=str(error.keyword_location),
        absolute_keyword_location=error.absolute_keyword_location,
        instance_location=str(error.instance_location),
        error=error.message,
    )


def _tree(error: ValidationError) -> OutputUnit:
    if not error.errors:
        return _leaf(error)
    return OutputUnit(
        valid=False,
        keyword_location=str(error.keyword_location),
        absolute_keyword_location=error.absolute_keyword_location,
        instance_location=str(error.instance_location),
        errors=[_tree(child) for child in error.errors],
    )


def _condense(unit: OutputUnit, is_root: bool) -> OutputUnit | None:
    """Drop interior nodes that carry no message or annotations of their own."""
    children = [c for c in (_condense(child, False) for child in unit.errors or []) if c is not None]
    has_local_info = unit.error is not None or bool(unit.annotations)
    if not is_root and not has_local_info:
        if not children:
            return None
        if len(children) == 1:
            return children[0]
    return unit.model_copy(update={"errors": children or None})
