"""Annotation container — per-validation map of keyword annotations with keyword-specific merges."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator

from jv.models.pointer import JSONPointer
from jv.models.results import AnnotationRecord

if TYPE_CHECKING:
    from jv.keywords.base import Keyword


class PrefixItemsCoverage:
    """How much of an array ``prefixItems`` evaluated: every index, or up to ``largest_index``."""

    __slots__ = ("every", "largest_index")

    def __init__(self, every: bool = False, largest_index: int = -1):
        self.every = every
        self.largest_index = largest_index

    @classmethod
    def every_index(cls) -> PrefixItemsCoverage:
        return cls(every=True)

    def merge(self, other: PrefixItemsCoverage) -> PrefixItemsCoverage:
        if self.every or other.every:
            return PrefixItemsCoverage.every_index()
        return PrefixItemsCoverage(largest_index=max(self.largest_index, other.largest_index))

    def to_json(self) -> Any:
        return True if self.every else self.largest_index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrefixItemsCoverage):
            return NotImplemented
        return (self.every, self.largest_index) == (other.every, other.largest_index)

    def __repr__(self) -> str:
        return "PrefixItemsCoverage(every)" if self.every else f"PrefixItemsCoverage({self.largest_index})"


class ContainsMatches:
    """Indices of array items that matched ``contains`` (or all of them)."""

    __slots__ = ("every", "indices")

    def __init__(self, indices: tuple[int, ...] = (), every: bool = False):
        self.every = every
        self.indices = tuple(indices)

    def merge(self, other: ContainsMatches) -> ContainsMatches:
        if self.every or other.every:
            return ContainsMatches(every=True)
        return ContainsMatches(self.indices + other.indices)

    def count(self, array_length: int) -> int:
        return array_length if self.every else len(set(self.indices))

    def to_json(self) -> Any:
        return True if self.every else list(self.indices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContainsMatches):
            return NotImplemented
        return (self.every, self.indices) == (other.every, other.indices)

    def __repr__(self) -> str:
        return "ContainsMatches(every)" if self.every else f"ContainsMatches({list(self.indices)})"


def _json_form(value: Any) -> Any:
    if isinstance(value, (PrefixItemsCoverage, ContainsMatches)):
        return value.to_json()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


class Annotation:
    __slots__ = ("keyword", "keyword_location", "absolute_keyword_location", "instance_location", "value", "merge")

    def __init__(
        self,
        keyword: str,
        keyword_location: JSONPointer,
        absolute_keyword_location: str | None,
        instance_location: JSONPointer,
        value: Any,
        merge: Callable[[Any, Any], Any],
    ):
        self.keyword = keyword
        self.keyword_location = keyword_location
        self.absolute_keyword_location = absolute_keyword_location
        self.instance_location = instance_location
        self.value = value
        self.merge = merge

    def merged_with(self, other: Annotation) -> Annotation:
        return Annotation(
            self.keyword, other.keyword_location, other.absolute_keyword_location,
            self.instance_location, self.merge(self.value, other.value), self.merge,
        )

    def to_record(self) -> AnnotationRecord:
        return AnnotationRecord(
            keyword=self.keyword,
            keyword_location=self.keyword_location,
            absolute_keyword_location=self.absolute_keyword_location,
            instance_location=self.instance_location,
            value=_json_form(self.value),
        )


class AnnotationContainer:
    """Annotations of one validation call, keyed by (keyword, instance location).

    Inserting onto an existing key merges with the keyword's merge rule, so
    several sibling subschemas annotating the same location accumulate.
    """

    def __init__(self) -> None:
        self._items: dict[tuple[str, JSONPointer], Annotation] = {}

    def insert(self, keyword: Keyword, instance_location: JSONPointer, value: Any) -> None:
        annotation = Annotation(
            keyword=keyword.name,
            keyword_location=keyword.context.location,
            absolute_keyword_location=keyword.context.absolute_location,
            instance_location=instance_location,
            value=value,
            merge=type(keyword).merge_annotations,
        )
        self._add(annotation)

    def _add(self, annotation: Annotation) -> None:
        key = (annotation.keyword, annotation.instance_location)
        existing = self._items.get(key)
        self._items[key] = annotation if existing is None else existing.merged_with(annotation)

    def get(self, keyword: str, instance_location: JSONPointer) -> Annotation | None:
        return self._items.get((keyword, instance_location))

    def value(self, keyword: str, instance_location: JSONPointer, default: Any = None) -> Any:
        annotation = self.get(keyword, instance_location)
        return default if annotation is None else annotation.value

    def has(self, keyword: str, instance_location: JSONPointer) -> bool:
        return (keyword, instance_location) in self._items

    def merge(self, other: AnnotationContainer) -> None:
        """Fold every annotation of *other* into this container."""
        for annotation in other._items.values():
            self._add(annotation)

    def records(self) -> list[AnnotationRecord]:
        return [a.to_record() for a in self._items.values()]

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
