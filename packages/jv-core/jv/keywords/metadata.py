"""Metadata, content and reserved keywords — no validation effect."""

from __future__ import annotations

from jv.keywords.base import Keyword, KeywordKind


class Metadata(Keyword):
    """Records its value as an annotation at the instance location."""

    kind = KeywordKind.metadata

    def validate(self, instance, location, annotations, scope):
        annotations.insert(self, location, self.value)


class Title(Metadata):
    name = "title"


class Description(Metadata):
    name = "description"


class Default(Metadata):
    name = "default"


class Deprecated(Metadata):
    name = "deprecated"


class ReadOnly(Metadata):
    name = "readOnly"


class WriteOnly(Metadata):
    name = "writeOnly"


class Examples(Metadata):
    name = "examples"


class ContentEncoding(Metadata):
    name = "contentEncoding"


class ContentMediaType(Metadata):
    name = "contentMediaType"


class ContentSchema(Metadata):
    name = "contentSchema"


class Reserved(Keyword):
    """Keywords of earlier drafts; kept for round-tripping, never evaluated."""

    kind = KeywordKind.reserved


class Definitions(Reserved):
    name = "definitions"


class Dependencies(Reserved):
    name = "dependencies"


class RecursiveAnchor(Reserved):
    name = "$recursiveAnchor"


class RecursiveRef(Reserved):
    name = "$recursiveRef"


METADATA: tuple[type[Keyword], ...] = (
    Title, Description, Default, Deprecated, ReadOnly, WriteOnly, Examples,
    ContentEncoding, ContentMediaType, ContentSchema,
)

RESERVED: tuple[type[Keyword], ...] = (Definitions, Dependencies, RecursiveAnchor, RecursiveRef)
