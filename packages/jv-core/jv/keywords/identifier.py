"""Identifier keywords — processed while compiling; they register URIs and never validate."""

from __future__ import annotations

import logging
from typing import Any

from jv.compiler.dialect import CORE, Dialect
from jv.keywords.base import Keyword, KeywordContext, KeywordKind, compile_subschema_map
from jv.models.issues import SchemaIssue, SchemaIssueKind
from jv.runner.context import Context, IdentifierLocation

logger = logging.getLogger(__name__)


class Identifier(Keyword):
    kind = KeywordKind.identifier

    def _schema_location(self) -> IdentifierLocation:
        context = self.context
        return IdentifierLocation(context.document, context.location.drop_last(), context.parent_base)


class SchemaKeyword(Identifier):
    """``$schema`` — selects the dialect for the Context when it names a known one."""

    name = "$schema"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        dialect = Dialect.from_uri(value) if isinstance(value, str) else None
        if dialect is not None:
            context.context.dialect = dialect


def validate_vocabularies(value: Any, dialect: Dialect) -> frozenset[str]:
    """Check a ``$vocabulary`` object and return the vocabulary URIs it declares.

    Raises:
        SchemaIssue: ``invalidVocabularyFormat`` for a malformed object,
            ``unsupportedRequiredVocabulary`` for a required vocabulary this
            dialect does not implement.
    """
    if not isinstance(value, dict):
        raise SchemaIssue(SchemaIssueKind.invalid_vocabulary_format, "$vocabulary must be an object")
    for uri, required in value.items():
        if not isinstance(required, bool):
            raise SchemaIssue(
                SchemaIssueKind.invalid_vocabulary_format, f"value for {uri!r} must be a boolean",
            )
        if required and uri not in dialect.supported_vocabularies:
            raise SchemaIssue(SchemaIssueKind.unsupported_required_vocabulary, uri)
    return frozenset(value)


class Vocabulary(Identifier):
    name = "$vocabulary"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        self.vocabularies = validate_vocabularies(value, context.context.dialect)


def resolve_active_vocabularies(raw: dict[str, Any], context: Context) -> frozenset[str] | None:
    """Vocabularies active for a root document, or None when every supported one is.

    The document's own ``$vocabulary`` wins; otherwise the ``$vocabulary`` of
    the meta-schema named by ``$schema`` is used when that meta-schema is
    registered in the remote store.
    """
    declared = raw.get("$vocabulary")
    if declared is None:
        meta_uri = raw.get("$schema")
        meta = context.remote_store.get(meta_uri) if isinstance(meta_uri, str) else None
        declared = meta.get("$vocabulary") if isinstance(meta, dict) else None
    if declared is None:
        return None
    vocabularies = validate_vocabularies(declared, context.dialect)
    active = frozenset(uri for uri in vocabularies if uri in context.dialect.supported_vocabularies)
    logger.debug("active vocabularies: %s", sorted(active))
    return active | {CORE}


class Id(Identifier):
    """``$id`` — the compiler has already rebased ``context.uri``; this registers it."""

    name = "$id"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        if isinstance(value, str):
            context.context.register_identifier(context.uri, self._schema_location())


class Anchor(Identifier):
    name = "$anchor"
    dynamic = False

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        if isinstance(value, str):
            location = self._schema_location()
            location.dynamic = self.dynamic
            context.context.register_anchor(context.uri, value, location)


class DynamicAnchor(Anchor):
    name = "$dynamicAnchor"
    dynamic = True


class Defs(Identifier):
    """``$defs`` — compiles every definition eagerly so their identifiers register."""

    name = "$defs"

    def __init__(self, value: Any, context: KeywordContext):
        super().__init__(value, context)
        compile_subschema_map(value, context)


class Comment(Identifier):
    name = "$comment"


IDENTIFIERS: tuple[type[Keyword], ...] = (
    SchemaKeyword, Vocabulary, Id, Anchor, DynamicAnchor, Defs, Comment,
)
