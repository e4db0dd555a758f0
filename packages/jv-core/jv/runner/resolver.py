"""Reference resolver — turn ``$ref`` / ``$dynamicRef`` values into compiled schemas."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jv.compiler.compile_schema import ObjectSchema, Schema, build_schema
from jv.metaschema.loader import bundled_document, load_meta_schema
from jv.models.issues import SchemaIssue
from jv.models.pointer import JSONPointer
from jv.runner.context import IdentifierLocation
from jv.utils.uris import decode_fragment, resolve_uri, split_fragment, strip_fragment

if TYPE_CHECKING:
    from jv.keywords.base import KeywordContext

logger = logging.getLogger(__name__)


class ReferenceResolutionError(Exception):
    """A reference names no schema the Context knows about."""


class ReferenceResolver:
    """Resolves references made from one keyword location.

    Lookup of the target document, in order: the dialect's meta-schema, the
    schema cache, the identifier registry, the remote store, then the
    enclosing ``urn:`` document. Fragments resolve as anchors first, JSON
    Pointers second. Every resolved schema is cached under its absolute URI.
    """

    def __init__(self, keyword_context: KeywordContext):
        self.keyword_context = keyword_context
        self.context = keyword_context.context
        self.base_uri = keyword_context.uri

    def resolve(self, reference: str, dynamic: bool = False) -> Schema:
        target = resolve_uri(self.base_uri, reference)
        url, fragment = split_fragment(target)

        if dynamic and fragment and not fragment.startswith("/"):
            schema = self._resolve_dynamic(target, fragment)
            if schema is not None:
                return schema

        cached = self.context.schema_cache.get(target)
        if cached is not None:
            return cached

        if fragment:
            anchor = self.context.anchors.get(target)
            if anchor is not None:
                schema = self._compile_at(anchor)
                self.context.schema_cache[target] = schema
                return schema

        base = self._fetch_document(url, reference)
        schema = self._resolve_fragment(base, fragment, target) if fragment else base
        self.context.schema_cache[target] = schema
        logger.debug("resolved %s from %s to %r", reference, self.keyword_context.absolute_location, schema)
        return schema

    # --- dynamic scope ---

    def _resolve_dynamic(self, target: str, name: str) -> Schema | None:
        """Bind to the outermost dynamic scope declaring ``$dynamicAnchor: name``.

        Applies only when the statically resolved target is itself a
        ``$dynamicAnchor`` of that name; otherwise the reference is static.
        """
        static = self.context.anchors.get(target)
        if static is None or not static.dynamic:
            return None
        for frame in self.context.dynamic_scopes:
            location = frame.anchors.get(name)
            if location is not None:
                logger.debug("dynamic %s bound in scope %s", target, frame.resource_uri)
                return self._compile_cached(location)
        return None

    # --- documents ---

    def _fetch_document(self, url: str, reference: str) -> Schema:
        context = self.context

        if url == context.dialect.value:
            return load_meta_schema(context)

        cached = context.schema_cache.get(url)
        if cached is not None:
            return cached

        location = context.identifier_registry.get(url)
        if location is not None:
            schema = self._compile_at(location)
            context.schema_cache[url] = schema
            return schema

        raw = context.remote_store.get(url) if url else None
        if raw is None:
            raw = bundled_document(url)
        if raw is not None:
            return self._compile_remote(url, raw)

        if self.base_uri.startswith("urn:") and reference.startswith("#"):
            location = context.identifier_registry.get(strip_fragment(self.base_uri))
            if location is not None:
                return self._compile_at(location)

        raise ReferenceResolutionError(f"Unresolvable reference {reference!r} (resolved to {url!r})")

    def _compile_remote(self, url: str, raw: Any) -> Schema:
        context = self.context
        logger.debug("compiling remote schema %s", url)
        context.register_document(url, raw)
        context.register_identifier(url, IdentifierLocation(url, JSONPointer(), url))
        schema = self._build(raw, JSONPointer(), url, url)
        context.schema_cache[url] = schema
        if isinstance(schema, ObjectSchema) and schema.resource_uri != url:
            context.schema_cache.setdefault(schema.resource_uri, schema)
        return schema

    def _compile_cached(self, location: IdentifierLocation) -> Schema:
        key = strip_fragment(location.document) + location.pointer.fragment
        schema = self.context.schema_cache.get(key)
        if schema is None:
            schema = self._compile_at(location)
            self.context.schema_cache[key] = schema
        return schema

    def _compile_at(self, location: IdentifierLocation) -> Schema:
        raw = self.context.raw_at(location)
        return self._build(raw, location.pointer, location.parent_base, location.document)

    def _build(self, raw: Any, pointer: JSONPointer, base_uri: str, document: str) -> Schema:
        try:
            return build_schema(raw, pointer, self.context, base_uri=base_uri, document=document)
        except SchemaIssue as exc:
            raise ReferenceResolutionError(f"Referenced schema does not compile: {exc}") from exc

    # --- fragments ---

    def _resolve_fragment(self, base: Schema, fragment: str, target: str) -> Schema:
        if not fragment.startswith("/"):
            # fetching the document may just have registered its anchors
            anchor = self.context.anchors.get(target)
            if anchor is None:
                raise ReferenceResolutionError(f"Unknown anchor in reference {target!r}")
            return self._compile_at(anchor)
        try:
            pointer = JSONPointer.from_string(decode_fragment(fragment))
        except ValueError as exc:
            raise ReferenceResolutionError(str(exc)) from exc

        raw = base.to_json()
        base_uri = base.uri if isinstance(base, ObjectSchema) else strip_fragment(base.document)
        # a path that crosses a nested $id changes the base URI of what it reaches
        for depth, token in enumerate(pointer):
            if depth and isinstance(raw, dict) and isinstance(raw.get("$id"), str):
                base_uri = strip_fragment(resolve_uri(base_uri, raw["$id"]))
            try:
                raw = JSONPointer([token]).resolve(raw)
            except KeyError as exc:
                raise ReferenceResolutionError(f"Pointer {fragment!r} not found in {target!r}") from exc
        return self._build(raw, base.location.concat(pointer), base_uri, base.document)
