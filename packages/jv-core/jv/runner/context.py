"""Validation context — shared registries, caches, remote schema stores and dynamic scopes."""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Protocol

from jv import _config
from jv.compiler.dialect import Dialect
from jv.models.issues import IssueKind, ValidationIssue
from jv.models.pointer import JSONPointer
from jv.runner.formats import FormatRegistry, FormatValidator
from jv.utils.uris import normalize_uri, strip_fragment
from jv.utils.yaml_io import SCHEMA_SUFFIXES, load_document

if TYPE_CHECKING:
    from jv.compiler.compile_schema import Schema

logger = logging.getLogger(__name__)

# Total schema entries allowed per max_depth unit, across instance nesting.
NESTING_FACTOR = 8


class IdentifierLocation:
    """Where a registered identifier or anchor lives.

    ``pointer`` is relative to the root of ``document``; ``parent_base`` is the
    base URI in effect *before* the schema object at ``pointer`` applied its own
    ``$id``, which is what a recompile of that object must start from.
    """

    __slots__ = ("document", "pointer", "parent_base", "dynamic")

    def __init__(self, document: str, pointer: JSONPointer, parent_base: str, dynamic: bool = False):
        self.document = document
        self.pointer = pointer
        self.parent_base = parent_base
        self.dynamic = dynamic

    def __repr__(self) -> str:
        return f"IdentifierLocation({self.document!r}, {str(self.pointer)!r}, dynamic={self.dynamic})"


class DynamicScopeFrame:
    __slots__ = ("resource_uri", "anchors")

    def __init__(self, resource_uri: str, anchors: dict[str, IdentifierLocation]):
        self.resource_uri = resource_uri
        self.anchors = anchors


# --- Remote schema stores ---

class SchemaStore(Protocol):
    """Protocol for pre-registered remote schema documents (never fetched over the network)."""

    def get(self, uri: str) -> Any | None: ...
    def put(self, uri: str, raw: Any) -> None: ...
    def __contains__(self, uri: object) -> bool: ...


class InMemorySchemaStore:
    """In-memory remote schema store keyed by absolute URI."""

    def __init__(self, documents: dict[str, Any] | None = None) -> None:
        self._documents: dict[str, Any] = {}
        for uri, raw in (documents or {}).items():
            self.put(uri, raw)

    def get(self, uri: str) -> Any | None:
        return self._documents.get(normalize_uri(uri))

    def put(self, uri: str, raw: Any) -> None:
        self._documents[normalize_uri(uri)] = raw

    def __contains__(self, uri: object) -> bool:
        return isinstance(uri, str) and normalize_uri(uri) in self._documents

    def uris(self) -> list[str]:
        return list(self._documents.keys())


class FileSchemaStore:
    """Directory-backed store: ``<base_uri><relative path>`` maps to a file under ``root``.

    A URI without a suffix also matches ``.json``, ``.yaml`` and ``.yml`` files.
    """

    def __init__(self, root: Path, base_uri: str):
        self._root = Path(root)
        self._base = base_uri if base_uri.endswith("/") else base_uri + "/"
        self._loaded: dict[str, Any] = {}

    def _path(self, uri: str) -> Path | None:
        uri = strip_fragment(uri)
        if not uri.startswith(self._base):
            return None
        relative = uri[len(self._base):]
        if not relative or ".." in Path(relative).parts:
            return None
        candidate = self._root / relative
        if candidate.is_file():
            return candidate
        for suffix in SCHEMA_SUFFIXES:
            with_suffix = candidate.with_name(candidate.name + suffix)
            if with_suffix.is_file():
                return with_suffix
        return None

    def get(self, uri: str) -> Any | None:
        uri = normalize_uri(uri)
        if uri in self._loaded:
            return self._loaded[uri]
        path = self._path(uri)
        if path is None:
            return None
        logger.debug("loading remote schema %s from %s", uri, path)
        raw = load_document(path)
        self._loaded[uri] = raw
        return raw

    def put(self, uri: str, raw: Any) -> None:
        uri = normalize_uri(uri)
        path = self._path(uri)
        if path is None:
            if not uri.startswith(self._base):
                raise ValueError(f"URI {uri!r} is outside store base {self._base!r}")
            path = self._root / uri[len(self._base):]
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(raw, f, indent=2)
        self._loaded[uri] = raw

    def __contains__(self, uri: object) -> bool:
        return isinstance(uri, str) and self._path(uri) is not None


# --- Context ---

class Context:
    """Mutable state shared by one compiled schema graph.

    A Context is not safe for concurrent mutation; ``validate`` holds ``lock``
    for the whole call so threads sharing a Context serialize.
    """

    def __init__(
        self,
        dialect: Dialect = Dialect.draft2020_12,
        remote_store: SchemaStore | None = None,
        formats: FormatRegistry | Iterable[FormatValidator] | None = None,
        message_templates: dict[str, str] | None = None,
        max_depth: int | None = None,
    ):
        self.dialect = dialect
        self.root_raw_schema: Any = None
        self.documents: dict[str, Any] = {}
        self.identifier_registry: dict[str, IdentifierLocation] = {}
        self.anchors: dict[str, IdentifierLocation] = {}
        self.dynamic_anchors: dict[str, dict[str, IdentifierLocation]] = {}
        self.schema_cache: dict[str, Schema] = {}
        self.remote_store: SchemaStore = remote_store if remote_store is not None else InMemorySchemaStore()
        self.dynamic_scopes: list[DynamicScopeFrame] = []
        self.formats = formats if isinstance(formats, FormatRegistry) else FormatRegistry(formats or ())
        self.active_vocabularies: frozenset[str] | None = None
        self.message_templates: dict[str, str] = dict(message_templates or {})
        self.max_depth = max_depth if max_depth is not None else _config.get_max_depth()
        self.max_nesting = self.max_depth * NESTING_FACTOR
        self.depth = 0
        self._depth_at: dict[JSONPointer, int] = {}
        self.lock = threading.RLock()

    # --- registration (compile time) ---

    def register_document(self, uri: str, raw: Any) -> None:
        uri = normalize_uri(uri)
        self.documents.setdefault(uri, raw)

    def register_identifier(self, uri: str, location: IdentifierLocation) -> bool:
        """Register *uri*; the first registration wins. Returns whether it was stored."""
        uri = normalize_uri(uri)
        if uri in self.identifier_registry:
            return False
        logger.debug("registered identifier %s -> %r", uri, location)
        self.identifier_registry[uri] = location
        return True

    def register_anchor(self, resource_uri: str, name: str, location: IdentifierLocation) -> bool:
        uri = f"{strip_fragment(resource_uri)}#{name}"
        if location.dynamic:
            self.dynamic_anchors.setdefault(strip_fragment(resource_uri), {}).setdefault(name, location)
        if uri in self.anchors:
            return False
        logger.debug("registered %sanchor %s", "dynamic " if location.dynamic else "", uri)
        self.anchors[uri] = location
        return True

    def raw_at(self, location: IdentifierLocation) -> Any:
        """Return the raw schema value a registered location names."""
        return location.pointer.resolve(self.documents[location.document])

    # --- evaluation (validation time) ---

    @contextmanager
    def enter(self, resource_uri: str, instance_location: JSONPointer) -> Iterator[None]:
        """Track evaluation depth and push a dynamic scope frame when a new resource is entered.

        Only schemas entered without moving into the instance count against
        ``max_depth``; descending into the instance is bounded by the
        instance itself. ``max_nesting`` caps the total.
        """
        at_location = self._depth_at.get(instance_location, 0)
        if at_location >= self.max_depth:
            raise ValidationIssue(IssueKind.maximum_depth_exceeded, depth=self.max_depth)
        if self.depth >= self.max_nesting:
            raise ValidationIssue(IssueKind.maximum_depth_exceeded, depth=self.max_nesting)
        pushed = not self.dynamic_scopes or self.dynamic_scopes[-1].resource_uri != resource_uri
        if pushed:
            anchors = self.dynamic_anchors.setdefault(resource_uri, {})
            self.dynamic_scopes.append(DynamicScopeFrame(resource_uri, anchors))
        self.depth += 1
        self._depth_at[instance_location] = at_location + 1
        try:
            yield
        finally:
            self.depth -= 1
            if at_location:
                self._depth_at[instance_location] = at_location
            else:
                del self._depth_at[instance_location]
            if pushed:
                self.dynamic_scopes.pop()
