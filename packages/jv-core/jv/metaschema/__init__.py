from jv.metaschema.loader import (
    bundled_document,
    load_meta_schema,
    validate_against_meta_schema,
    validate_raw_against_meta_schema,
)

__all__ = [
    "bundled_document", "load_meta_schema",
    "validate_against_meta_schema", "validate_raw_against_meta_schema",
]
