"""Keyword registry — keyword name to keyword class, for the compiler."""

from __future__ import annotations

from jv.keywords.applicator import APPLICATORS
from jv.keywords.assertion import ASSERTIONS
from jv.keywords.base import Keyword
from jv.keywords.identifier import IDENTIFIERS
from jv.keywords.metadata import METADATA, RESERVED
from jv.keywords.reference import REFERENCES

KEYWORD_CLASSES: dict[str, type[Keyword]] = {
    cls.name: cls
    for cls in (*IDENTIFIERS, *REFERENCES, *METADATA, *APPLICATORS, *ASSERTIONS, *RESERVED)
}
