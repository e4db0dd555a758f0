"""JSON Pointer (RFC 6901) — schema and instance locations."""

from __future__ import annotations

import re
from typing import Any, Iterator, Union

Token = Union[str, int]

_ARRAY_INDEX = re.compile(r"0|[1-9][0-9]*")


def _escape(token: Token) -> str:
    return str(token).replace("~", "~0").replace("/", "~1")


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


class JSONPointer:
    """Immutable sequence of reference tokens.

    Tokens are object keys (``str``) or array indices (``int``). Equality and
    hashing compare the escaped string form, so ``/items/0`` built from a string
    equals the same location built by appending an index.
    """

    __slots__ = ("_tokens", "_key")

    def __init__(self, tokens: tuple[Token, ...] | list[Token] = ()):
        self._tokens: tuple[Token, ...] = tuple(tokens)
        self._key = tuple(str(t) for t in self._tokens)

    @classmethod
    def from_string(cls, text: str) -> JSONPointer:
        """Parse ``/a/0/b`` (a leading ``#`` is tolerated).

        Every token stays a string; it is read as an array index only when
        ``resolve`` descends into an array.
        """
        if text.startswith("#"):
            text = text[1:]
        if not text:
            return cls()
        if not text.startswith("/"):
            raise ValueError(f"Invalid JSON pointer: {text!r}")
        return cls([_unescape(raw) for raw in text[1:].split("/")])

    @property
    def tokens(self) -> tuple[Token, ...]:
        return self._tokens

    @property
    def last(self) -> Token | None:
        return self._tokens[-1] if self._tokens else None

    def append(self, *tokens: Token) -> JSONPointer:
        return JSONPointer(self._tokens + tokens)

    def concat(self, other: JSONPointer) -> JSONPointer:
        return JSONPointer(self._tokens + other._tokens)

    def drop_last(self) -> JSONPointer:
        return JSONPointer(self._tokens[:-1])

    def starts_with(self, prefix: JSONPointer) -> bool:
        return self._key[: len(prefix._key)] == prefix._key

    def relative_to(self, base: JSONPointer) -> JSONPointer:
        """Strip *base* from the front of this pointer; unrelated pointers are returned as-is."""
        if self.starts_with(base):
            return JSONPointer(self._tokens[len(base._tokens):])
        return self

    def resolve(self, document: Any) -> Any:
        """Return the value this pointer names inside *document*.

        Raises:
            KeyError: If any token does not exist.
        """
        current = document
        for token in self._tokens:
            if isinstance(current, dict):
                key = str(token)
                if key not in current:
                    raise KeyError(f"No member {key!r} at {self}")
                current = current[key]
            elif isinstance(current, list):
                if isinstance(token, int):
                    index = token
                elif _ARRAY_INDEX.fullmatch(token):
                    index = int(token)
                else:
                    raise KeyError(f"Invalid array index {token!r} at {self}")
                if not 0 <= index < len(current):
                    raise KeyError(f"Index {index} out of range at {self}")
                current = current[index]
            else:
                raise KeyError(f"Cannot descend into scalar at {self}")
        return current

    @property
    def fragment(self) -> str:
        return "#" + str(self)

    def __str__(self) -> str:
        return "".join("/" + _escape(t) for t in self._tokens)

    def __repr__(self) -> str:
        return f"JSONPointer({str(self)!r})"

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __bool__(self) -> bool:
        return bool(self._tokens)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JSONPointer):
            return self._key == other._key
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._key)
