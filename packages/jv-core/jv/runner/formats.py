"""FormatRegistry — named string format validators used by the ``format`` keyword."""

from __future__ import annotations

import ipaddress
import re
import uuid
from datetime import date
from typing import Callable, Iterable, Protocol
from urllib.parse import urlsplit


class FormatValidator(Protocol):
    """A format validator object: a name and a string predicate."""

    format_name: str

    def validate(self, value: str) -> bool: ...


class FormatRegistry:
    """Registry of format predicates keyed by format name."""

    def __init__(self, validators: Iterable[FormatValidator] = ()) -> None:
        self._formats: dict[str, _FormatEntry] = {}
        for validator in validators:
            self.register_validator(validator)

    def register(self, name: str, fn: Callable[[str], bool]) -> None:
        """Register a predicate for *name*, replacing any earlier one."""
        self._formats[name] = _FormatEntry(name=name, fn=fn)

    def register_validator(self, validator: FormatValidator) -> None:
        self.register(validator.format_name, validator.validate)

    def has(self, name: str) -> bool:
        return name in self._formats

    def check(self, name: str, value: str) -> bool:
        """Return whether *value* conforms to format *name*.

        Raises:
            KeyError: If no validator is registered for *name*.
        """
        if name not in self._formats:
            raise KeyError(f"Format not registered: {name}")
        return bool(self._formats[name].fn(value))

    def list_formats(self) -> list[str]:
        return list(self._formats.keys())

    def __len__(self) -> int:
        return len(self._formats)


class _FormatEntry:
    __slots__ = ("name", "fn")

    def __init__(self, name: str, fn: Callable[[str], bool]):
        self.name = name
        self.fn = fn


# --- Built-in validators ---

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(
    r"^(?P<h>\d{2}):(?P<m>\d{2}):(?P<s>\d{2})(?:\.\d+)?(?P<tz>[Zz]|[+-]\d{2}:\d{2})$"
)
_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")
_HOSTNAME_LABEL_RE = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
_URI_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")


def is_date(value: str) -> bool:
    if not _DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_time(value: str) -> bool:
    match = _TIME_RE.match(value)
    if not match:
        return False
    hour, minute, second = int(match["h"]), int(match["m"]), int(match["s"])
    # 60 is a leap second
    return hour < 24 and minute < 60 and second <= 60


def is_date_time(value: str) -> bool:
    date_part, sep, time_part = value.partition("T") if "T" in value else value.partition("t")
    if not sep:
        return False
    return is_date(date_part) and is_time(time_part)


def is_email(value: str) -> bool:
    """``local@domain.tld``: one ``@``, a dotted domain, no stray dots in the local part."""
    if not _EMAIL_RE.fullmatch(value):
        return False
    local = value.partition("@")[0]
    return not (local.startswith(".") or local.endswith(".") or ".." in local)


def is_hostname(value: str) -> bool:
    hostname = value[:-1] if value.endswith(".") else value
    if not hostname or len(hostname) > 253:
        return False
    return all(_HOSTNAME_LABEL_RE.match(label) for label in hostname.split("."))


def is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def is_uuid(value: str) -> bool:
    if len(value) != 36 or value.count("-") != 4:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def is_uri_reference(value: str) -> bool:
    if any(ch.isspace() for ch in value) or "\\" in value:
        return False
    try:
        urlsplit(value)
    except ValueError:
        return False
    return True


def is_uri(value: str) -> bool:
    if not is_uri_reference(value):
        return False
    scheme = urlsplit(value).scheme
    return bool(scheme) and bool(_URI_SCHEME_RE.match(scheme))


def is_regex(value: str) -> bool:
    try:
        re.compile(value)
    except re.error:
        return False
    return True


_BUILTINS: dict[str, Callable[[str], bool]] = {
    "date-time": is_date_time,
    "date": is_date,
    "time": is_time,
    "email": is_email,
    "hostname": is_hostname,
    "ipv4": is_ipv4,
    "ipv6": is_ipv6,
    "uuid": is_uuid,
    "uri": is_uri,
    "uri-reference": is_uri_reference,
    "regex": is_regex,
}


def default_formats() -> FormatRegistry:
    """Return a registry holding every built-in format validator."""
    registry = FormatRegistry()
    for name, fn in _BUILTINS.items():
        registry.register(name, fn)
    return registry
