"""Canonical service-name cleanup and false-positive filtering."""

from __future__ import annotations

import re
from typing import Iterable, Optional

GENERIC_NAMES = frozenset(
    {
        "String",
        "Integer",
        "Boolean",
        "Object",
        "List",
        "Map",
        "Set",
        "Array",
        "Http",
        "Rest",
        "Json",
        "Xml",
        "Builder",
    }
)

INFRASTRUCTURE_SUFFIXES = ("Builder", "Factory", "Utils", "Helper")

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 99

_LEADING_UPPER = re.compile(r"[A-Z]")


def normalize(raw: str, strip_suffixes: Iterable[str]) -> str:
    """Remove each suffix in turn when the name still ends with it."""
    name = raw
    for suffix in strip_suffixes:
        if suffix and name.endswith(suffix):
            name = name[: -len(suffix)]
    return name


def is_valid_service_name(name: str) -> bool:
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        return False
    if not _LEADING_UPPER.match(name):
        return False
    if name in GENERIC_NAMES:
        return False
    return not name.endswith(INFRASTRUCTURE_SUFFIXES)


def canonicalize(raw: str, strip_suffixes: Iterable[str] = ()) -> Optional[str]:
    """Return the canonical name for ``raw`` or ``None`` when it is rejected."""
    name = normalize(raw, strip_suffixes)
    return name if is_valid_service_name(name) else None


__all__ = [
    "GENERIC_NAMES",
    "INFRASTRUCTURE_SUFFIXES",
    "canonicalize",
    "is_valid_service_name",
    "normalize",
]
