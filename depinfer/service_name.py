"""Guess the analysed project's own name from its file layout."""

from __future__ import annotations

import re
from typing import Sequence

from .models import SourceFile

UNKNOWN_SERVICE = "UnknownService"

_CONTAINER_DIRS = ("src", "main", "java", "app", "lib", "pkg", "com", "amazon", "internal")
_SERVICE_MARKERS = ("Service", "Gateway", "Lambda", "Api", "API")
_UPPERCASE = re.compile(r"[A-Z]")


def _looks_like_service(segment: str) -> bool:
    if len(segment) <= 3:
        return False
    return bool(_UPPERCASE.search(segment)) or any(marker in segment for marker in _SERVICE_MARKERS)


def infer_service_name(files: Sequence[SourceFile]) -> str:
    """Return the closest service-like directory of the first file.

    Assumes a conventional ``<org>/<ServiceName>/src/...`` layout and only
    looks at the first file, so the result follows the walker's order.
    """
    if not files:
        return UNKNOWN_SERVICE

    segments = files[0].path.split("/")
    for segment in reversed(segments):
        lowered = segment.lower()
        if any(container in lowered for container in _CONTAINER_DIRS):
            continue
        if _looks_like_service(segment):
            return segment

    for segment in segments:
        if segment and segment != "src":
            return segment
    return UNKNOWN_SERVICE


__all__ = ["UNKNOWN_SERVICE", "infer_service_name"]
