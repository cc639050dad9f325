"""Additive scoring of files likely to declare service dependencies."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .base import KeyFileSelector
from ..config import DEFAULT_TOP_N
from ..models import SourceFile

PREVIEW_CHARS = 3000

_PATH_SIGNALS: Tuple[Tuple[str, int], ...] = (
    ("/module/", 15),
    ("/config/", 12),
    ("/accessor/", 10),
    ("/client/", 8),
)

_CONTENT_SIGNALS: Tuple[Tuple[str, int], ...] = (
    ("@provides", 25),
    ("@bean", 25),
    ("clientbuilder", 20),
    ("client;", 5),
)

_MIN_REASONABLE_SIZE = 500
_MAX_REASONABLE_SIZE = 100_000


def score_file(file: SourceFile) -> int:
    """Return the relevance score for a single file."""
    score = 0

    path = f"/{file.path.lower()}"
    for fragment, weight in _PATH_SIGNALS:
        if fragment in path:
            score += weight

    name = file.name.lower()
    stem = name.rsplit(".", 1)[0] if "." in name else name
    if "clientmodule" in name:
        score += 20
    if "client" in name and "config" in name:
        score += 15
    if stem.endswith("module"):
        score += 15
    if stem.endswith("config"):
        score += 12

    # only the head of the file is inspected to keep triage cheap
    preview = file.content[:PREVIEW_CHARS].lower()
    for marker, weight in _CONTENT_SIGNALS:
        if marker in preview:
            score += weight

    if _MIN_REASONABLE_SIZE < file.size < _MAX_REASONABLE_SIZE:
        score += 3

    return score


class HeuristicKeyFileSelector(KeyFileSelector):
    """Ranks files by path, name and content markers and keeps the top N."""

    def __init__(self, top_n: int = DEFAULT_TOP_N) -> None:
        self.top_n = top_n

    def rank(self, files: Sequence[SourceFile]) -> List[Tuple[SourceFile, int]]:
        scored = [(file, score_file(file)) for file in files]
        ranked = [(file, score) for file, score in scored if score > 0]
        # sorted() is stable, so equal scores keep walker order
        ranked.sort(key=lambda item: item[1], reverse=True)
        return ranked

    def select(self, files: Sequence[SourceFile]) -> List[SourceFile]:
        return [file for file, _ in self.rank(files)[: self.top_n]]
