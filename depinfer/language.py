"""Extension to language tag lookup."""

from __future__ import annotations

from collections import Counter
from pathlib import PurePosixPath
from typing import Iterable

from .models import SourceFile

UNKNOWN_LANGUAGE = "unknown"
GENERIC_LANGUAGE = "text"

_LANGUAGE_BY_SUFFIX = {
    ".py": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".java": "java",
    ".go": "go",
    ".cpp": "cpp",
    ".c": "c",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".kt": "kotlin",
    ".rs": "rust",
    ".cs": "csharp",
}


def classify(extension: str) -> str:
    """Return the coarse language tag for a file extension such as ``.py``."""
    suffix = extension.lower()
    if suffix and not suffix.startswith("."):
        suffix = f".{suffix}"
    return _LANGUAGE_BY_SUFFIX.get(suffix, GENERIC_LANGUAGE)


def classify_filename(filename: str) -> str:
    return classify(PurePosixPath(filename).suffix)


def detect_primary_language(files: Iterable[SourceFile]) -> str:
    """Most common language tag; ties go to the language seen first."""
    counts = Counter(file.language for file in files)
    if not counts:
        return UNKNOWN_LANGUAGE
    return counts.most_common(1)[0][0]


__all__ = ["classify", "classify_filename", "detect_primary_language"]
