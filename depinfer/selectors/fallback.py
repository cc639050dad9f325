"""Filename-convention selector for DI module files."""

from __future__ import annotations

from typing import List, Sequence

from .base import KeyFileSelector
from ..models import SourceFile


def looks_like_di_module(file: SourceFile) -> bool:
    if file.language == "java":
        return "Module" in file.name and "/test/" not in f"/{file.path}"
    if file.language == "python":
        return "di_" in file.name or "dependencies" in file.name
    if file.language == "typescript":
        return file.name.endswith(".module.ts")
    return False


class ModuleFallbackSelector(KeyFileSelector):
    """Picks a handful of files named like dependency-injection modules.

    Matches Guice-style ``*Module.java`` outside test trees, Python
    ``di_*``/``*dependencies*`` modules and NestJS/Angular ``*.module.ts``.
    """

    def __init__(self, limit: int = 3) -> None:
        self.limit = limit

    def select(self, files: Sequence[SourceFile]) -> List[SourceFile]:
        return [file for file in files if looks_like_di_module(file)][: self.limit]
