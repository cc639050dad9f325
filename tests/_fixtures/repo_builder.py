"""Helper utilities for constructing temporary codebases in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from depinfer.models import ScanResult
from depinfer.repo_scanner import RepoScanner


class RepoBuilder:
    """Utility for writing files into a throwaway codebase and rescanning it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self._scanner = RepoScanner()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the codebase."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_bytes(self, relative: str, data: bytes) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def scan(self) -> ScanResult:
        """Return a fresh scan of the codebase contents."""
        return self._scanner.scan(str(self.root))

    def path(self) -> Path:
        """Return the codebase root path."""
        return self.root


__all__ = ["RepoBuilder"]
