"""Repository walking and source file collection."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, List, Sequence, Tuple

from .config import ScanConfig
from .errors import InvalidRootError, NoCodeFilesFoundError
from .language import classify
from .logging import get_logger
from .models import ScanResult, SkippedFile, SourceFile

IGNORED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        ".venv",
        "venv",
        "__pycache__",
        ".pytest_cache",
        "dist",
        "build",
        "target",
        ".idea",
        ".vscode",
        "bin",
        "obj",
        ".gradle",
        "out",
    }
)

CODE_EXTENSIONS = frozenset(
    {
        ".java",
        ".py",
        ".ts",
        ".js",
        ".jsx",
        ".tsx",
        ".go",
        ".cpp",
        ".c",
        ".h",
        ".cs",
        ".rb",
        ".php",
        ".swift",
        ".kt",
        ".rs",
        ".scala",
    }
)

CONFIG_EXTENSIONS = frozenset(
    {
        ".sh",
        ".yml",
        ".yaml",
        ".json",
        ".xml",
        ".sql",
        ".proto",
        ".gradle",
    }
)

_logger = get_logger("scanner")


@dataclass
class IgnoreRule:
    """Represents an exclude pattern from .depinfer.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rules(patterns: Iterable[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        directory_only = pattern.endswith("/")
        if directory_only:
            pattern = pattern[:-1]
        anchored = pattern.startswith("/")
        if anchored:
            pattern = pattern[1:]
        rules.append(
            IgnoreRule(
                pattern=pattern,
                directory_only=directory_only,
                anchored=anchored,
                has_slash="/" in pattern,
            )
        )
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _allowed_extensions(include_config_files: bool) -> frozenset[str]:
    if include_config_files:
        return CODE_EXTENSIONS | CONFIG_EXTENSIONS
    return CODE_EXTENSIONS


def _suffix(name: str) -> str:
    return PurePosixPath(name).suffix.lower()


def _decode(raw: bytes) -> str:
    if b"\x00" in raw:
        raise UnicodeDecodeError("utf-8", raw, 0, 1, "binary content")
    return raw.decode("utf-8")


def check_root(root: str | os.PathLike[str]) -> Path:
    """Return the resolved ``root`` or raise :class:`InvalidRootError`.

    The directory must exist and be listable; nothing under it is touched
    before this check passes.
    """
    root_path = Path(root).expanduser()
    try:
        if not root_path.exists():
            raise InvalidRootError(f"Path not found: {root}")
        if not root_path.is_dir():
            raise InvalidRootError(f"Path is not a directory: {root}")
        with os.scandir(root_path):
            pass
    except OSError as exc:
        raise InvalidRootError(f"Cannot read directory {root}: {exc.strerror or exc}") from exc
    return root_path.resolve()


class RepoScanner:
    """Walks a directory tree and collects decodable source files.

    Entries are visited in name order within each directory so the resulting
    file list, and everything derived from it, is stable across platforms.
    """

    def __init__(self, config: ScanConfig | None = None) -> None:
        self.config = config or ScanConfig()
        self._rules = build_ignore_rules(self.config.exclude_paths)
        self._extensions = _allowed_extensions(self.config.include_config_files)

    def scan(self, root: str | os.PathLike[str]) -> ScanResult:
        """Return the source files found under ``root``."""
        root_path = check_root(root)
        try:
            top_entries = _sorted_entries(root_path)
        except OSError as exc:
            raise InvalidRootError(f"Cannot read directory {root}: {exc.strerror or exc}") from exc

        files: List[SourceFile] = []
        skipped: List[SkippedFile] = []
        for entry, rel_path in self._iter_files(top_entries, "", skipped):
            source = self._read(entry, rel_path, skipped)
            if source is not None:
                files.append(source)

        _logger.debug("Scanned %s: %d files kept, %d skipped", root_path, len(files), len(skipped))
        return ScanResult(root=str(root_path), files=files, skipped=skipped)

    def _iter_files(
        self,
        entries: Sequence[os.DirEntry[str]],
        rel_dir: str,
        skipped: List[SkippedFile],
    ) -> Iterator[Tuple[os.DirEntry[str], str]]:
        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            if is_dir:
                if entry.name in IGNORED_DIRS or _should_ignore(rel_path, True, self._rules):
                    continue
                try:
                    children = _sorted_entries(Path(entry.path))
                except OSError as exc:
                    _logger.warning("Cannot read directory %s: %s", rel_path, exc.strerror or exc)
                    skipped.append(SkippedFile(path=rel_path, reason="unreadable directory"))
                    continue
                yield from self._iter_files(children, rel_path, skipped)
                continue

            if _suffix(entry.name) not in self._extensions:
                continue
            if _should_ignore(rel_path, False, self._rules):
                continue
            yield entry, rel_path

    def _read(
        self, entry: os.DirEntry[str], rel_path: str, skipped: List[SkippedFile]
    ) -> SourceFile | None:
        try:
            size = entry.stat().st_size
        except OSError as exc:
            return _skip(skipped, rel_path, f"unreadable ({exc.strerror or exc})")
        if size == 0:
            return _skip(skipped, rel_path, "empty file")
        if size > self.config.max_file_size:
            return _skip(skipped, rel_path, f"exceeds {self.config.max_file_size} bytes")
        try:
            with open(entry.path, "rb") as handle:
                content = _decode(handle.read())
        except UnicodeDecodeError:
            return _skip(skipped, rel_path, "not valid UTF-8 text")
        except OSError as exc:
            return _skip(skipped, rel_path, f"unreadable ({exc.strerror or exc})")
        return SourceFile(
            name=entry.name,
            path=rel_path,
            content=content,
            language=classify(_suffix(entry.name)),
            size=size,
        )


def _sorted_entries(directory: Path) -> List[os.DirEntry[str]]:
    with os.scandir(directory) as iterator:
        return sorted(iterator, key=lambda entry: entry.name)


def _skip(skipped: List[SkippedFile], rel_path: str, reason: str) -> None:
    _logger.warning("Skipping file %s: %s", rel_path, reason)
    skipped.append(SkippedFile(path=rel_path, reason=reason))
    return None


def materialize_files(
    records: Iterable[Tuple[str, str]], config: ScanConfig | None = None
) -> ScanResult:
    """Build source files from ``(path, content)`` pairs decoded elsewhere.

    Uploads arrive with whatever directory prefix the client used, so ignored
    directory names are matched against every path segment rather than only
    while walking.
    """
    config = config or ScanConfig()
    rules = build_ignore_rules(config.exclude_paths)
    extensions = _allowed_extensions(config.include_config_files)

    files: List[SourceFile] = []
    skipped: List[SkippedFile] = []
    for raw_path, content in records:
        rel_path = _normalise_upload_path(raw_path)
        if not rel_path:
            continue
        parts = rel_path.split("/")
        if any(part in IGNORED_DIRS for part in parts[:-1]):
            continue
        name = parts[-1]
        if _suffix(name) not in extensions or _should_ignore(rel_path, False, rules):
            continue
        size = len(content.encode("utf-8"))
        if size == 0:
            _skip(skipped, rel_path, "empty file")
            continue
        if size > config.max_file_size:
            _skip(skipped, rel_path, f"exceeds {config.max_file_size} bytes")
            continue
        files.append(
            SourceFile(
                name=name,
                path=rel_path,
                content=content,
                language=classify(_suffix(name)),
                size=size,
            )
        )
    return ScanResult(root=None, files=files, skipped=skipped)


def _normalise_upload_path(path: str) -> str:
    normalised = path.replace("\\", "/")
    while normalised.startswith("./"):
        normalised = normalised[2:]
    return normalised.strip("/")


def require_files(result: ScanResult) -> ScanResult:
    """Raise :class:`NoCodeFilesFoundError` when a scan produced nothing usable."""
    if result.files:
        return result
    if result.skipped:
        raise NoCodeFilesFoundError(
            f"No code files found: {len(result.skipped)} candidate file(s) were skipped "
            "(empty, too large, unreadable or binary). Check file permissions."
        )
    raise NoCodeFilesFoundError()


__all__ = [
    "CODE_EXTENSIONS",
    "CONFIG_EXTENSIONS",
    "IGNORED_DIRS",
    "IgnoreRule",
    "RepoScanner",
    "build_ignore_rules",
    "check_root",
    "materialize_files",
    "require_files",
]
