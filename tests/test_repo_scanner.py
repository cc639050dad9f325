"""Tests for depinfer.repo_scanner."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from depinfer.config import ScanConfig
from depinfer.errors import InvalidRootError, NoCodeFilesFoundError
from depinfer.repo_scanner import RepoScanner, check_root, materialize_files, require_files


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_scan_collects_source_files_with_language(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "src" / "app.py", "print('hi')\n")
    _write(repo_root / "src" / "Main.java", "class Main {}\n")
    _write(repo_root / "web" / "index.tsx", "export {}\n")
    _write(repo_root / "README.md", "# Readme\n")

    result = RepoScanner().scan(str(repo_root))

    assert result.root == str(repo_root.resolve())
    files = {file.path: file for file in result.files}
    assert set(files) == {"src/Main.java", "src/app.py", "web/index.tsx"}
    assert files["src/app.py"].language == "python"
    assert files["src/app.py"].name == "app.py"
    assert files["src/app.py"].content == "print('hi')\n"
    assert files["src/app.py"].size == len("print('hi')\n")
    assert files["src/Main.java"].language == "java"
    assert files["web/index.tsx"].language == "typescript"


def test_scan_visits_entries_in_name_order(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "b.py", "b = 1\n")
    _write(repo_root / "a" / "z.py", "z = 1\n")
    _write(repo_root / "a" / "m.py", "m = 1\n")
    _write(repo_root / "c" / "x.py", "x = 1\n")

    paths = [file.path for file in RepoScanner().scan(str(repo_root)).files]

    assert paths == ["a/m.py", "a/z.py", "b.py", "c/x.py"]


def test_scan_skips_ignored_directories(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "src" / "ClientModule.java", "import a.b.BillingClient;\n")
    for ignored in ("node_modules", ".git", "build", "target", "out", "venv", ".gradle"):
        _write(repo_root / ignored / "pkg" / "Leaked.java", "import a.b.LeakedClient;\n")

    paths = {file.path for file in RepoScanner().scan(str(repo_root)).files}

    assert paths == {"src/ClientModule.java"}


def test_scan_skips_empty_and_oversized_files(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "keep.py", "x = 1\n")
    _write(repo_root / "empty.py", "")
    _write(repo_root / "huge.py", "x" * 64)

    result = RepoScanner(ScanConfig(max_file_size=32)).scan(str(repo_root))

    assert [file.path for file in result.files] == ["keep.py"]
    reasons = {skipped.path: skipped.reason for skipped in result.skipped}
    assert reasons["empty.py"] == "empty file"
    assert "exceeds" in reasons["huge.py"]


def test_scan_skips_binary_and_undecodable_files(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "ok.py", "x = 1\n")
    (repo_root / "blob.java").write_bytes(b"\x00\x01\x02binary")
    (repo_root / "latin.py").write_bytes("caf\xe9 = 1\n".encode("latin-1"))

    result = RepoScanner().scan(str(repo_root))

    assert [file.path for file in result.files] == ["ok.py"]
    assert {skipped.path for skipped in result.skipped} == {"blob.java", "latin.py"}


@pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="permission bits are not enforced",
)
def test_scan_skips_unreadable_file(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "ok.py", "x = 1\n")
    secret = repo_root / "secret.py"
    _write(secret, "y = 2\n")
    secret.chmod(0)
    try:
        result = RepoScanner().scan(str(repo_root))
    finally:
        secret.chmod(0o644)

    assert [file.path for file in result.files] == ["ok.py"]
    assert result.skipped[0].path == "secret.py"


def test_scan_includes_config_files_only_when_enabled(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "app.py", "x = 1\n")
    _write(repo_root / "settings.yml", "a: 1\n")

    default_paths = {file.path for file in RepoScanner().scan(str(repo_root)).files}
    extended = RepoScanner(ScanConfig(include_config_files=True)).scan(str(repo_root))

    assert default_paths == {"app.py"}
    assert {file.path for file in extended.files} == {"app.py", "settings.yml"}
    assert {file.language for file in extended.files} == {"python", "text"}


def test_scan_respects_exclude_paths(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "src" / "main.py", "x = 1\n")
    _write(repo_root / "generated" / "stub.py", "y = 1\n")
    _write(repo_root / "src" / "schema_pb2.py", "z = 1\n")

    config = ScanConfig(exclude_paths=["generated/", "*_pb2.py"])
    paths = {file.path for file in RepoScanner(config).scan(str(repo_root)).files}

    assert paths == {"src/main.py"}


def test_scan_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    with pytest.raises(InvalidRootError) as excinfo:
        RepoScanner().scan(str(missing))
    assert str(missing) in str(excinfo.value)


def test_scan_rejects_file_root(tmp_path: Path) -> None:
    target = tmp_path / "file.py"
    _write(target, "x = 1\n")
    with pytest.raises(InvalidRootError):
        RepoScanner().scan(str(target))


def test_require_files_raises_when_nothing_qualifies(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "notes.txt", "hello\n")
    _write(repo_root / "empty.py", "")

    result = RepoScanner().scan(str(repo_root))

    assert result.files == []
    with pytest.raises(NoCodeFilesFoundError) as excinfo:
        require_files(result)
    assert "skipped" in str(excinfo.value)


def test_materialize_files_applies_upload_filters() -> None:
    result = materialize_files(
        [
            ("MyService\\src\\ClientModule.java", "import a.b.BillingClient;\n"),
            ("MyService/node_modules/lib/index.js", "import { XClient } from 'x'\n"),
            ("MyService/docs/readme.md", "# docs\n"),
            ("MyService/src/empty.py", ""),
            ("./MyService/src/app.py", "x = 1\n"),
        ]
    )

    assert [file.path for file in result.files] == [
        "MyService/src/ClientModule.java",
        "MyService/src/app.py",
    ]
    assert result.files[0].name == "ClientModule.java"
    assert result.files[0].language == "java"
    assert result.root is None
    assert [skipped.path for skipped in result.skipped] == ["MyService/src/empty.py"]


def test_materialize_files_measures_size_in_utf8_bytes() -> None:
    result = materialize_files([("svc/naïve.py", "é = 1\n")])

    assert result.files[0].size == len("é = 1\n".encode("utf-8"))


@pytest.mark.skipif(
    sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
    reason="permission bits are not enforced",
)
def test_check_root_rejects_unreadable_directory(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _write(repo_root / "ok.py", "x = 1\n")
    repo_root.chmod(0)
    try:
        with pytest.raises(InvalidRootError, match="Cannot read directory"):
            check_root(repo_root)
    finally:
        repo_root.chmod(0o755)


def test_check_root_returns_resolved_directory(tmp_path: Path) -> None:
    (tmp_path / "repo").mkdir()

    assert check_root(tmp_path / "repo" / ".." / "repo") == (tmp_path / "repo").resolve()
