"""Tests for depinfer.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from depinfer.config import (
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_SELECTOR,
    DEFAULT_TOP_N,
    ConfigError,
    DepInferConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, DepInferConfig)
    assert config.root == tmp_path.resolve()
    assert config.service_name is None
    assert config.scan.exclude_paths == []
    assert config.scan.include_config_files is False
    assert config.scan.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert config.selection.selector == DEFAULT_SELECTOR
    assert config.selection.top_n == DEFAULT_TOP_N
    assert config.extraction.max_workers == 1


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".depinfer.yml"
    config_file.write_text(
        """
service_name: "  CheckoutService  "
scan:
  exclude_paths:
    - "generated/"
    - "/legacy"
  include_config_files: yes
  max_file_size: 2048
selection:
  selector: " Module-Fallback "
  top_n: 5
extraction:
  max_workers: 4
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.service_name == "CheckoutService"
    assert config.scan.exclude_paths == ["generated/", "/legacy"]
    assert config.scan.include_config_files is True
    assert config.scan.max_file_size == 2048
    assert config.selection.selector == "module-fallback"
    assert config.selection.top_n == 5
    assert config.extraction.max_workers == 4


def test_load_config_ignores_non_positive_numbers(tmp_path: Path) -> None:
    (tmp_path / ".depinfer.yml").write_text(
        """
scan:
  max_file_size: 0
selection:
  top_n: -3
extraction:
  max_workers: "many"
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.scan.max_file_size == DEFAULT_MAX_FILE_SIZE
    assert config.selection.top_n == DEFAULT_TOP_N
    assert config.extraction.max_workers == 1


def test_load_config_accepts_single_exclude_string(tmp_path: Path) -> None:
    (tmp_path / ".depinfer.yml").write_text(
        "scan:\n  exclude_paths: vendor/\n", encoding="utf-8"
    )

    config = load_config(tmp_path)

    assert config.scan.exclude_paths == ["vendor/"]


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".depinfer.yml").write_text("\n# nothing here\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.selection.selector == DEFAULT_SELECTOR


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".depinfer.yml").write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_load_config_reports_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".depinfer.yml").write_text("scan: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
