"""Configuration loading for depinfer (.depinfer.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import DepInferError

CONFIG_FILENAME = ".depinfer.yml"

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024
DEFAULT_TOP_N = 15
DEFAULT_SELECTOR = "heuristic"


class ConfigError(DepInferError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ScanConfig:
    """Walker filters layered on top of the built-in ignore set."""

    exclude_paths: List[str] = field(default_factory=list)
    include_config_files: bool = False
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


@dataclass
class SelectionConfig:
    """Key-file selection strategy."""

    selector: str = DEFAULT_SELECTOR
    top_n: int = DEFAULT_TOP_N


@dataclass
class ExtractionConfig:
    """Pattern extraction settings."""

    max_workers: int = 1


@dataclass
class DepInferConfig:
    """Represents the settings defined in .depinfer.yml."""

    root: Path
    service_name: Optional[str] = None
    scan: ScanConfig = field(default_factory=ScanConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)


def load_config(config_path: Path) -> DepInferConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DepInferConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    if scan_data:
        scan.exclude_paths = _as_str_list(scan_data.get("exclude_paths"))
        scan.include_config_files = bool(_as_bool(scan_data.get("include_config_files")))
        max_size = _as_int(scan_data.get("max_file_size"))
        if max_size is not None and max_size > 0:
            scan.max_file_size = max_size

    selection = SelectionConfig()
    selection_data = _as_dict(data.get("selection"))
    if selection_data:
        selector = _as_str(selection_data.get("selector"))
        if selector:
            selection.selector = selector.strip().lower()
        top_n = _as_int(selection_data.get("top_n"))
        if top_n is not None and top_n > 0:
            selection.top_n = top_n

    extraction = ExtractionConfig()
    extraction_data = _as_dict(data.get("extraction"))
    if extraction_data:
        workers = _as_int(extraction_data.get("max_workers"))
        if workers is not None and workers > 0:
            extraction.max_workers = workers

    service_name = _as_str(data.get("service_name"))

    return DepInferConfig(
        root=root,
        service_name=service_name.strip() if service_name and service_name.strip() else None,
        scan=scan,
        selection=selection,
        extraction=extraction,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
