"""Pipeline orchestration shared by the CLI and the HTTP service."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import DepInferConfig, load_config
from .errors import InvalidRootError
from .extraction import PatternExtractor, resolve
from .language import detect_primary_language
from .logging import get_logger
from .models import (
    AnalysisOutcome,
    DiagnosticEvent,
    ScanResult,
    ServiceAnalysis,
    SourceFile,
)
from .repo_scanner import RepoScanner, check_root, materialize_files, require_files
from .selectors import KeyFileSelector, get_selector
from .service_name import infer_service_name


class DependencyEngine:
    """Coordinates walker, selector, extractor and resolver for one run.

    The engine keeps no state between runs; diagnostics for a run are
    returned on the :class:`AnalysisOutcome` as well as logged.
    """

    def __init__(
        self,
        config: DepInferConfig | None = None,
        *,
        selector: KeyFileSelector | None = None,
        selector_name: str | None = None,
        extractor: PatternExtractor | None = None,
    ) -> None:
        self.config = config
        self._selector = selector
        self.selector_name = selector_name
        self._extractor = extractor
        self.logger = get_logger("engine")

    def analyze_path(
        self,
        root: str | os.PathLike[str],
        *,
        service_name: str | None = None,
    ) -> AnalysisOutcome:
        """Scan ``root`` and analyse the files found there."""
        root_path = check_root(root)
        config = self.config or self._load_config(root_path)
        events: List[DiagnosticEvent] = []
        self._emit(events, "info", f"Scanning {root_path}")

        scan = RepoScanner(config.scan).scan(root_path)
        return self._run(scan, config, events, service_name=service_name)

    def analyze_files(
        self,
        files: Iterable[SourceFile] | Iterable[Tuple[str, str]],
        *,
        service_name: str | None = None,
    ) -> AnalysisOutcome:
        """Analyse pre-materialized files, either SourceFile records or ``(path, content)`` pairs."""
        config = self.config or DepInferConfig(root=Path.cwd())
        events: List[DiagnosticEvent] = []
        records = list(files)
        sources = [record for record in records if isinstance(record, SourceFile)]
        if len(sources) == len(records):
            scan = ScanResult(root=None, files=sources)
        elif sources:
            raise ValueError(
                "analyze_files expects either SourceFile records or (path, content) pairs, not both"
            )
        else:
            scan = materialize_files(records, config.scan)  # type: ignore[arg-type]
        self._emit(events, "info", f"Received {len(records)} uploaded file(s)")
        return self._run(scan, config, events, service_name=service_name)

    def _run(
        self,
        scan: ScanResult,
        config: DepInferConfig,
        events: List[DiagnosticEvent],
        *,
        service_name: str | None,
    ) -> AnalysisOutcome:
        for skipped in scan.skipped:
            self._emit(events, "warning", f"Skipped {skipped.path}: {skipped.reason}", log=False)
        require_files(scan)
        files = scan.files
        self._emit(events, "info", f"Found {len(files)} code file(s)")

        name = service_name or config.service_name or infer_service_name(files)
        primary_language = detect_primary_language(files)
        self._emit(events, "debug", f"Service name: {name}; primary language: {primary_language}")

        selector = self._selector or get_selector(
            self.selector_name or config.selection.selector, top_n=config.selection.top_n
        )
        key_files = selector.select(files)
        self._emit(events, "info", f"Selected {len(key_files)} key file(s) for extraction")

        extractor = self._extractor or PatternExtractor(max_workers=config.extraction.max_workers)
        candidates = extractor.extract(key_files)
        self._emit(events, "debug", f"Extracted {len(candidates)} candidate(s)")

        dependencies = resolve(candidates)
        self._emit(events, "info", f"Resolved {len(dependencies)} unique dependencies")

        return AnalysisOutcome(
            analysis=ServiceAnalysis(service_name=name, dependencies=tuple(dependencies)),
            files_scanned=len(files),
            key_files=[file.path for file in key_files],
            primary_language=primary_language,
            skipped=list(scan.skipped),
            events=events,
        )

    def _load_config(self, root: Path) -> DepInferConfig:
        try:
            return load_config(root)
        except OSError as exc:
            # listable but not searchable roots fail on the config lookup
            raise InvalidRootError(f"Cannot read directory {root}: {exc.strerror or exc}") from exc

    def _emit(
        self,
        events: List[DiagnosticEvent],
        level: str,
        message: str,
        *,
        log: bool = True,
    ) -> None:
        events.append(DiagnosticEvent(level=level, message=message))
        if log:
            self.logger.log(_LEVELS.get(level, logging.INFO), message)


_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def analyze_path(
    root: str | os.PathLike[str],
    *,
    config: DepInferConfig | None = None,
    selector: KeyFileSelector | None = None,
    service_name: str | None = None,
) -> AnalysisOutcome:
    """Run the full pipeline over a directory tree."""
    return DependencyEngine(config, selector=selector).analyze_path(root, service_name=service_name)


def analyze_files(
    files: Sequence[SourceFile] | Sequence[Tuple[str, str]],
    *,
    config: DepInferConfig | None = None,
    selector: KeyFileSelector | None = None,
    service_name: Optional[str] = None,
) -> AnalysisOutcome:
    """Run the pipeline from the selector onward over pre-materialized files."""
    return DependencyEngine(config, selector=selector).analyze_files(files, service_name=service_name)


__all__ = ["DependencyEngine", "analyze_files", "analyze_path"]
