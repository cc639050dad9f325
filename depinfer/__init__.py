"""Rule-based inference of service dependencies from source trees."""

from .engine import DependencyEngine, analyze_files, analyze_path
from .errors import DepInferError, InvalidRootError, NoCodeFilesFoundError
from .formatter import format_context
from .models import (
    AnalysisOutcome,
    Confidence,
    Dependency,
    DependencyCandidate,
    ServiceAnalysis,
    SourceFile,
    SourceKind,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisOutcome",
    "Confidence",
    "DepInferError",
    "Dependency",
    "DependencyCandidate",
    "DependencyEngine",
    "InvalidRootError",
    "NoCodeFilesFoundError",
    "ServiceAnalysis",
    "SourceFile",
    "SourceKind",
    "analyze_files",
    "analyze_path",
    "format_context",
]
