"""Core data models shared across depinfer components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple


class Confidence(IntEnum):
    """Ordered certainty of an extracted dependency."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class SourceKind(str, Enum):
    """Idiom a dependency candidate was extracted from."""

    CLIENT_CLASS = "client_class"
    CONFIG = "config"
    IMPORT = "import"
    DI = "di"


@dataclass(frozen=True)
class SourceFile:
    """A decoded text file handed to the analysis pipeline."""

    name: str
    path: str
    content: str
    language: str
    size: int


@dataclass(frozen=True)
class SkippedFile:
    """A file the walker rejected, with the reason it was left out."""

    path: str
    reason: str


@dataclass
class ScanResult:
    """Files collected from a repository root or an upload."""

    root: Optional[str]
    files: List[SourceFile]
    skipped: List[SkippedFile] = field(default_factory=list)


@dataclass(frozen=True)
class DependencyCandidate:
    """Raw match produced by one extraction rule in one file.

    ``strip_suffixes`` carries the producing rule's suffix list so the
    resolver can derive the canonical name later.
    """

    service_name: str
    source: SourceKind
    confidence: Confidence
    evidence: str
    strip_suffixes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Dependency:
    """Resolved dependency keyed by its canonical service name."""

    service_name: str
    source: SourceKind
    confidence: Confidence
    evidence: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "serviceName": self.service_name,
            "source": self.source.value,
            "confidence": self.confidence.label,
            "evidence": self.evidence,
        }


@dataclass(frozen=True)
class ServiceAnalysis:
    """Final result of a single analysis run."""

    service_name: str
    dependencies: Tuple[Dependency, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serviceName": self.service_name,
            "dependencies": [dependency.to_dict() for dependency in self.dependencies],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class DiagnosticEvent:
    """Message recorded while a run progressed."""

    level: str
    message: str


@dataclass
class AnalysisOutcome:
    """Everything a caller may want to display after an analysis run."""

    analysis: ServiceAnalysis
    files_scanned: int
    key_files: List[str]
    primary_language: str
    skipped: List[SkippedFile] = field(default_factory=list)
    events: List[DiagnosticEvent] = field(default_factory=list)
