"""Merges candidates into the final, ordered dependency list."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .naming import canonicalize
from ..logging import get_logger
from ..models import Dependency, DependencyCandidate

_logger = get_logger("resolver")


def resolve(candidates: Iterable[DependencyCandidate]) -> List[Dependency]:
    """Canonicalize, validate and deduplicate candidates.

    The first candidate seen with the highest confidence wins for each name;
    the result is sorted by code-point order of the canonical name.
    """
    best: Dict[str, Dependency] = {}
    for candidate in candidates:
        name = canonicalize(candidate.service_name, candidate.strip_suffixes)
        if name is None:
            _logger.debug("Discarding candidate %s (%s)", candidate.service_name, candidate.evidence)
            continue
        existing = best.get(name)
        if existing is not None and existing.confidence >= candidate.confidence:
            continue
        best[name] = Dependency(
            service_name=name,
            source=candidate.source,
            confidence=candidate.confidence,
            evidence=candidate.evidence,
        )
    return [best[name] for name in sorted(best)]
