"""Applies extraction rules to key files."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Sequence, Tuple

from .rules import DEFAULT_RULES, ExtractionRule, rules_by_language
from ..logging import get_logger
from ..models import DependencyCandidate, SourceFile

_logger = get_logger("extraction")


def apply_rule(rule: ExtractionRule, file: SourceFile) -> List[DependencyCandidate]:
    """Return one candidate per occurrence of ``rule`` in ``file``."""
    candidates: List[DependencyCandidate] = []
    for match in rule.pattern.finditer(file.content):
        raw = match.group(rule.group)
        candidates.append(
            DependencyCandidate(
                service_name=raw,
                source=rule.source,
                confidence=rule.confidence,
                evidence=rule.evidence(file.name, raw),
                strip_suffixes=rule.strip_suffixes,
            )
        )
    return candidates


class PatternExtractor:
    """Runs the language-specific rule table over whole file contents.

    Candidates come back in file order, then rule order, then match order,
    whether or not extraction is spread across worker threads.
    """

    def __init__(
        self,
        rules: Sequence[ExtractionRule] = DEFAULT_RULES,
        *,
        max_workers: int = 1,
    ) -> None:
        self._rules: Dict[str, List[ExtractionRule]] = rules_by_language(tuple(rules))
        self.max_workers = max(1, max_workers)

    def extract_file(self, file: SourceFile) -> List[DependencyCandidate]:
        candidates: List[DependencyCandidate] = []
        for rule in self._rules.get(file.language, []):
            found = apply_rule(rule, file)
            if found:
                _logger.debug("%s matched %d time(s) in %s", rule.name, len(found), file.path)
            candidates.extend(found)
        return candidates

    def extract(self, files: Sequence[SourceFile]) -> List[DependencyCandidate]:
        if self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                per_file: List[List[DependencyCandidate]] = list(
                    executor.map(self.extract_file, files)
                )
        else:
            per_file = [self.extract_file(file) for file in files]

        candidates: List[DependencyCandidate] = []
        for found in per_file:
            candidates.extend(found)
        return candidates

    def languages(self) -> Tuple[str, ...]:
        return tuple(sorted(self._rules))
