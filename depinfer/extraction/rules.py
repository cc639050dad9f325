"""Language-specific dependency extraction rules.

Each rule is a data record: a compiled pattern, the capture group holding the
type name, the kind and confidence it implies, the suffixes stripped to reach
the canonical service name, and the template used for evidence strings.

Every unbounded gap between an annotation and the declaration it decorates is
capped (``{0,200}``) and no quantifier is nested, so a hostile file cannot
trigger catastrophic backtracking.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Pattern, Tuple

from ..models import Confidence, SourceKind

_CLIENT_SUFFIXES = ("Client", "ServiceClient")


@dataclass(frozen=True)
class ExtractionRule:
    """One lexical idiom that names a downstream dependency."""

    name: str
    languages: FrozenSet[str]
    pattern: Pattern[str]
    source: SourceKind
    confidence: Confidence
    evidence_template: str
    strip_suffixes: Tuple[str, ...] = ("Client",)
    group: int = 1

    def evidence(self, filename: str, matched: str) -> str:
        return f"Found in {filename}: {self.evidence_template.format(match=matched)}"


def _rule(
    name: str,
    languages: Tuple[str, ...],
    pattern: str,
    source: SourceKind,
    confidence: Confidence,
    evidence_template: str,
    strip_suffixes: Tuple[str, ...] = ("Client",),
) -> ExtractionRule:
    return ExtractionRule(
        name=name,
        languages=frozenset(languages),
        pattern=re.compile(pattern),
        source=source,
        confidence=confidence,
        evidence_template=evidence_template,
        strip_suffixes=strip_suffixes,
    )


DEFAULT_RULES: Tuple[ExtractionRule, ...] = (
    # @Provides public XBTBookingMgmtServiceClient getClient()
    _rule(
        "java-provides",
        ("java",),
        r"@Provides[\s\S]{0,200}?public\s+(\w+(?:Client|Service|Lambda|Authority))\s+\w+",
        SourceKind.CLIENT_CLASS,
        Confidence.HIGH,
        "@Provides {match}",
        _CLIENT_SUFFIXES,
    ),
    # new ClientBuilder().remoteOf(XBTBookingMgmtServiceClient.class)
    _rule(
        "java-client-builder",
        ("java",),
        r"new\s+ClientBuilder\(\)[\s\S]{0,100}?\.remoteOf\((\w+)\.class\)",
        SourceKind.CLIENT_CLASS,
        Confidence.HIGH,
        "ClientBuilder.remoteOf({match})",
    ),
    _rule(
        "java-import",
        ("java",),
        r"\bimport\s+[\w.]+\.(\w+(?:Client|Service|Lambda|Authority|Resource))\s*;",
        SourceKind.IMPORT,
        Confidence.MEDIUM,
        "import {match}",
        _CLIENT_SUFFIXES + ("Resource",),
    ),
    # Spring configuration classes
    _rule(
        "java-bean",
        ("java",),
        r"@Bean\b[\s\S]{0,200}?public\s+(\w+(?:Client|Service))\s+\w+",
        SourceKind.DI,
        Confidence.HIGH,
        "@Bean {match}",
        _CLIENT_SUFFIXES,
    ),
    _rule(
        "java-autowired",
        ("java",),
        r"@Autowired\b[\s\S]{0,200}?private\s+(\w+(?:Client|Service))\s+\w+",
        SourceKind.DI,
        Confidence.MEDIUM,
        "@Autowired {match}",
        _CLIENT_SUFFIXES,
    ),
    # from billing.clients import BillingClient
    _rule(
        "python-import",
        ("python",),
        r"\bfrom\s+[\w.]+\s+import\s+(\w+(?:Client|Service))\b",
        SourceKind.IMPORT,
        Confidence.HIGH,
        "import {match}",
    ),
    # self.billing = BillingClient(...)
    _rule(
        "python-client-attribute",
        ("python",),
        r"\bself\.\w+\s*=\s*(\w+Client)\(",
        SourceKind.CLIENT_CLASS,
        Confidence.MEDIUM,
        "self.* = {match}()",
    ),
    # import { BillingClient } from "./billing"
    _rule(
        "js-import",
        ("typescript", "javascript"),
        r"\bimport\s+\{?\s*(\w+(?:Client|Service))\s*\}?\s+from\b",
        SourceKind.IMPORT,
        Confidence.HIGH,
        "import {match}",
    ),
)


def rules_by_language(rules: Tuple[ExtractionRule, ...] = DEFAULT_RULES) -> Dict[str, List[ExtractionRule]]:
    """Group rules by the language tags they apply to, keeping table order."""
    grouped: Dict[str, List[ExtractionRule]] = {}
    for rule in rules:
        for language in sorted(rule.languages):
            grouped.setdefault(language, []).append(rule)
    return grouped


__all__ = ["DEFAULT_RULES", "ExtractionRule", "rules_by_language"]
