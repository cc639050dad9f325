"""Dependency extraction: rule table, matching, naming and resolution."""

from .extractor import PatternExtractor, apply_rule
from .naming import canonicalize, is_valid_service_name, normalize
from .resolver import resolve
from .rules import DEFAULT_RULES, ExtractionRule, rules_by_language

__all__ = [
    "DEFAULT_RULES",
    "ExtractionRule",
    "PatternExtractor",
    "apply_rule",
    "canonicalize",
    "is_valid_service_name",
    "normalize",
    "resolve",
    "rules_by_language",
]
