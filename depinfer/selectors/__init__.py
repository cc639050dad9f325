"""Key-file selector implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set

from .base import KeyFileSelector
from .fallback import ModuleFallbackSelector
from .heuristic import HeuristicKeyFileSelector, score_file

_ENTRY_POINT_GROUP = "depinfer.selectors"

_BUILTIN_FACTORIES: dict[str, Callable[[], KeyFileSelector]] = {
    "heuristic": HeuristicKeyFileSelector,
    "module-fallback": ModuleFallbackSelector,
}


def discover_selectors(enabled: Sequence[str] | None = None) -> List[KeyFileSelector]:
    """Return instantiated selectors, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    selectors: List[KeyFileSelector] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], KeyFileSelector]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, KeyFileSelector):
            raise TypeError(f"Selector factory for '{name}' did not return a KeyFileSelector instance")
        selectors.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        if enabled_set is not None and name.lower() not in enabled_set:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - plugin import failure
            raise RuntimeError(f"Failed to load selector entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> KeyFileSelector:
            return _coerce_selector(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown selectors requested: {missing}")

    return selectors


def get_selector(name: str, *, top_n: int | None = None) -> KeyFileSelector:
    """Return a single selector by name, applying ``top_n`` to the heuristic scorer."""
    key = name.strip().lower()
    if key == "heuristic" and top_n is not None:
        return HeuristicKeyFileSelector(top_n=top_n)
    return discover_selectors([key])[0]


def _coerce_selector(obj: object) -> KeyFileSelector:
    if isinstance(obj, KeyFileSelector):
        return obj
    if isinstance(obj, type) and issubclass(obj, KeyFileSelector):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, KeyFileSelector):
            return instance
    raise TypeError("Selector entry point must be a KeyFileSelector subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "HeuristicKeyFileSelector",
    "KeyFileSelector",
    "ModuleFallbackSelector",
    "discover_selectors",
    "get_selector",
    "score_file",
]
