"""Render a ServiceAnalysis into the text handed to diagram generation."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .models import ServiceAnalysis

_TEMPLATE_NAME = "dependency_context.md.j2"


def _create_env(templates_dir: Path | None = None) -> Environment:
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


class ContextFormatter:
    """Renders the dependency report from a Jinja2 template."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = _create_env(templates_dir)

    def format(self, analysis: ServiceAnalysis, *, diagram: bool = True) -> str:
        template = self._env.get_template(_TEMPLATE_NAME)
        rendered = template.render(
            service_name=analysis.service_name,
            dependencies=analysis.dependencies,
            diagram=diagram,
        )
        return rendered.strip() + "\n"


def format_context(analysis: ServiceAnalysis, *, diagram: bool = True) -> str:
    """Render ``analysis`` with the bundled template."""
    return ContextFormatter().format(analysis, diagram=diagram)


__all__ = ["ContextFormatter", "format_context"]
