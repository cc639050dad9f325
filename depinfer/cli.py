"""CLI entrypoints for depinfer commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .engine import DependencyEngine
from .errors import InvalidRootError, NoCodeFilesFoundError
from .formatter import format_context
from .logging import configure_logging
from .models import AnalysisOutcome

EXIT_INTERNAL_ERROR = 1
EXIT_INVALID_ROOT = 2
EXIT_NO_CODE_FILES = 3

_RULE = "━" * 40


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Show dependency sources and evidence, and debug logging.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depinfer",
        description="Infer downstream service dependencies from a local codebase.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Scan a codebase and list the services it depends on.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "-p",
        "--path",
        default=".",
        help="Path to the codebase root (defaults to current directory).",
    )
    analyze_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the analysis as JSON to this file.",
    )
    analyze_parser.add_argument(
        "--service-name",
        default=None,
        help="Use this service name instead of inferring it from the file layout.",
    )
    analyze_parser.add_argument(
        "--selector",
        default=None,
        help="Key-file selector to use (heuristic, module-fallback or a plugin name).",
    )
    analyze_parser.add_argument(
        "--no-diagram",
        action="store_true",
        help="Omit the diagram requirements section from the printed context.",
    )
    analyze_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug logs to this file.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP analysis service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for depinfer commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    verbose = bool(getattr(args, "verbose", False))
    log_file = getattr(args, "log_file", None)
    configure_logging(verbose=verbose, log_file=Path(log_file) if log_file else None)

    if args.command == "analyze":
        _run_analyze(parser, args, verbose=verbose)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(EXIT_INTERNAL_ERROR, "Unknown command\n")


def _run_analyze(parser: argparse.ArgumentParser, args: argparse.Namespace, *, verbose: bool) -> None:
    print("🔍 Scanning codebase...")
    print(f"📁 Directory: {args.path}")

    try:
        engine = DependencyEngine(selector_name=args.selector)
        outcome = engine.analyze_path(args.path, service_name=args.service_name)
    except InvalidRootError as exc:
        parser.exit(EXIT_INVALID_ROOT, f"❌ Path problem: {exc}\n")
    except NoCodeFilesFoundError as exc:
        parser.exit(EXIT_NO_CODE_FILES, f"❌ {exc}\n")
    except (ConfigError, ValueError) as exc:
        parser.exit(EXIT_INTERNAL_ERROR, f"❌ Analysis failed: {exc}\n")
    except Exception as exc:  # pragma: no cover - last-resort guard
        parser.exit(
            EXIT_INTERNAL_ERROR,
            f"❌ Internal error: {exc}\nRun with --verbose for more details.\n",
        )

    _print_summary(outcome, verbose=verbose)

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(outcome.analysis.to_json() + "\n", encoding="utf-8")
        except OSError as exc:
            parser.exit(EXIT_INTERNAL_ERROR, f"❌ Cannot write {output_path}: {exc}\n")
        print(f"\n✅ Analysis results saved to: {_relativize(output_path)}")

    print("\n📝 Use the following prompt to generate the diagram:")
    print(_RULE)
    print(format_context(outcome.analysis, diagram=not args.no_diagram), end="")
    print(_RULE)


def _print_summary(outcome: AnalysisOutcome, *, verbose: bool) -> None:
    analysis = outcome.analysis
    print(f"✅ Found {outcome.files_scanned} code files")
    if outcome.skipped:
        print(f"⚠️  Skipped {len(outcome.skipped)} file(s)")
    print("\n📊 Analysis results:")
    print(f"   Service name: {analysis.service_name}")
    print(f"   Dependencies count: {len(analysis.dependencies)}")
    if verbose:
        print(f"   Primary language: {outcome.primary_language}")
        print(f"   Key files: {', '.join(outcome.key_files) or '(none)'}")

    if not analysis.dependencies:
        print("   ⚠️  No dependencies found (may need more config files)")
        return

    print("\n📦 Dependencies list:")
    for index, dependency in enumerate(analysis.dependencies, start=1):
        print(f"   {index}. {dependency.service_name} ({dependency.confidence.label})")
        if verbose:
            print(f"      Source: {dependency.source.value}")
            print(f"      Evidence: {dependency.evidence}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
