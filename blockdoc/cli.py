"""CLI entrypoints for blockdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analysis import block_kind_counts
from .config import ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .pipeline import EmptyInputError, ExportResult
from .prompting.constants import DIAGRAM_TITLES, DIAGRAM_TYPES, EXPORT_FORMATS, FORMAT_TITLES


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockdoc",
        description="Extract code blocks from a project and export documentation.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--no-llm",
        action="store_true",
        help="Skip the text generator and use deterministic descriptions.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Extract, describe and group code blocks for a project.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)

    export_parser = subparsers.add_parser(
        "export",
        help="Render previously generated documentation into export formats.",
    )
    _add_verbose_option(export_parser, suppress_default=True)
    _add_path_argument(export_parser)
    export_parser.add_argument(
        "-f",
        "--format",
        dest="formats",
        action="append",
        choices=EXPORT_FORMATS,
        default=[],
        help="Export format to render (repeatable).",
    )
    export_parser.add_argument(
        "--all-formats",
        action="store_true",
        help="Render every supported export format.",
    )
    export_parser.add_argument(
        "-d",
        "--diagram",
        dest="diagrams",
        action="append",
        choices=DIAGRAM_TYPES,
        default=[],
        help="Diagram description to render (repeatable).",
    )
    export_parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for exported files (defaults to .blockdoc/exports).",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Summarize project size, stack and complexity.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_path_argument(analyze_parser)

    formats_parser = subparsers.add_parser(
        "formats",
        help="List supported export formats and diagram types.",
    )
    _add_verbose_option(formats_parser, suppress_default=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for blockdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "formats":
        _print_formats()
        return
    if args.command == "serve":  # pragma: no cover - integration path
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
        return

    orchestrator = Orchestrator(use_llm=not args.no_llm)

    if args.command == "generate":
        try:
            result = orchestrator.run_generate(args.path)
        except (FileNotFoundError, NotADirectoryError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except Exception as exc:  # pragma: no cover - unexpected failure
            parser.exit(1, f"blockdoc generate failed: {exc}\nRun with --verbose for more details.\n")
        counts = ", ".join(
            f"{count} {kind}" for kind, count in block_kind_counts(result.blocks).items()
        )
        print(f"Extracted {len(result.blocks)} code blocks in {len(result.sections)} sections")
        if counts:
            print(f"  {counts}")
        for path, error in result.file_errors.items():
            print(f"  failed: {path}: {error}")
    elif args.command == "export":
        formats = list(EXPORT_FORMATS) if args.all_formats else args.formats
        try:
            outcome = orchestrator.run_export(
                args.path,
                formats,
                args.diagrams,
                output_dir=args.output_dir,
                progress=_print_progress,
            )
        except (EmptyInputError, FileNotFoundError, ConfigError, ValueError) as exc:
            parser.exit(1, f"{exc}\n")
        except Exception as exc:  # pragma: no cover - unexpected failure
            parser.exit(1, f"blockdoc export failed: {exc}\nRun with --verbose for more details.\n")
        report = outcome.report
        print(f"Exported {len(report.succeeded)} of {len(report.results)} artifacts")
        for destination in outcome.written:
            print(f"  {_relativize(destination)}")
        if report.failed:
            parser.exit(1, "Some exports failed; see messages above.\n")
    elif args.command == "analyze":
        try:
            analysis = orchestrator.run_analyze(args.path)
        except (FileNotFoundError, NotADirectoryError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        print(analysis.summary)
        print(f"Architecture: {analysis.architecture}")
        print(f"Complexity: {analysis.complexity}")
        print(f"Estimated tokens: {analysis.token_usage}")
        if analysis.dependencies:
            print(f"Dependency manifests: {', '.join(analysis.dependencies)}")
        for extension, count in analysis.file_types[:6]:
            print(f"  {extension}: {count}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _print_formats() -> None:
    print("Export formats:")
    for format_id in EXPORT_FORMATS:
        print(f"  {format_id:<22} {FORMAT_TITLES[format_id]}")
    print("Diagram types:")
    for diagram_id in DIAGRAM_TYPES:
        print(f"  {diagram_id:<22} {DIAGRAM_TITLES[diagram_id]}")


def _print_progress(result: ExportResult, completed: int, total: int) -> None:
    status = "ok" if result.ok else f"failed ({result.error})"
    print(f"[{completed}/{total}] {result.format_id}: {status}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
