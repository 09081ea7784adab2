"""CLI entrypoints for mdxdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .loader import GraphLoadError, load_project
from .logging import configure_logging
from .pipeline import RenderPipeline
from .writer import DocumentWriter

DEFAULT_OUTPUT_DIR = Path("docs")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdxdoc",
        description="Render TypeDoc declaration graphs into MDX reference pages.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    render_parser = subparsers.add_parser(
        "render",
        help="Render detail pages, the overview and navigation from a TypeDoc JSON file.",
    )
    _add_verbose_option(render_parser, suppress_default=True)
    render_parser.add_argument("project", help="Path to the TypeDoc JSON output.")
    render_parser.add_argument(
        "--config",
        default=None,
        help="Path to .mdxdoc.yml or the directory holding it (defaults to current directory).",
    )
    render_parser.add_argument(
        "--output",
        default=None,
        help="Documentation root to write into (defaults to output.directory or ./docs).",
    )
    render_parser.add_argument(
        "--no-navigation",
        action="store_true",
        help="Skip writing mint.json.",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP render service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for mdxdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "render":
        try:
            config = load_config(Path(args.config) if args.config else Path.cwd())
            root = load_project(args.project)
        except (ConfigError, GraphLoadError) as exc:
            parser.exit(1, f"{exc}\n")
        if args.no_navigation:
            config.output.navigation = False
        output_dir = Path(args.output) if args.output else (config.output.directory or DEFAULT_OUTPUT_DIR)
        try:
            result = RenderPipeline(config).run(root)
            written = DocumentWriter(config.output).write(result, output_dir)
        except OSError as exc:
            parser.exit(1, f"mdxdoc render failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Rendered {len(result.pages)} page(s) into {_relativize(output_dir)} ({len(written)} file(s))")
    elif args.command == "serve":
        from .service.app import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
