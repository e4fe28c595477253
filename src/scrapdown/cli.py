"""CLI for scrapdown - convert Scrapbox-style notes to Markdown."""

import argparse
import json
import logging
import platform
import sys
from pathlib import Path
from typing import Any

import yaml

from . import __version__
from .core.serialize import page_to_dict
from .locate import locate_inputs, output_path_for
from .runtime import Runtime, build_runtime

logger = logging.getLogger(__name__)


def cmd_convert(args: argparse.Namespace, rt: Runtime) -> int:
    """Convert a document, or every document in a directory."""
    inputs = locate_inputs(args.path, rt.config.input.glob)

    if args.path.is_dir():
        if args.out is None:
            print("Error: --out is required when converting a directory", file=sys.stderr)
            return 1
        for src in inputs:
            dest = output_path_for(src, args.path, args.out)
            rt.convert_file(src, dest)
            if not args.quiet:
                print(dest)
        return 0

    src = inputs[0]
    if args.out is None:
        sys.stdout.write(rt.convert(src.read_text(encoding="utf-8")))
    else:
        rt.convert_file(src, args.out)
        if not args.quiet:
            print(args.out)
    return 0


def cmd_tree(args: argparse.Namespace, rt: Runtime) -> int:
    """Dump the parsed structure of a document."""
    if args.path.is_dir():
        print("Error: tree expects a single document, not a directory", file=sys.stderr)
        return 1
    src = locate_inputs(args.path)[0]

    page = rt.parse(src.read_text(encoding="utf-8"))
    data = page_to_dict(page)

    if args.format == "yaml":
        sys.stdout.write(yaml.safe_dump(data, sort_keys=False, allow_unicode=True))
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def cmd_watch(args: argparse.Namespace, rt: Runtime) -> int:
    """Watch a directory and re-convert documents on change."""
    from .watch import watch_directory

    return watch_directory(
        src_dir=args.path,
        out_dir=args.out,
        runtime=rt,
        debounce_ms=args.debounce_ms,
        quiet=args.quiet,
        json_output=args.json,
    )


def cmd_serve(args: argparse.Namespace, rt: Runtime) -> int:
    """Start local JSON API server."""
    import uvicorn

    from .api.app import create_app, generate_token

    # Determine token
    token_arg = getattr(args, 'token', 'auto')
    token = None

    if token_arg == 'auto':
        token = generate_token()
        print(f"Generated bearer token: {token}")
        print(f"Use in requests: Authorization: Bearer {token}")
    elif token_arg == 'none':
        print("Warning: Running without authentication. Only use in trusted environments.")
        token = None
    else:
        token = token_arg

    app = create_app(rt, token=token, enable_cors=args.cors)

    print(f"Starting server on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")

    return 0


def version_string() -> str:
    return (
        f"scrapdown {__version__}\n"
        f"python {platform.python_version()}\n"
        f"platform {platform.platform()}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scrapdown", description="Convert Scrapbox-style notes to Markdown"
    )
    parser.add_argument(
        "--version", action="version", version=version_string()
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/scrapdown.toml, then next to the input)",
    )
    parser.add_argument(
        "--ceiling", type=int, default=None,
        help="Deepest heading level a decoration may be promoted to (default: 3)"
    )
    parser.add_argument(
        "--promote-single", dest="promote_single",
        action=argparse.BooleanOptionalAction, default=None,
        help="Promote [* text] to a heading too (default: off)"
    )
    parser.add_argument(
        "--indent", default=None,
        help="String emitted per list nesting level (default: three spaces)"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Minimize output"
    )
    parser.add_argument(
        "--json", action="store_true", help="Machine-readable output"
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress to stderr (-vv for parser diagnostics)"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # convert command
    parser_convert = subparsers.add_parser("convert", help="Convert to Markdown")
    parser_convert.add_argument("path", type=Path, help="Document or directory")
    parser_convert.add_argument(
        "-o", "--out", type=Path, default=None,
        help="Output file (or directory, for directory input); default: stdout"
    )

    # tree command
    parser_tree = subparsers.add_parser("tree", help="Dump the parsed structure")
    parser_tree.add_argument("path", type=Path, help="Document")
    parser_tree.add_argument(
        "--format", choices=["json", "yaml"], default="json",
        help="Output format (default: json)"
    )

    # watch command
    parser_watch = subparsers.add_parser("watch", help="Re-convert a directory on change")
    parser_watch.add_argument("path", type=Path, help="Source directory")
    parser_watch.add_argument(
        "-o", "--out", type=Path, required=True, help="Output directory"
    )
    parser_watch.add_argument(
        "--debounce-ms", type=int, default=150,
        help="Debounce window in milliseconds (default: 150)"
    )

    # serve command
    parser_serve = subparsers.add_parser("serve", help="Start local JSON API server")
    parser_serve.add_argument(
        "--host", default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser_serve.add_argument(
        "--port", type=int, default=8765,
        help="Port to bind to (default: 8765)"
    )
    parser_serve.add_argument(
        "--token", default="auto",
        help="Bearer token (auto|<string>|none, default: auto)"
    )
    parser_serve.add_argument(
        "--cors", action="store_true",
        help="Enable CORS (default: false)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    handlers: dict[str, Any] = {
        "convert": cmd_convert,
        "tree": cmd_tree,
        "watch": cmd_watch,
        "serve": cmd_serve,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)

    try:
        rt = build_runtime(
            config_path=args.config,
            input_path=getattr(args, "path", None),
            ceiling=args.ceiling,
            promote_single=args.promote_single,
            indent_unit=args.indent,
        )
        exit_code = handler(args, rt)
        sys.exit(exit_code)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
