"""Command-line interface for lenfront."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lenfront.config import MAX_DEPTH_LIMIT, FrontendConfig
from lenfront.errors import has_errors
from lenfront.render import render_diagnostics

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None  # None reads stdin
    show_tokens: bool
    show_ast: bool
    as_json: bool
    brief: bool
    config: FrontendConfig
    watch: bool
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lenfront",
        description="Tokenize and parse len source, printing token and AST dumps",
    )
    p.add_argument("input", help="Input .len file, or '-' for stdin")
    p.add_argument("--tokens", action="store_true", help="Print the token dump")
    p.add_argument("--ast", action="store_true", help="Print the AST dump")
    p.add_argument("--json", action="store_true", help="Print the result as JSON")
    p.add_argument(
        "--brief",
        action="store_true",
        help="Print one line per diagnostic instead of source snippets",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover lenfront.toml)",
    )
    p.add_argument(
        "--no-comments",
        action="store_true",
        help="Discard comments instead of emitting COMMENT tokens",
    )
    p.add_argument(
        "--max-depth",
        type=positive_int,
        default=None,
        metavar="N",
        help=f"Maximum expression nesting depth (default: 64, at most {MAX_DEPTH_LIMIT})",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-run")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def positive_int(s: str) -> int:
    """Parse a strictly positive integer argument."""
    try:
        value = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {s}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {s}")
    return value


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "lenfront.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = None if args.input == "-" else Path(args.input)
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = FrontendConfig.from_mapping(load_config(config_path, input_dir))

    keep_comments = config.keep_comments and not args.no_comments
    max_depth = args.max_depth if args.max_depth is not None else config.max_depth

    # Neither section requested means both
    show_tokens = args.tokens or not args.ast
    show_ast = args.ast or not args.tokens

    return CliOptions(
        input_file=input_file,
        show_tokens=show_tokens,
        show_ast=show_ast,
        as_json=args.json,
        brief=args.brief,
        config=FrontendConfig(keep_comments=keep_comments, max_depth=max_depth),
        watch=args.watch,
        verbose=args.verbose,
    )


def read_source(options: CliOptions) -> str:
    """Read the input as UTF-8; invalid bytes become U+FFFD."""
    if options.input_file is None:
        data = sys.stdin.buffer.read()
    else:
        data = options.input_file.read_bytes()
    return data.decode("utf-8", errors="replace")


def process(source: str, options: CliOptions) -> tuple[str, bool]:
    """Run the frontend and return (stdout text, whether errors were found).

    Diagnostics are written to stderr.
    """
    from lenfront.frontend import run

    result = run(source, options.config)
    failed = has_errors(result.diagnostics)

    if options.as_json:
        data = result.to_dict()
        if not options.show_tokens:
            del data["tokens"]
        if not options.show_ast:
            del data["ast"]
        return json.dumps(data, indent=2) + "\n", failed

    if options.brief:
        sys.stderr.write(render_diagnostics(result.diagnostics))
    else:
        filename = str(options.input_file) if options.input_file is not None else "<stdin>"
        for diag in result.diagnostics:
            print(diag.format(source, filename), file=sys.stderr)

    sections: list[str] = []
    if options.show_tokens:
        sections.append("== tokens ==\n" + result.tokens)
    if options.show_ast:
        sections.append("== ast ==\n" + result.ast)
    return "".join(sections), failed


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-run on each modification."""
    assert options.input_file is not None
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    output, _ = process(read_source(options), options)
                except OSError as exc:
                    print(f"error: {exc}", file=sys.stderr)
                else:
                    sys.stdout.write(output)
                    sys.stdout.flush()
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        options = resolve_options(args)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        print(f"error: invalid config: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        if options.input_file is None:
            print("error: --watch needs an input file", file=sys.stderr)
            return 2
        watch_loop(options)
        return 0

    try:
        source = read_source(options)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    logger.debug("read %d chars from %s", len(source), options.input_file or "<stdin>")
    output, failed = process(source, options)
    sys.stdout.write(output)
    return 1 if failed else 0
