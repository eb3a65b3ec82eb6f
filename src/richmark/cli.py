#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/cli.py
"""Command-line interface for richmark.

Usage::

    richmark roundtrip README.md --check
    richmark tree notes.md
    cat notes.md | richmark ast -

``roundtrip`` imports the markdown into a fresh editor and exports it back,
``tree`` prints the editor tree as JSON and ``ast`` prints the parsed AST.

"""

from __future__ import annotations

import argparse
import difflib
import json
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from richmark import __version__
from richmark.api import export_markdown_from_editor, import_markdown_to_editor
from richmark.ast.serialization import ast_to_json
from richmark.config import load_options
from richmark.editor.editor import Editor
from richmark.exceptions import DependencyError, RichmarkError
from richmark.logging_utils import configure_logging
from richmark.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from richmark.parsers.markdown import markdown_to_ast

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_CHECK_FAILED = 1
EXIT_CONVERSION_ERROR = 2
EXIT_FILE_ERROR = 3


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="richmark",
        description="Convert markdown to and from a rich-text editor tree.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Configuration file (.toml, .yaml, .json or pyproject.toml). Defaults to discovery from the cwd",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output with detailed logging (equivalent to --log-level DEBUG)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level for debugging (default: WARNING). Overrides --verbose if both are specified.",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write log messages to specified file in addition to console output",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable trace mode with timestamps and per-stage timing information",
    )
    parser.add_argument(
        "--rich",
        action="store_true",
        help="Syntax-highlight terminal output with rich (requires the optional 'rich' dependency)",
    )
    parser.add_argument(
        "--force-rich",
        action="store_true",
        help="Use rich output even when stdout is not a TTY (implies --rich)",
    )
    parser.add_argument(
        "--rich-theme",
        default="monokai",
        metavar="THEME",
        help="Pygments theme used for rich output (default: monokai)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    roundtrip = subparsers.add_parser("roundtrip", help="Import markdown into an editor and export it back")
    roundtrip.add_argument("input", help="Markdown file, or - for stdin")
    roundtrip.add_argument("--out", "-o", metavar="PATH", help="Write the exported markdown to PATH")
    roundtrip.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the exported markdown differs from the input",
    )

    tree = subparsers.add_parser("tree", help="Print the editor tree as JSON")
    tree.add_argument("input", help="Markdown file, or - for stdin")

    ast = subparsers.add_parser("ast", help="Print the parsed markdown AST as JSON")
    ast.add_argument("input", help="Markdown file, or - for stdin")

    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    # --trace takes highest precedence, then --verbose, then --log-level
    if parsed_args.trace:
        log_level = logging.DEBUG
    elif parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def check_rich_available() -> bool:
    """Check if the rich library is importable."""
    try:
        import rich  # noqa: F401

        return True
    except ImportError:
        return False


def should_use_rich_output(parsed_args: argparse.Namespace, stream: TextIO | None = None) -> bool:
    """Determine if rich output should be used for ``stream``.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command line arguments
    stream : TextIO, optional
        Target stream. Uses sys.stdout unless otherwise specified.

    Returns
    -------
    bool
        True when --rich or --force-rich was given and the stream is a TTY
        (or --force-rich was given)

    Raises
    ------
    DependencyError
        If rich output was requested but rich is not installed

    """
    if not (parsed_args.rich or parsed_args.force_rich):
        return False

    if not check_rich_available():
        raise DependencyError(
            converter_name="rich-output",
            missing_packages=[("rich", "")],
            message="Rich output requires the optional 'rich' dependency. Install with: pip install richmark[rich]",
        )

    if parsed_args.force_rich:
        return True

    target = stream or sys.stdout
    isatty = getattr(target, "isatty", None)
    return bool(callable(isatty) and isatty())


def _emit(text: str, parsed_args: argparse.Namespace, lexer: str, stderr: bool = False) -> None:
    """Write ``text`` to stdout (or stderr), highlighted with rich when requested."""
    stream = sys.stderr if stderr else sys.stdout
    if not should_use_rich_output(parsed_args, stream):
        stream.write(text if text.endswith("\n") else text + "\n")
        return

    from rich.console import Console
    from rich.syntax import Syntax

    console = Console(file=stream, force_terminal=parsed_args.force_rich or None)
    console.print(Syntax(text.rstrip("\n"), lexer, theme=parsed_args.rich_theme, word_wrap=True))


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _import_into_editor(markdown: str, parser_options: MarkdownParserOptions) -> Editor:
    editor = Editor()
    with editor.update() as root:
        import_markdown_to_editor(root, markdown, parser_options=parser_options)
    return editor


def _run_roundtrip(
    parsed_args: argparse.Namespace,
    markdown: str,
    parser_options: MarkdownParserOptions,
    renderer_options: MarkdownRendererOptions,
) -> int:
    editor = _import_into_editor(markdown, parser_options)
    with editor.read() as root:
        output = export_markdown_from_editor(root, renderer_options=renderer_options)

    if parsed_args.out:
        Path(parsed_args.out).write_text(output, encoding="utf-8")
    elif output:
        _emit(output, parsed_args, "markdown")

    if parsed_args.check and output.strip() != markdown.strip():
        diff = difflib.unified_diff(
            markdown.strip().splitlines(),
            output.strip().splitlines(),
            fromfile="input",
            tofile="roundtrip",
            lineterm="",
        )
        _emit("\n".join(diff), parsed_args, "diff", stderr=True)
        return EXIT_CHECK_FAILED
    return EXIT_SUCCESS


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the process exit status."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    try:
        _setup_logging_level(parsed_args)
    except OSError as e:
        print(f"Error opening log file {parsed_args.log_file}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    try:
        markdown = _read_input(parsed_args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    config_path: Optional[str] = parsed_args.config
    try:
        parser_options, renderer_options = load_options(config_path)

        if parsed_args.command == "roundtrip":
            return _run_roundtrip(parsed_args, markdown, parser_options, renderer_options)
        if parsed_args.command == "tree":
            editor = _import_into_editor(markdown, parser_options)
            _emit(json.dumps(editor.to_json(), indent=2), parsed_args, "json")
        else:
            _emit(ast_to_json(markdown_to_ast(markdown, parser_options), indent=2), parsed_args, "json")
    except RichmarkError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONVERSION_ERROR
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
