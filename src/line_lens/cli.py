"""CLI entry point for line-lens."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from .blame import annotate
from .config import LensConfig
from .diff import retrieve_diff
from .formatter import format_annotation
from .git_ops import GitUnavailableError, locate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="line-lens",
        description="Show who last changed a line of a file, and the diff that changed it.",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Log git invocations and state changes",
    )
    parser.add_argument("--format", help="Annotation template (%%a %%d %%m %%h)")
    parser.add_argument("--date-format", help="strftime format for dates")
    parser.add_argument("--max-msg-len", type=int, help="Truncate summaries after this")
    parser.add_argument(
        "--timeout",
        type=int,
        dest="git_cmd_timeout",
        help="Timeout for each git command, in ms",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    view = subparsers.add_parser("view", help="Browse a file with blame annotations")
    view.add_argument("file", type=Path)
    view.add_argument("-l", "--line", type=int, default=1, help="Line to start on")

    blame = subparsers.add_parser("blame", help="Print the annotation for one line")
    blame.add_argument("file", type=Path)
    blame.add_argument("line", type=int)

    diff = subparsers.add_parser(
        "diff", help="Print the diff of the commit that last changed a line"
    )
    diff.add_argument("file", type=Path)
    diff.add_argument("line", type=int)

    return parser


def load_config(parsed: argparse.Namespace) -> LensConfig:
    """Environment (and .env) configuration, overridden by CLI flags."""
    load_dotenv()
    return LensConfig.from_env().merged(
        {
            "format": parsed.format,
            "date_format": parsed.date_format,
            "max_msg_len": parsed.max_msg_len,
            "git_cmd_timeout": parsed.git_cmd_timeout,
        }
    )


def setup_logging(debug: bool, tui: bool = False):
    if not debug:
        return
    if tui:
        # The TUI owns the terminal; logs go to `textual console`
        from textual.logging import TextualHandler

        logging.basicConfig(level=logging.DEBUG, handlers=[TextualHandler()])
    else:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def cmd_blame(parsed: argparse.Namespace, config: LensConfig) -> int:
    timeout = config.git_cmd_timeout
    location = locate(parsed.file, timeout)
    annotation = None
    if location is not None:
        annotation = annotate(location.root, location.relative_path, parsed.line, timeout)

    if annotation is None:
        print(f"No blame information for {parsed.file}:{parsed.line}", file=sys.stderr)
        return 1

    print(format_annotation(annotation, config.display))
    return 0


def cmd_diff(parsed: argparse.Namespace, config: LensConfig) -> int:
    from .tui import diff_text

    timeout = config.git_cmd_timeout
    location = locate(parsed.file, timeout)
    annotation = None
    if location is not None:
        annotation = annotate(location.root, location.relative_path, parsed.line, timeout)

    if annotation is None:
        print(f"No blame information for {parsed.file}:{parsed.line}", file=sys.stderr)
        return 1
    if not annotation.is_committed:
        print("This line is not committed yet")
        return 0

    result = retrieve_diff(
        location.root, location.relative_path, annotation.commit_hash, timeout
    )
    if not result.has_content:
        print(result.message)
        return 0

    console = Console()
    console.print(f"Diff for {result.target_hash[:7]}", style="bold")
    console.print(diff_text(result.lines), soft_wrap=True)
    return 0


def main(argv: list[str] | None = None):
    """Main entry point for the line-lens CLI."""
    parser = build_parser()
    parsed = parser.parse_args(argv)

    try:
        config = load_config(parsed)
    except ValidationError as e:
        print(f"Error: Invalid configuration\n{e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(parsed.debug, tui=parsed.command == "view")

    try:
        if parsed.command == "view":
            from .tui import run_tui

            run_tui(parsed.file, config, line=parsed.line)
            status = 0
        elif parsed.command == "blame":
            status = cmd_blame(parsed, config)
        else:
            status = cmd_diff(parsed, config)
    except GitUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(status)


if __name__ == "__main__":
    main()
