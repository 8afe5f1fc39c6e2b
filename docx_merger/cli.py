"""
Command-line interface for DOCX Merger.

Usage:
    docx-merger merge a.docx b.docx --output merged.docx
    docx-merger merge a.docx b.docx -o merged.docx --set ClientName=Acme
    docx-merger update-controls merged.docx --replacements values.json
    docx-merger inspect merged.docx --json
    docx-merger version
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .exceptions import DocxMergerError, ErrorKind, InvalidArgumentError
from .utils.logger import LOG_LEVELS, setup_logging

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)

EXIT_CODES = {
    ErrorKind.INVALID_ARGUMENT: 2,
    ErrorKind.NOT_FOUND: 3,
    ErrorKind.MISSING_PART: 3,
    ErrorKind.CORRUPT_ARCHIVE: 4,
    ErrorKind.MALFORMED_XML: 4,
}

ERROR_TITLES = {
    ErrorKind.INVALID_ARGUMENT: "Invalid argument",
    ErrorKind.NOT_FOUND: "File not found",
    ErrorKind.MISSING_PART: "Incomplete DOCX package",
    ErrorKind.CORRUPT_ARCHIVE: "Not a valid DOCX file",
    ErrorKind.MALFORMED_XML: "Malformed document XML",
}


def _add_replacement_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="TAG=TEXT",
        help="Replace content controls tagged TAG with TEXT (repeatable)"
    )
    parser.add_argument(
        "--replacements",
        metavar="FILE",
        help="JSON file with an object mapping tags to replacement text"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docx-merger",
        description="Merge DOCX files with per-document footers and fill content controls",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  docx-merger merge source1.docx source2.docx -o merged.docx
  docx-merger merge source1.docx source2.docx -o merged.docx --set ClientName=ImpleVista
  docx-merger update-controls merged.docx --replacements values.json
  docx-merger inspect merged.docx
        """,
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="INFO",
        type=str.upper,
        help="Log level (default: INFO)"
    )
    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Use plain logging output instead of rich"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    merge_parser = subparsers.add_parser("merge", help="Merge DOCX files with dynamic footers")
    merge_parser.add_argument("inputs", nargs="+", help="Input DOCX files, in merge order")
    merge_parser.add_argument("-o", "--output", required=True, help="Output DOCX file")
    _add_replacement_arguments(merge_parser)

    update_parser = subparsers.add_parser("update-controls", help="Rewrite tagged content controls")
    update_parser.add_argument("input", help="DOCX file to update in place")
    _add_replacement_arguments(update_parser)

    inspect_parser = subparsers.add_parser("inspect", help="List content controls")
    inspect_parser.add_argument("input", help="Input DOCX file")
    inspect_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("version", help="Show version information")

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return create_parser().parse_args(argv)


def load_replacements(assignments: List[str], replacements_file: Optional[str]) -> Dict[str, str]:
    """
    Build the replacement mapping from a JSON file and ``TAG=TEXT`` pairs.

    Pairs given on the command line override entries from the file.
    """
    replacements: Dict[str, str] = {}

    if replacements_file:
        path = Path(replacements_file)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise InvalidArgumentError(f"Replacements file not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError(f"Replacements file is not valid JSON: {path}", str(exc)) from exc
        if not isinstance(data, dict):
            raise InvalidArgumentError(f"Replacements file must contain a JSON object: {path}")
        for key, value in data.items():
            replacements[key] = value if value is None else str(value)

    for assignment in assignments:
        tag, sep, text = assignment.partition("=")
        if not sep:
            raise InvalidArgumentError(f"Expected TAG=TEXT, got: {assignment}")
        replacements[tag] = text

    return replacements


def cmd_merge(args: argparse.Namespace) -> int:
    """Handle merge command."""
    from .api import merge_and_update

    replacements = None
    if args.assignments or args.replacements:
        replacements = load_replacements(args.assignments, args.replacements)

    try:
        output = merge_and_update(args.inputs, args.output, replacements)
    except DocxMergerError as exc:
        # Precondition failures happen before the output is touched
        if exc.kind not in (ErrorKind.INVALID_ARGUMENT, ErrorKind.NOT_FOUND) and Path(args.output).exists():
            logger.warning(f"Output file {args.output} is incomplete and should be discarded")
        raise

    console.print(f"[green]✓ Merged file created: {escape(str(output))}[/green]")
    return 0


def cmd_update_controls(args: argparse.Namespace) -> int:
    """Handle update-controls command."""
    from .engine.content_controls import update_content_controls

    replacements = load_replacements(args.assignments, args.replacements)
    count = update_content_controls(args.input, replacements)
    console.print(f"[green]✓ Updated {count} content control(s) in {escape(args.input)}[/green]")
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    """Handle inspect command."""
    from .engine.content_controls import list_content_controls

    controls = list_content_controls(args.input)

    if args.json:
        print(json.dumps(
            [{"tag": c.tag, "alias": c.alias, "text": c.text} for c in controls],
            indent=2,
            ensure_ascii=False
        ))
        return 0

    table = Table(title=f"Content controls in {escape(Path(args.input).name)}")
    table.add_column("Tag", style="cyan")
    table.add_column("Alias", style="magenta")
    table.add_column("Text")
    for control in controls:
        table.add_row(escape(control.tag or ""), escape(control.alias or ""), escape(control.text))
    console.print(table)
    return 0


def cmd_version(args: Optional[argparse.Namespace] = None) -> int:
    """Handle version command."""
    from .version import __version__
    console.print(f"docx-merger v{__version__}")
    return 0


COMMANDS = {
    "merge": cmd_merge,
    "update-controls": cmd_update_controls,
    "inspect": cmd_inspect,
    "version": cmd_version,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.log_level, use_rich=not args.no_rich)

    try:
        return COMMANDS[args.command](args)
    except DocxMergerError as exc:
        error_console.print(f"[red]✗ {ERROR_TITLES[exc.kind]}:[/red] {escape(str(exc))}", highlight=False)
        return EXIT_CODES[exc.kind]


if __name__ == "__main__":
    sys.exit(main())
