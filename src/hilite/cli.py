"""Command-line entry point for highlighting HTML files.

``hilite page.html --text`` prints the rendered text so offsets can be
chosen; ``hilite page.html --range 3:7 --class match`` writes the
highlighted document to stdout.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from bs4 import BeautifulSoup
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from hilite import setup_logging
from hilite.config import get_settings
from hilite.dom.markers import HighlightOptions
from hilite.highlighter import Highlighter

console = Console()


def _parse_range(value: str) -> tuple[int, int]:
    """Parse ``START:END`` into a pair of ints."""
    start, sep, end = value.partition(":")
    try:
        if not sep:
            raise ValueError
        return int(start), int(end)
    except ValueError:
        msg = f"expected START:END with integer offsets, got {value!r}"
        raise argparse.ArgumentTypeError(msg) from None


def _parse_pair(value: str) -> tuple[str, str]:
    """Parse ``NAME=VALUE``."""
    name, sep, raw = value.partition("=")
    if not sep or not name.strip():
        msg = f"expected NAME=VALUE, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return name.strip(), raw.strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hilite",
        description="Highlight rendered-text ranges in an HTML document.",
    )
    parser.add_argument("file", type=Path, help="HTML file to read")
    parser.add_argument(
        "--select",
        default=None,
        help="CSS selector for the container (default: <body> or whole document)",
    )
    parser.add_argument(
        "--parser",
        default=None,
        help="BeautifulSoup tree builder (default: PARSER__FEATURES setting)",
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--text", action="store_true", help="Print the rendered text and exit"
    )
    mode.add_argument(
        "--range",
        dest="ranges",
        action="append",
        type=_parse_range,
        metavar="START:END",
        help="Offsets to highlight (repeatable)",
    )

    style = parser.add_mutually_exclusive_group()
    style.add_argument("--class", dest="css_class", help="Class name for markers")
    style.add_argument(
        "--style",
        dest="styles",
        action="append",
        type=_parse_pair,
        metavar="PROP=VALUE",
        help="Inline CSS declaration for markers (repeatable)",
    )
    parser.add_argument(
        "--attr",
        dest="attrs",
        action="append",
        type=_parse_pair,
        metavar="NAME=VALUE",
        help="Extra attribute for markers (repeatable)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a table of the applied highlights after the document",
    )
    return parser


def _print_summary(highlighter: Highlighter, con: Console) -> None:
    table = Table(title="Highlights")
    table.add_column("Range", style="cyan")
    table.add_column("Markers", justify="right")
    table.add_column("Text")

    for highlight in highlighter:
        table.add_row(
            Text(f"[{highlight.start}, {highlight.end})"),
            str(len(highlight.markers)),
            Text(highlight.text),
        )
    con.print(table)


def main(argv: list[str] | None = None, *, out: Console | None = None) -> None:
    """Entry point for the ``hilite`` command."""
    con = out or console
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(
        settings.log.level, settings.log.dir if settings.log.to_file else None
    )

    try:
        html = args.file.read_text(encoding="utf-8")
    except OSError as exc:
        con.print(f"[red]Error:[/] cannot read {args.file}: {exc.strerror}")
        sys.exit(1)

    soup = BeautifulSoup(html, args.parser or settings.parser.features)
    container = soup
    if args.select:
        container = soup.select_one(args.select)
        if container is None:
            con.print(f"[red]Error:[/] no element matches selector {args.select!r}")
            sys.exit(1)

    highlighter = Highlighter(container, settings=settings)

    if args.text:
        text = highlighter.get_rendered_text()
        con.print(
            Panel(Text(text), title=f"Rendered text ({len(text)} chars)", expand=False)
        )
        return

    styles = args.css_class if args.css_class else dict(args.styles or [])
    options = HighlightOptions(attrs=dict(args.attrs or []))

    for start, end in args.ranges:
        before = len(highlighter)
        highlighter.add(start, end, styles, options)
        if len(highlighter) == before:
            con.print(f"[yellow]Skipped[/] degenerate range {start}:{end}")

    # Written verbatim: no markup, emoji codes or highlighting
    con.print(str(soup), markup=False, emoji=False, highlight=False, soft_wrap=True)

    if args.summary:
        _print_summary(highlighter, con)


if __name__ == "__main__":
    main()
