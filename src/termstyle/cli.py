"""CLI entry point: renders a showcase of every styled element.

Usage::

    termstyle [-q | -v[v[v]]] [--ansi | --no-ansi] [-n] [--config PATH]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

from termstyle.components.table import TableCell, TableSeparator
from termstyle.console_style import ConsoleStyle
from termstyle.input import ConsoleInput
from termstyle.output import ConsoleOutput, Verbosity
from termstyle.settings import load_settings

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Verbosity.QUIET: logging.ERROR,
    Verbosity.NORMAL: logging.WARNING,
    Verbosity.VERBOSE: logging.WARNING,
    Verbosity.VERY_VERBOSE: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="termstyle",
        description="Render a showcase of styled console output",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not output any message")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity: -v verbose, -vv very verbose, -vvv debug",
    )
    parser.add_argument(
        "--ansi",
        dest="decorated",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force (or with --no-ansi disable) ANSI output",
    )
    parser.add_argument("-n", "--no-interaction", action="store_true", help="Do not ask any interactive question")
    parser.add_argument("--config", help="Settings file (defaults to $TERMSTYLE_CONFIG or ~/.termstyle/settings.json)")
    return parser.parse_args(argv)


def resolve_verbosity(quiet: bool, verbose: int, default: Verbosity = Verbosity.NORMAL) -> Verbosity:
    """``-q`` wins over any ``-v``; each ``-v`` raises the level by one step."""
    if quiet:
        return Verbosity.QUIET
    if verbose >= 3:
        return Verbosity.DEBUG
    if verbose == 2:
        return Verbosity.VERY_VERBOSE
    if verbose == 1:
        return Verbosity.VERBOSE
    return default


async def run_showcase(io: ConsoleStyle) -> None:
    io.title("termstyle")
    io.text(["Styled console output from <info>markup</info>.", "Tags nest: <comment>a <fg=red;options=bold>b</> c</comment>."])

    io.section("Listing")
    io.listing(["<info>info</info>", "<comment>comment</comment>", "<question>question</question>"])

    io.section("Table")
    io.table(
        ["Name", "Role", "Notes"],
        [
            ["ada", "admin", TableCell("two\nlines", rowspan=2)],
            ["bob", "user"],
            TableSeparator(),
            [TableCell("spans two columns", colspan=2), "x"],
        ],
    )

    io.section("Blocks")
    io.success("Everything worked.")
    io.note(["Notes are not padded.", "Each message gets its own paragraph."])
    io.warning("Something looks off.")
    io.caution("Careful with that <tag>.")
    io.comment("A quiet remark.")

    io.section("Progress")
    io.progress_start(20)
    for _ in range(20):
        io.progress_advance()
    io.progress_finish()

    name = await io.ask("What is your name?", "stranger")
    if name is not None:
        io.text(f"Hello, {name}.")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args.config)

    verbosity = resolve_verbosity(args.quiet, args.verbose, settings.verbosity_level)
    logging.basicConfig(level=_LOG_LEVELS[verbosity], format="%(levelname)s %(name)s: %(message)s")

    decorated = args.decorated if args.decorated is not None else settings.decorated
    output = ConsoleOutput(verbosity, decorated)
    interactive = settings.interactive and not args.no_interaction and sys.stdin.isatty()
    logger.debug("verbosity=%s decorated=%s interactive=%s", verbosity.name, output.decorated, interactive)

    io = ConsoleStyle(ConsoleInput(interactive=interactive), output, settings)
    try:
        asyncio.run(run_showcase(io))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
