"""CLI entry point for nls — I/O boundary only."""

from __future__ import annotations

import argparse
import io
import sys
from typing import NoReturn

from neols import PROG, ListingError, __version__
from neols.formatter.color import ColorPolicy
from neols.formatter.columns import Layout
from neols.formatter.size import SizeConvention
from neols.listing import ListingOptions, print_listing
from neols.scanner import VisibilityPolicy


class _Parser(argparse.ArgumentParser):
    """Argument parser whose usage errors exit with status 1.

    Status 2 is reserved for paths that could not be listed.
    """

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    ``-h`` selects human-readable sizes as in ls, so help is only
    available as ``--help``.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``nls`` command.
    """
    parser = _Parser(
        prog=PROG,
        description="list directory contents with aligned long-format output",
        add_help=False,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        metavar="FILE",
        help="Files or directories to list (default: current directory)",
    )
    parser.add_argument(
        "--help",
        action="help",
        help="Show this help message and exit",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # layout
    parser.add_argument(
        "-l",
        action="store_true",
        dest="long_format",
        help="Use a long listing format",
    )
    parser.add_argument(
        "-g",
        action="store_true",
        dest="group_long",
        help="Like -l, but do not list owner",
    )
    parser.add_argument(
        "-n",
        "--numeric-uid-gid",
        action="store_true",
        dest="numeric_ids",
        help="Like -l, but list numeric user and group IDs",
    )

    # visibility
    parser.add_argument(
        "-a",
        "--all",
        action="store_true",
        dest="all_files",
        help="Do not ignore entries starting with . (includes . and ..)",
    )
    parser.add_argument(
        "-A",
        "--almost-all",
        action="store_true",
        dest="almost_all",
        help="Do not list implied . and ..",
    )
    parser.add_argument(
        "-d",
        "--directory",
        action="store_true",
        dest="directory_itself",
        help="List directories themselves, not their contents",
    )

    # sizes and color
    parser.add_argument(
        "-h",
        "--human-readable",
        action="store_true",
        dest="human",
        help="With -l, print sizes like 1.0K 234M 2.0G (powers of 1024)",
    )
    parser.add_argument(
        "--si",
        action="store_true",
        help="Like -h, but use powers of 1000 and lowercase units",
    )
    parser.add_argument(
        "--color",
        nargs="?",
        const="always",
        default="auto",
        choices=[p.value for p in ColorPolicy],
        metavar="WHEN",
        help="Colorize names: always, auto (default), or never",
    )
    return parser


def _select_layout(args: argparse.Namespace) -> Layout:
    if args.group_long:
        return Layout.GROUP_LONG
    if args.long_format or args.numeric_ids:
        return Layout.LONG
    return Layout.SHORT


def _select_visibility(args: argparse.Namespace) -> VisibilityPolicy:
    if args.all_files:
        return VisibilityPolicy.ALL
    if args.almost_all:
        return VisibilityPolicy.ALMOST_ALL
    return VisibilityPolicy.VISIBLE_ONLY


def _select_size(args: argparse.Namespace) -> SizeConvention:
    if args.si:
        return SizeConvention.SI
    if args.human:
        return SizeConvention.HUMAN
    return SizeConvention.MACHINE


def build_options(args: argparse.Namespace) -> ListingOptions:
    """Translate parsed arguments into listing options.

    Args:
        args: Parsed CLI namespace.

    Returns:
        ListingOptions: Options for ``print_listing``.
    """
    return ListingOptions(
        layout=_select_layout(args),
        size=_select_size(args),
        color=ColorPolicy(args.color),
        visibility=_select_visibility(args),
        numeric_ids=args.numeric_ids,
        show_headers=len(args.paths) > 1,
        list_directories=not args.directory_itself,
    )


def run_nls(argv: list[str] | None = None) -> str:
    """Run nls with provided CLI args and return the rendered output.

    Output is collected in memory instead of being written to stdout,
    which makes this the primary test target for CLI behavior.
    Diagnostics for inaccessible paths still go to stderr.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.

    Returns:
        str: Final rendered output, one line per row.

    Raises:
        SystemExit: With status 1 on invalid arguments.
        ListingError: If any input path could not be listed.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    options = build_options(args)

    buf = io.StringIO()
    print_listing(args.paths, options, out=buf)
    return buf.getvalue()


def main() -> None:
    """Run the CLI entry point with process arguments.

    Exits with code 1 on usage errors and 2 when an input path could
    not be listed; the latter is already diagnosed on stderr.
    """
    parser = build_parser()
    args = parser.parse_args()  # single parse

    try:
        print_listing(args.paths, build_options(args))
    except ListingError:
        sys.exit(2)
