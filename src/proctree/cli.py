"""proctree - print the process trees rooted at every match of a program name."""

import argparse
import logging
import sys

from rich.console import Console

from proctree.directory import find_roots, load_directory, target_executable_name
from proctree.presenter import TreePresenter, TreePrintConfig
from proctree.provider import (
    EnumerationFailure,
    ProcessInfoProvider,
    PsutilProvider,
    executable_suffix,
)
from proctree.resolver import MetadataResolver
from proctree.traversal import walk_forest

EXIT_OK = 0
EXIT_FAILURE = 1

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="proctree",
        description="Show the process trees spawned by every running instance of a program.",
    )
    parser.add_argument(
        "process_name",
        help="program name without its executable suffix, e.g. 'chrome'",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log diagnostics to stderr")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    return parser


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, otherwise WARNING."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("psutil").setLevel(logging.ERROR)


def print_process_trees(
    process_name: str,
    provider: ProcessInfoProvider,
    presenter: TreePresenter,
    resolver: MetadataResolver | None = None,
) -> int:
    """
    Print every tree rooted at a process named process_name.

    Returns:
        EXIT_OK when trees were printed or nothing matched, EXIT_FAILURE when
        the process table couldn't be read.
    """
    try:
        directory = load_directory(provider)
    except EnumerationFailure as exc:
        presenter.render_error(str(exc))
        return EXIT_FAILURE

    roots = find_roots(directory, process_name)
    if not roots:
        presenter.render_not_found(process_name)
        return EXIT_OK

    logger.debug("Found %d root(s) named %s", len(roots), process_name)
    resolver = resolver or MetadataResolver(provider)
    for lines in walk_forest(roots, directory, resolver):
        if len(roots) > 1:
            presenter.render_separator()
        presenter.render_tree(lines)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Entry point for the proctree command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    process_name = target_executable_name(args.process_name, executable_suffix())
    console = Console(highlight=False, no_color=args.no_color)
    error_console = Console(stderr=True, highlight=False, no_color=args.no_color)
    presenter = TreePresenter(console, TreePrintConfig(user_name="dark_cyan"), error_console)
    return print_process_trees(process_name, PsutilProvider(), presenter)


if __name__ == "__main__":
    sys.exit(main())
