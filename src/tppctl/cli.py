"""
Command-line interface for tppctl.

Commands:
    ls           List Generic Credential paths under the policy tree
    edit <name>  Edit the configuration embedded in a credential

Uses Python's argparse module. Usage errors print the usage to stdout and
exit with status 1; any other failure prints a single "Error: ..." line to
stderr and exits with status 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

from tppctl import __version__
from tppctl.api.client import TppClient
from tppctl.config.settings import Settings, load_config
from tppctl.editing.editor import external_editor
from tppctl.editing.workflow import edit_credential
from tppctl.errors import ConfigurationError, TppError

logger = logging.getLogger(__name__)

class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors on stdout with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stdout)
        self.exit(1, f"{self.prog}: error: {message}\n")

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        if message:
            sys.stdout.write(message)
        sys.exit(status)


def output_error(message: str) -> None:
    """
    Print an error message to stderr.

    Args:
        message: The error message to print.
    """
    print(message, file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the tppctl CLI."""
    parser = _ArgumentParser(
        prog="tppctl",
        description="Manage Generic Credential configuration through the vedsdk API",
        epilog="Requires TPP_URL and TOKEN in the environment. EDITOR selects the editor.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"tppctl {__version__}",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (can be repeated)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        metavar="<command>",
    )

    # ls command
    ls_parser = subparsers.add_parser(
        "ls",
        help="List Generic Credentials",
        description="Print the path of every Generic Credential under \\VED\\Policy.",
    )
    ls_parser.set_defaults(func=cmd_ls)

    # edit command
    edit_parser = subparsers.add_parser(
        "edit",
        help="Edit the configuration stored in a credential",
        description=(
            "Open the YAML configuration embedded in a Generic Credential "
            "in $EDITOR and save it back."
        ),
    )
    edit_parser.add_argument(
        "name",
        help="Credential path, e.g. '\\VED\\Policy\\creds\\foo'",
    )
    edit_parser.set_defaults(func=cmd_edit)

    return parser


def setup_logging(verbose: int, quiet: bool, default_level: str = "WARNING") -> None:
    """
    Configure logging based on verbosity level.

    Logs go to stderr so they never mix with command output.
    """
    if quiet:
        level = logging.ERROR
    elif verbose == 0:
        level = logging.getLevelName(default_level)
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def cmd_ls(args: argparse.Namespace, settings: Settings) -> int:
    """List Generic Credential paths."""
    try:
        with TppClient(settings) as client:
            paths = client.list_credentials()
    except TppError as e:
        output_error(f"Error: {e}")
        return 1

    for path in paths:
        print(path)
    return 0


def cmd_edit(args: argparse.Namespace, settings: Settings) -> int:
    """Edit the configuration embedded in a credential."""
    editor = external_editor(settings.editor)
    try:
        with TppClient(settings) as client:
            edit_credential(client, args.name, editor)
    except TppError as e:
        output_error(f"Error: {e}")
        logger.debug("Edit failed", exc_info=True)
        return 1
    return 0


def main(argv: list[str] | None = None) -> NoReturn:
    """
    Main entry point for the tppctl CLI.

    The environment is checked before the command line, so a missing
    TPP_URL or TOKEN is reported even when the command is missing or unknown.
    """
    try:
        settings = load_config()
    except ConfigurationError as e:
        output_error(f"Configuration error: {e}")
        sys.exit(1)

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stdout)
        sys.exit(1)

    setup_logging(args.verbose, args.quiet, settings.log_level)

    try:
        exit_code = args.func(args, settings)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        output_error("\nOperation cancelled.")
        sys.exit(130)
    except Exception as e:
        if args.verbose > 0:
            raise
        output_error(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
