"""Argument parsing functionality for wolfi-package-status."""

import argparse

from constants import Constants, __version__


def build_parser():
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="wolfi-package-status",
        usage="%(prog)s [options] [package names]",
        description=(
            "List the latest version of the given packages across all Wolfi "
            "package repositories"
        ),
        add_help=True,
    )

    parser.add_argument("packages",
                        metavar="PACKAGE",
                        help="Package names to look up. Without any, every package in every index is listed.",
                        nargs="*")
    parser.add_argument("--regex",
                        dest="REGEX",
                        help="Parse package names as regex",
                        action="store_true")
    parser.add_argument("--all-versions",
                        dest="ALL_VERSIONS",
                        help="List all matching package versions - not only the latest",
                        action="store_true")
    parser.add_argument("--local-apkindex",
                        dest="LOCAL_APKINDEX",
                        help="Path to a local APKINDEX file",
                        action="store",
                        type=str)
    parser.add_argument("--auth-token",
                        dest="AUTH_TOKEN",
                        help=(
                            "Specify auth token to use when querying non public wolfi package "
                            "repositories - enterprise-packages and extra-packages - use "
                            f"$({Constants.TOKEN_HINT_COMMAND}). You can also set environment "
                            f"variable {Constants.ENV_HTTP_AUTH}."
                        ),
                        action="store",
                        type=str)
    parser.add_argument("--show-parent-package",
                        dest="SHOW_PARENT",
                        help="This might be a sub package of a parent package, show the parent package information",
                        action="store_true")
    parser.add_argument("--show-sub-packages",
                        dest="SHOW_SUB",
                        help="Show the sub package information",
                        action="store_true")
    parser.add_argument("--json",
                        dest="JSON",
                        help="Render output in JSON format",
                        action="store_true")

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML configuration file overriding the package indices",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--version",
                        action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
