"""Argument parsing functionality for tagversion."""

import argparse
from constants import Commands, Constants


def _add_common_arguments(parser):
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default="INFO")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not log to console.",
                        action="store_true")


def build_parser():
    """Build the argument parser with one sub-parser per command."""
    parser = argparse.ArgumentParser(
        prog="tagversion",
        description=(
            "tagversion - derive a build version from git describe output and repository tags"
        ),
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    subparsers.required = True

    resolve = subparsers.add_parser(
        Commands.RESOLVE.value,
        help="Resolve the version string for a checkout",
    )
    _add_common_arguments(resolve)
    resolve.add_argument("-s", "--snapshot",
                         dest="SNAPSHOT",
                         help=f"Repository snapshot file (YAML or JSON, default: {Constants.DEFAULT_SNAPSHOT_FILE})",
                         action="store",
                         type=str)
    candidate_group = resolve.add_mutually_exclusive_group()
    candidate_group.add_argument("--describe",
                                 dest="DESCRIBE",
                                 help="Describe output to resolve; overrides the snapshot value",
                                 action="store",
                                 type=str)
    candidate_group.add_argument("--tag",
                                 dest="TAG",
                                 help="Verbatim tag supplied by CI; skips tag disambiguation",
                                 action="store",
                                 type=str)
    resolve.add_argument("--dirty",
                         dest="DIRTY",
                         help="Mark the working tree as having uncommitted changes",
                         action="store_true")
    resolve.add_argument("--build-server",
                         dest="BUILD_SERVER",
                         help="Build server mode: no local sentinel, no timestamp",
                         action="store_true",
                         default=None)
    resolve.add_argument("--release",
                         dest="RELEASE",
                         help="Release mode: no build metadata after the qualifier",
                         action="store_true",
                         default=None)
    resolve.add_argument("--all-tags",
                         dest="ALL_TAGS",
                         help="Use describe output computed over all tags, not only annotated ones",
                         action="store_true",
                         default=None)
    resolve.add_argument("--timestamp",
                         dest="TIMESTAMP",
                         help="Timestamp for local builds (default: now, formatted %%Y%%m%%d%%H%%M%%S)",
                         action="store",
                         type=str)
    resolve.add_argument("--require-version",
                         dest="REQUIRE_VERSION",
                         help="Exit with a non-zero status code if no version was generated.",
                         action="store_true")

    validate = subparsers.add_parser(
        Commands.VALIDATE.value,
        help="Check tags against the version grammar",
    )
    _add_common_arguments(validate)
    validate.add_argument("TAGS",
                          help="Tag names to validate",
                          nargs="+",
                          type=str)

    grammar = subparsers.add_parser(
        Commands.GRAMMAR.value,
        help="Print the version tag grammar",
    )
    _add_common_arguments(grammar)

    tags = subparsers.add_parser(
        Commands.TAGS.value,
        help="List release tags from a snapshot in version order",
    )
    _add_common_arguments(tags)
    tags.add_argument("-s", "--snapshot",
                      dest="SNAPSHOT",
                      help=f"Repository snapshot file (YAML or JSON, default: {Constants.DEFAULT_SNAPSHOT_FILE})",
                      action="store",
                      type=str)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
