"""tagversion - derive a build version from git describe output and repository tags

    Returns:
        int: Exit code
"""
import logging
import os
import sys

import yaml

from args import parse_args
from cli_config import build_resolution_config, find_config_file, load_versioning_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Commands, Constants, ExitCodes
from repository.inspector import SnapshotInspector, StaticInspector
from versioning import grammar
from versioning.models import Rejected
from versioning.resolver import resolve_detailed
from versioning.service import VersionResolutionService

logger = logging.getLogger(__name__)

LOAD_ERRORS = (OSError, ValueError, yaml.YAMLError)


def _snapshot_path(args):
    return getattr(args, "SNAPSHOT", None) or Constants.DEFAULT_SNAPSHOT_FILE


def load_inspector(args):
    """Build the repository inspector for the resolve command.

    ``--describe`` replaces the snapshot's describe output; the snapshot, when
    present, still supplies the tag list and dirty flag.
    """
    path = _snapshot_path(args)
    describe = getattr(args, "DESCRIBE", None)
    if describe is None:
        return SnapshotInspector.from_file(path)

    tags, dirty = [], False
    if os.path.isfile(path):
        snapshot = SnapshotInspector.from_file(path)
        tags, dirty = snapshot.tags(), snapshot.is_dirty()
    return StaticInspector(describe=describe, tags=tags, dirty=dirty)


def run_resolve(args):
    """Resolve and print the version; returns the exit code."""
    try:
        file_cfg = load_versioning_config(find_config_file(getattr(args, "CONFIG", None)))
    except LOAD_ERRORS as e:
        logger.error("Failed to load config: %s", e)
        return ExitCodes.FILE_ERROR.value

    config = build_resolution_config(args, file_cfg)
    if is_debug_enabled(logger):
        logger.debug(
            "Resolution config built",
            extra=extra_context(
                component="cli",
                action="resolve",
                build_server_mode=config.build_server_mode,
                release_mode=config.release_mode,
            ),
        )

    if getattr(args, "TAG", None):
        result = resolve_detailed(args.TAG, None, config)
    else:
        try:
            inspector = load_inspector(args)
        except LOAD_ERRORS as e:
            logger.error("Failed to load repository snapshot: %s", e)
            return ExitCodes.FILE_ERROR.value
        result = VersionResolutionService(inspector).resolve(config)

    print(result.version)
    if not result.has_version and getattr(args, "REQUIRE_VERSION", False):
        return ExitCodes.NO_VERSION.value
    return ExitCodes.SUCCESS.value


def run_validate(args):
    """Check each tag against the grammar; returns the exit code."""
    invalid = 0
    for tag in args.TAGS:
        parsed = grammar.match(tag)
        if isinstance(parsed, Rejected):
            invalid += 1
            logger.error(parsed.reason)
            print(f"{tag}\tinvalid")
        else:
            print(f"{tag}\tvalid")
    if invalid:
        logger.warning("%d of %d tags do not match the version grammar.", invalid, len(args.TAGS))
        return ExitCodes.INVALID_TAG.value
    return ExitCodes.SUCCESS.value


def run_grammar(_args):
    """Print the published grammar fragments."""
    print(f"main\t{grammar.MAIN_VERSION_REGEX}")
    print(f"qualifier\t{grammar.QUALIFIER_REGEX}")
    print(f"commits\t{grammar.COMMITS_REGEX}")
    print(f"version\t{grammar.VERSION_REGEX}")
    return ExitCodes.SUCCESS.value


def run_tags(args):
    """List release tags from the snapshot, lowest version first."""
    path = _snapshot_path(args)
    try:
        inspector = SnapshotInspector.from_file(path)
    except LOAD_ERRORS as e:
        logger.error("Failed to load repository snapshot: %s", e)
        return ExitCodes.FILE_ERROR.value
    if not inspector.has_repository():
        return ExitCodes.FILE_ERROR.value

    for record in grammar.release_tags(inspector.tags()):
        print(f"{record.name}\t{record.commit_id}\t{record.created_at.isoformat()}")
    return ExitCodes.SUCCESS.value


COMMAND_HANDLERS = {
    Commands.RESOLVE.value: run_resolve,
    Commands.VALIDATE.value: run_validate,
    Commands.GRAMMAR.value: run_grammar,
    Commands.TAGS.value: run_tags,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(quiet=getattr(args, "QUIET", False), log_file=getattr(args, "LOG_FILE", None))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND),
        )

    exit_code = COMMAND_HANDLERS[args.COMMAND](args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
