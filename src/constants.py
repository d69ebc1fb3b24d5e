"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    INVALID_TAG = 3
    NO_VERSION = 4


class Commands(Enum):
    """Sub-commands supported by the program.

    Args:
        Enum (string): Sub-commands supported by the program.
    """

    RESOLVE = "resolve"
    VALIDATE = "validate"
    GRAMMAR = "grammar"
    TAGS = "tags"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Inserted after the major number of local builds so they sort ahead of
    # server builds of the same version.
    LOCAL_BUILD_SENTINEL = "424242"
    TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
    TAG_REF_PREFIX = "refs/tags/"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "TAGVERSION_LOG_LEVEL"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    # Looked up in order in the working directory when --config is not given
    DEFAULT_CONFIG_FILES = ["tagversion.yml", ".tagversion.yml", ".tagversion.yaml"]
    CONFIG_SECTION = "versioning"
    DEFAULT_SNAPSHOT_FILE = "tagversion-snapshot.yml"
