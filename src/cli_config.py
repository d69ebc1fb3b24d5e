"""Configuration loading and composition for the resolve command.

Precedence: CLI flags, then the ``versioning`` section of the config file,
then built-in defaults.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

from constants import Constants
from repository.inspector import load_document
from versioning.models import ResolutionConfig

logger = logging.getLogger(__name__)


def find_config_file(explicit: Optional[str] = None, cwd: Optional[str] = None) -> Optional[str]:
    """Return the config path to load, or None when there is none.

    An explicit path is returned as-is; otherwise the default names are
    looked up in ``cwd``.
    """
    if isinstance(explicit, str) and explicit.strip():
        return explicit.strip()
    base = cwd or os.getcwd()
    for name in Constants.DEFAULT_CONFIG_FILES:
        candidate = os.path.join(base, name)
        if os.path.isfile(candidate):
            return candidate
    return None


def load_versioning_config(path: Optional[str]) -> Dict[str, Any]:
    """Load the ``versioning`` section of a config file.

    A document without the section is treated as the section itself.

    Raises:
        OSError, ValueError, yaml.YAMLError: When the file cannot be loaded
    """
    if not path:
        return {}
    data = load_document(path)
    section = data.get(Constants.CONFIG_SECTION, data)
    if not isinstance(section, dict):
        logger.warning("Config section '%s' in %s is not a mapping; ignoring it",
                       Constants.CONFIG_SECTION, path)
        return {}
    logger.debug("Loaded configuration from %s", path)
    return section


def _flag(cli_value: Optional[bool], file_cfg: Dict[str, Any], key: str) -> bool:
    if cli_value is not None:
        return bool(cli_value)
    value = file_cfg.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def build_resolution_config(args, file_cfg: Dict[str, Any], now: Optional[datetime] = None) -> ResolutionConfig:
    """Compose the immutable ResolutionConfig for one resolution.

    Args:
        args: Parsed CLI arguments (resolve command)
        file_cfg: ``versioning`` section from the config file
        now: Clock value used when no timestamp is given

    Returns:
        ResolutionConfig
    """
    timestamp = getattr(args, "TIMESTAMP", None)
    if not timestamp:
        fmt = file_cfg.get("timestamp_format") or Constants.TIMESTAMP_FORMAT
        timestamp = (now or datetime.now()).strftime(str(fmt))

    return ResolutionConfig(
        build_server_mode=_flag(getattr(args, "BUILD_SERVER", None), file_cfg, "build_server_mode"),
        release_mode=_flag(getattr(args, "RELEASE", None), file_cfg, "release_mode"),
        use_all_tags=_flag(getattr(args, "ALL_TAGS", None), file_cfg, "use_all_tags"),
        timestamp=timestamp,
        is_dirty=bool(getattr(args, "DIRTY", False)),
        verbatim_tag=bool(getattr(args, "TAG", None)),
    )
