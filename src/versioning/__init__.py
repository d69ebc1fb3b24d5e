"""Version tag grammar and version resolution."""

from .grammar import VERSION_PATTERN, VERSION_REGEX, is_version_tag, match
from .models import ResolutionConfig, ResolutionResult, TagRecord, VersionTag
from .resolver import resolve, resolve_detailed

__all__ = [
    "VERSION_PATTERN",
    "VERSION_REGEX",
    "is_version_tag",
    "match",
    "ResolutionConfig",
    "ResolutionResult",
    "TagRecord",
    "VersionTag",
    "resolve",
    "resolve_detailed",
]
