"""Data models for tag matching and version resolution."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

import semantic_version


class QualifierKind(Enum):
    """Pre-release markers accepted in a version tag."""
    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"


class ResolutionError(Enum):
    """Reasons a resolution produced no version (or fell back)."""
    REJECTED = "rejected"
    NO_CANDIDATE = "no_candidate"
    NO_REPOSITORY = "no_repository"
    AMBIGUOUS_DISAMBIGUATION = "ambiguous_disambiguation"


@dataclass(frozen=True)
class Qualifier:
    """Pre-release qualifier, e.g. ``beta-2``."""
    kind: QualifierKind
    number: int
    number_text: Optional[str] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return f"{self.kind.value}-{_digits(self.number, self.number_text)}"


def _digits(value: Optional[int], text: Optional[str]) -> str:
    return text if text is not None else str(value)


@dataclass(frozen=True)
class VersionTag:
    """Fields of a tag that matched the version grammar.

    The ``*_text`` fields keep the digits exactly as matched, so zero-padded
    numbers survive reassembly. They default to the plain int rendering.
    """
    major: int
    minor: int
    patch: int
    qualifier: Optional[Qualifier] = None
    commits_since_tag: Optional[int] = None
    abbreviated_hash: Optional[str] = None  # includes the leading 'g'
    major_text: Optional[str] = field(default=None, compare=False, repr=False)
    minor_text: Optional[str] = field(default=None, compare=False, repr=False)
    patch_text: Optional[str] = field(default=None, compare=False, repr=False)
    commits_text: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def has_distance(self) -> bool:
        """True when both describe suffix fields were matched."""
        return self.commits_since_tag is not None and self.abbreviated_hash is not None

    @property
    def major_digits(self) -> str:
        return _digits(self.major, self.major_text)

    @property
    def minor_patch_digits(self) -> str:
        """Minor and patch as matched, e.g. ``02.003``."""
        return f"{_digits(self.minor, self.minor_text)}.{_digits(self.patch, self.patch_text)}"

    @property
    def distance(self) -> Optional[str]:
        """Describe suffix without the leading dash, e.g. ``4-gabc123``."""
        if not self.has_distance:
            return None
        return f"{_digits(self.commits_since_tag, self.commits_text)}-{self.abbreviated_hash}"

    @property
    def tag(self) -> str:
        """Reassemble the tag text as it was matched."""
        text = f"v{self.major_digits}.{self.minor_patch_digits}"
        if self.qualifier is not None:
            text += f"-{self.qualifier}"
        if self.has_distance:
            text += f"-{self.distance}"
        return text

    def to_semver(self) -> semantic_version.Version:
        """Return the release part of the tag as a semantic_version.Version.

        The describe suffix is dropped; it says nothing about release order.
        """
        prerelease = ()
        if self.qualifier is not None:
            prerelease = (self.qualifier.kind.value, str(self.qualifier.number))
        return semantic_version.Version(
            major=self.major,
            minor=self.minor,
            patch=self.patch,
            prerelease=prerelease,
        )


@dataclass(frozen=True)
class Rejected:
    """A candidate that does not conform to the version grammar."""
    candidate: str
    reason: str

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class TagRecord:
    """One repository tag as reported by the repository inspector."""
    name: str
    commit_id: str
    created_at: datetime


@dataclass(frozen=True)
class ResolutionConfig:
    """Build-mode flags for a single resolution.

    ``verbatim_tag`` marks a candidate taken as-is from CI metadata; such
    candidates skip same-commit disambiguation.
    """
    build_server_mode: bool = False
    release_mode: bool = False
    use_all_tags: bool = False
    timestamp: str = ""
    is_dirty: bool = False
    verbatim_tag: bool = False


@dataclass
class ResolutionResult:
    """Resolution outcome; an empty version means "no version"."""
    version: str
    candidate: Optional[str]
    resolved_tag: Optional[str]
    error: Optional[ResolutionError]
    diagnostics: List[str] = field(default_factory=list)

    @property
    def has_version(self) -> bool:
        """Whether a version string was produced."""
        return bool(self.version)
