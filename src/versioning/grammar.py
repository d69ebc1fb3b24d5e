"""Version tag grammar.

A version tag as produced by ``git describe`` looks like
``v1.0.0-beta-2-1-gbd478ea``; everything after ``v1.0.0`` is optional. The
grammar is published in pieces so release tooling can validate tags with the
exact rules used here:

- ``MAIN_VERSION_REGEX``: ``v`` then major, minor and patch numbers.
- ``QUALIFIER_REGEX``: ``-alpha-N``, ``-beta-N`` or ``-rc-N``.
- ``COMMITS_REGEX``: ``-<commits>-g<abbreviated hash>`` appended by describe.

``VERSION_REGEX`` combines them, anchored at both ends; each optional piece
must match in full if it appears at all.
"""

import logging
import re
from typing import Iterable, List, Union

from .models import Qualifier, QualifierKind, Rejected, TagRecord, VersionTag

logger = logging.getLogger(__name__)

MAIN_VERSION_REGEX = r"v(?P<major>[0-9]+)\.(?P<minor>[0-9]+)\.(?P<patch>[0-9]+)"
QUALIFIER_REGEX = r"-(?P<qualifier>(?P<kind>alpha|beta|rc)-(?P<number>[0-9]+))"
COMMITS_REGEX = r"-(?P<commits>[0-9]+)-(?P<sha>g[0-9a-f]+)"

VERSION_REGEX = f"^{MAIN_VERSION_REGEX}(?:{QUALIFIER_REGEX})?(?:{COMMITS_REGEX})?$"
VERSION_PATTERN = re.compile(VERSION_REGEX)


def match(candidate: str) -> Union[VersionTag, Rejected]:
    """Decompose a candidate tag into its version fields.

    Args:
        candidate: Tag text, e.g. ``v2.1.3-rc-1-4-gabc123``

    Returns:
        VersionTag on success, otherwise Rejected carrying the candidate
    """
    if not isinstance(candidate, str):
        return Rejected(candidate=str(candidate), reason="candidate is not a string")

    m = VERSION_PATTERN.fullmatch(candidate)
    if m is None:
        logger.debug("Tag %r does not match %s", candidate, VERSION_REGEX)
        return Rejected(
            candidate=candidate,
            reason=f"Tag is {candidate}. This does not match the expected version number pattern.",
        )

    qualifier = None
    if m.group("qualifier") is not None:
        qualifier = Qualifier(
            kind=QualifierKind(m.group("kind")),
            number=int(m.group("number")),
            number_text=m.group("number"),
        )

    commits = m.group("commits")
    return VersionTag(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=int(m.group("patch")),
        qualifier=qualifier,
        commits_since_tag=int(commits) if commits is not None else None,
        abbreviated_hash=m.group("sha"),
        major_text=m.group("major"),
        minor_text=m.group("minor"),
        patch_text=m.group("patch"),
        commits_text=commits,
    )


def is_version_tag(name: str) -> bool:
    """Return True if ``name`` conforms to the version grammar."""
    return isinstance(name, str) and VERSION_PATTERN.fullmatch(name) is not None


def release_tags(records: Iterable[TagRecord]) -> List[TagRecord]:
    """Return the records naming a release tag, lowest version first.

    Names with a describe suffix are not release tags and are skipped. Equal
    versions keep creation order.
    """
    keyed = []
    for record in records:
        parsed = match(record.name)
        if isinstance(parsed, Rejected) or parsed.has_distance:
            continue
        keyed.append((parsed.to_semver(), record.created_at, record.name, record))
    keyed.sort(key=lambda item: item[:3])
    return [item[3] for item in keyed]
