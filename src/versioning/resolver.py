"""Resolve a describe/CI tag into the published version string."""

import logging
from typing import Optional, Sequence, Tuple

from constants import Constants

from . import grammar
from .models import (
    Rejected,
    ResolutionConfig,
    ResolutionError,
    ResolutionResult,
    TagRecord,
    VersionTag,
)

logger = logging.getLogger(__name__)


def find_described_tag(candidate: str, tags: Sequence[TagRecord]) -> Optional[TagRecord]:
    """Return the tag that ``git describe`` built ``candidate`` from.

    Describe output is the nearest tag name plus an optional distance suffix,
    so the described tag is the longest tag name that prefixes the candidate.
    Equal lengths fall back to the smallest name.
    """
    best = None
    for record in tags:
        if not record.name or not candidate.startswith(record.name):
            continue
        if best is None or (-len(record.name), record.name) < (-len(best.name), best.name):
            best = record
    return best


def find_canonical_tag(commit_id: str, tags: Sequence[TagRecord]) -> Optional[TagRecord]:
    """Return the most recently created tag pointing at ``commit_id``.

    Tags created at the same instant are ordered by name; the greatest wins.
    """
    same_commit = [record for record in tags if record.commit_id == commit_id]
    if not same_commit:
        return None
    return sorted(same_commit, key=lambda record: (record.created_at, record.name))[-1]


def disambiguate(candidate: str, tags: Sequence[TagRecord]) -> Tuple[str, Optional[ResolutionError]]:
    """Rewrite ``candidate`` to name the canonical tag of its commit.

    Several tags can point at one commit (a release tag and a marker tag, for
    example) and describe picks any of them. Substituting the newest keeps the
    output stable. The distance suffix, if any, is preserved.

    Returns:
        Tuple of (candidate, error); the candidate is unchanged when no
        rewrite applies
    """
    described = find_described_tag(candidate, tags)
    if described is None:
        return candidate, None

    canonical = find_canonical_tag(described.commit_id, tags)
    # described comes from tags, so this only trips when tags is a one-shot
    # iterator already consumed by the first scan
    if canonical is None:
        return candidate, ResolutionError.AMBIGUOUS_DISAMBIGUATION

    if canonical.name != described.name:
        logger.info(
            "Tag %s shares commit %s with newer tag %s",
            described.name, described.commit_id, canonical.name,
        )
    return canonical.name + candidate[len(described.name):], None


def assemble(tag: VersionTag, config: ResolutionConfig) -> str:
    """Build the version string for a matched tag.

    Local builds get the ``.424242`` sentinel after the major number so they
    always sort ahead of server builds of the same version, plus a timestamp.
    Release builds stop after the qualifier.
    """
    parts = [tag.major_digits]

    if not config.build_server_mode:
        parts.append(f".{Constants.LOCAL_BUILD_SENTINEL}")

    parts.append(f".{tag.minor_patch_digits}")

    if tag.qualifier is not None:
        parts.append(f"-{tag.qualifier}")

    if config.release_mode:
        return "".join(parts)

    # Build servers process each commit once, no timestamp needed
    if not config.build_server_mode:
        parts.append(f"-{config.timestamp}")

    if tag.has_distance:
        parts.append(f"-{tag.distance}")

    if config.is_dirty:
        parts.append("-dirty")

    return "".join(parts)


def resolve_detailed(
    candidate: Optional[str],
    tags: Optional[Sequence[TagRecord]],
    config: ResolutionConfig,
) -> ResolutionResult:
    """Resolve a candidate tag, keeping diagnostics for the caller.

    Never raises for malformed input; failures produce an empty version and a
    ResolutionError.
    """
    if not candidate:
        message = "No tag was available. No version number was generated."
        logger.warning(message)
        return ResolutionResult(
            version="",
            candidate=candidate,
            resolved_tag=None,
            error=ResolutionError.NO_CANDIDATE,
            diagnostics=[message],
        )

    diagnostics = []
    error = None
    resolved = candidate
    if not config.verbatim_tag and tags and isinstance(candidate, str):
        resolved, error = disambiguate(candidate, tags)
        if error is ResolutionError.AMBIGUOUS_DISAMBIGUATION:
            message = f"No tag shares the commit described by {candidate}; keeping it unchanged."
            logger.warning(message)
            diagnostics.append(message)

    matched = grammar.match(resolved)
    if isinstance(matched, Rejected):
        logger.warning(matched.reason)
        logger.warning("No version number was generated.")
        diagnostics.extend([matched.reason, "No version number was generated."])
        return ResolutionResult(
            version="",
            candidate=candidate,
            resolved_tag=resolved,
            error=ResolutionError.REJECTED,
            diagnostics=diagnostics,
        )

    version = assemble(matched, config)
    logger.debug("Resolved %s to version %s", resolved, version)
    return ResolutionResult(
        version=version,
        candidate=candidate,
        resolved_tag=resolved,
        error=error,
        diagnostics=diagnostics,
    )


def resolve(
    candidate: Optional[str],
    tags: Optional[Sequence[TagRecord]],
    config: ResolutionConfig,
) -> str:
    """Return the version string for ``candidate``, or "" when there is none."""
    return resolve_detailed(candidate, tags, config).version
