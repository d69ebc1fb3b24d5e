"""Version resolution service: ties a repository inspector to the resolver."""

import dataclasses
import logging

from repository.inspector import RepositoryInspector

from .models import ResolutionConfig, ResolutionError, ResolutionResult
from .resolver import resolve_detailed

logger = logging.getLogger(__name__)


class VersionResolutionService:
    """Collects repository facts and resolves them into a version string."""

    def __init__(self, inspector: RepositoryInspector):
        self.inspector = inspector

    def resolve(self, config: ResolutionConfig) -> ResolutionResult:
        """Resolve the version for the inspected repository.

        In release mode a verbatim CI tag wins over describe output and skips
        tag disambiguation; CI checks out the tag itself, so the tree is clean.
        """
        if not self.inspector.has_repository():
            message = "No repository was found. No version number was generated."
            logger.warning(message)
            return ResolutionResult(
                version="",
                candidate=None,
                resolved_tag=None,
                error=ResolutionError.NO_REPOSITORY,
                diagnostics=[message],
            )

        ci_tag = self.inspector.verbatim_tag()
        if ci_tag and config.release_mode:
            logger.info("CI provided the tag %s", ci_tag)
            config = dataclasses.replace(config, verbatim_tag=True, is_dirty=False)
            return resolve_detailed(ci_tag, None, config)

        candidate = self.inspector.describe(config.use_all_tags)
        tags = self.inspector.tags()
        config = dataclasses.replace(
            config,
            verbatim_tag=False,
            is_dirty=config.is_dirty or self.inspector.is_dirty(),
        )
        return resolve_detailed(candidate, tags, config)
