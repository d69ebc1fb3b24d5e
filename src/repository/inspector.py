"""Repository inspector: the inputs version resolution needs from a checkout.

The resolver itself never touches the filesystem or runs git. It is fed by an
inspector, which reports the describe output, the tag list, the dirty flag and
an optional verbatim CI tag. ``StaticInspector`` holds values in memory;
``SnapshotInspector`` reads a YAML or JSON snapshot written by other tooling.
"""
from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

import yaml

from constants import Constants
from versioning.models import TagRecord

logger = logging.getLogger(__name__)


class RepositoryInspector(ABC):
    """Source of repository facts for a resolution."""

    @abstractmethod
    def has_repository(self) -> bool:
        """Whether a repository was found at all."""

    @abstractmethod
    def verbatim_tag(self) -> Optional[str]:
        """Tag supplied verbatim by CI metadata, if any."""

    @abstractmethod
    def describe(self, all_tags: bool = False) -> Optional[str]:
        """Describe output for HEAD, or None when no tag is reachable."""

    @abstractmethod
    def tags(self) -> List[TagRecord]:
        """Every tag in the repository."""

    @abstractmethod
    def is_dirty(self) -> bool:
        """Whether the working tree has uncommitted changes."""


class StaticInspector(RepositoryInspector):
    """Inspector over values supplied directly by the caller."""

    def __init__(
        self,
        describe: Optional[str] = None,
        tags: Optional[Iterable[TagRecord]] = None,
        dirty: bool = False,
        ci_tag: Optional[str] = None,
        describe_all: Optional[str] = None,
        found: bool = True,
    ):
        self._describe = describe
        self._describe_all = describe_all
        self._tags = list(tags or [])
        self._dirty = dirty
        self._ci_tag = ci_tag
        self._found = found

    def has_repository(self) -> bool:
        return self._found

    def verbatim_tag(self) -> Optional[str]:
        if self._ci_tag and self._ci_tag.startswith(Constants.TAG_REF_PREFIX):
            return self._ci_tag[len(Constants.TAG_REF_PREFIX):] or None
        return self._ci_tag

    def describe(self, all_tags: bool = False) -> Optional[str]:
        if all_tags and self._describe_all:
            return self._describe_all
        return self._describe

    def tags(self) -> List[TagRecord]:
        return list(self._tags)

    def is_dirty(self) -> bool:
        return self._dirty


def parse_created(value: Any) -> datetime:
    """Convert a snapshot ``created`` value to an aware UTC datetime.

    Accepts datetimes (YAML timestamps), dates (midnight UTC), ISO-8601
    strings with an optional trailing ``Z``, and epoch seconds.

    Raises:
        ValueError: If the value cannot be interpreted
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp: {value!r}")
    if isinstance(value, datetime):
        created = value
    elif isinstance(value, date):
        created = datetime.combine(value, time(), tzinfo=timezone.utc)
    elif isinstance(value, (int, float)):
        created = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        created = datetime.fromisoformat(text)
    else:
        raise ValueError(f"invalid timestamp: {value!r}")

    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.astimezone(timezone.utc)


def parse_tag_entries(entries: Any) -> List[TagRecord]:
    """Build TagRecords from snapshot ``tags`` entries, skipping bad ones."""
    if not isinstance(entries, list):
        if entries is not None:
            logger.warning("Snapshot 'tags' is not a list; ignoring it")
        return []

    records = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Skipping tag entry %d: not a mapping", index)
            continue
        name = entry.get("name")
        commit = entry.get("commit")
        if not isinstance(name, str) or not name or not isinstance(commit, str) or not commit:
            logger.warning("Skipping tag entry %d: missing name or commit", index)
            continue
        try:
            created = parse_created(entry.get("created"))
        except ValueError as exc:
            logger.warning("Skipping tag %s: %s", name, exc)
            continue
        records.append(TagRecord(name=name, commit_id=commit, created_at=created))
    return records


def load_document(path: str) -> Dict[str, Any]:
    """Load a YAML or JSON mapping from ``path``.

    ``.json`` files are read as JSON, anything else as YAML.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: On malformed YAML
        json.JSONDecodeError: On malformed JSON
    """
    with open(path, "r", encoding="utf-8") as fh:
        if path.lower().endswith(".json"):
            data = json.load(fh)
        else:
            data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return data


class SnapshotInspector(StaticInspector):
    """Inspector backed by a repository snapshot file.

    Snapshot layout::

        describe: v1.2.3-4-gabc123
        describe_all: v1.2.3-4-gabc123   # optional
        ci_tag: v1.2.3                   # optional
        dirty: false
        tags:
          - {name: v1.2.3, commit: 1f2e3d, created: 2024-05-01T10:00:00Z}
    """

    def __init__(self, data: Dict[str, Any], source: Optional[str] = None):
        self.source = source
        super().__init__(
            describe=_optional_str(data.get("describe")),
            describe_all=_optional_str(data.get("describe_all")),
            tags=parse_tag_entries(data.get("tags")),
            dirty=bool(data.get("dirty", False)),
            ci_tag=_optional_str(data.get("ci_tag")),
        )

    @classmethod
    def from_file(cls, path: str) -> RepositoryInspector:
        """Load a snapshot; a missing file means no repository."""
        if not os.path.isfile(path):
            logger.warning("No repository snapshot was found at %s.", path)
            return StaticInspector(found=False)
        inspector = cls(load_document(path), source=path)
        logger.debug("Loaded %d tags from %s", len(inspector.tags()), path)
        return inspector


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
