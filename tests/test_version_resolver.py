"""Tests for same-commit tag disambiguation and version assembly."""

import itertools
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from versioning.models import ResolutionConfig, ResolutionError, TagRecord
from versioning.resolver import (
    disambiguate,
    find_canonical_tag,
    find_described_tag,
    resolve,
    resolve_detailed,
)

TIMESTAMP = "20240501103000"
T0 = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def tag(name, commit, minutes=0):
    """Helper to create a tag record created ``minutes`` after T0."""
    return TagRecord(name=name, commit_id=commit, created_at=T0 + timedelta(minutes=minutes))


def config(**overrides):
    """Helper to create a resolution config with a fixed timestamp."""
    values = {"timestamp": TIMESTAMP}
    values.update(overrides)
    return ResolutionConfig(**values)


@pytest.fixture
def same_commit_tags():
    """A release tag and a newer tag pointing at the same commit."""
    return [
        tag("v1.0.0", "c1", minutes=0),
        tag("v1.0.1", "c1", minutes=30),
        tag("v0.9.0", "c0", minutes=-600),
    ]


class TestDisambiguation:
    """Selection of the described and canonical tags."""

    def test_rewrites_to_newest_tag_and_keeps_suffix(self, same_commit_tags):
        rewritten, error = disambiguate("v1.0.0-3-gabc123", same_commit_tags)
        assert rewritten == "v1.0.1-3-gabc123"
        assert error is None

    def test_rewrites_exact_tag(self, same_commit_tags):
        rewritten, _ = disambiguate("v1.0.0", same_commit_tags)
        assert rewritten == "v1.0.1"

    def test_newest_tag_already_described(self, same_commit_tags):
        rewritten, error = disambiguate("v1.0.1-2-gabc", same_commit_tags)
        assert rewritten == "v1.0.1-2-gabc"
        assert error is None

    def test_unknown_candidate_unchanged(self, same_commit_tags):
        rewritten, error = disambiguate("v5.0.0-1-gabc", same_commit_tags)
        assert rewritten == "v5.0.0-1-gabc"
        assert error is None

    def test_longest_prefix_wins(self):
        tags = [
            tag("v1.0.1", "c1", minutes=0),
            tag("v1.0.10", "c2", minutes=10),
            tag("v1.0.11", "c2", minutes=20),
        ]
        described = find_described_tag("v1.0.10-2-gabc", tags)
        assert described.name == "v1.0.10"
        rewritten, _ = disambiguate("v1.0.10-2-gabc", tags)
        assert rewritten == "v1.0.11-2-gabc"

    def test_prefix_selection_does_not_depend_on_order(self):
        tags = [tag("v1.0.1", "c1"), tag("v1.0.10", "c2")]
        assert find_described_tag("v1.0.10-2-gabc", tags).name == "v1.0.10"
        assert find_described_tag("v1.0.10-2-gabc", list(reversed(tags))).name == "v1.0.10"

    def test_equal_timestamps_pick_greatest_name(self):
        tags = [tag("v2.0.0-rc-1", "c9", 5), tag("v2.0.0", "c9", 5), tag("v1.9.0", "c8", 1)]
        assert find_canonical_tag("c9", tags).name == "v2.0.0-rc-1"
        assert find_canonical_tag("c9", list(reversed(tags))).name == "v2.0.0-rc-1"

    def test_canonical_tag_for_unknown_commit(self, same_commit_tags):
        assert find_canonical_tag("missing", same_commit_tags) is None

    def test_commit_id_is_unchanged(self, same_commit_tags):
        described = find_described_tag("v1.0.0-3-gabc123", same_commit_tags)
        canonical = find_canonical_tag(described.commit_id, same_commit_tags)
        assert canonical.commit_id == described.commit_id

    def test_newer_non_version_tag_is_selected(self):
        tags = [tag("v1.0.0", "c1", 0), tag("marker", "c1", 5)]
        rewritten, _ = disambiguate("v1.0.0-3-gabc", tags)
        assert rewritten == "marker-3-gabc"
        assert resolve("v1.0.0-3-gabc", tags, config(build_server_mode=True)) == ""

    def test_caller_tags_not_mutated(self, same_commit_tags):
        before = list(same_commit_tags)
        resolve("v1.0.0-3-gabc123", same_commit_tags, config())
        assert same_commit_tags == before

    def test_missing_canonical_keeps_candidate(self, same_commit_tags, caplog):
        with patch("versioning.resolver.find_canonical_tag", return_value=None):
            with caplog.at_level(logging.WARNING):
                result = resolve_detailed("v1.0.0-3-gabc", same_commit_tags, config(build_server_mode=True))
        assert result.version == "1.0.0-3-gabc"
        assert result.resolved_tag == "v1.0.0-3-gabc"
        assert result.error is ResolutionError.AMBIGUOUS_DISAMBIGUATION
        assert any("keeping it unchanged" in message for message in result.diagnostics)
        assert "keeping it unchanged" in caplog.text

    def test_consumed_iterator_keeps_candidate(self, same_commit_tags):
        result = resolve_detailed("v1.0.0-3-gabc", iter(same_commit_tags), config(build_server_mode=True))
        assert result.version == "1.0.0-3-gabc"
        assert result.error is ResolutionError.AMBIGUOUS_DISAMBIGUATION


class TestResolve:
    """Version string assembly across build modes."""

    def test_describe_rewrite_with_suffix(self, same_commit_tags):
        result = resolve("v1.0.0-3-gabc123", same_commit_tags, config(build_server_mode=True))
        assert result == "1.0.1-3-gabc123"

    def test_local_build(self):
        assert resolve("v2.1.3", [], config()) == f"2.424242.1.3-{TIMESTAMP}"

    def test_build_server_build(self):
        assert resolve("v2.1.3-4-gabc123", [], config(build_server_mode=True)) == "2.1.3-4-gabc123"

    @pytest.mark.parametrize("build_server_mode,is_dirty", list(itertools.product([True, False], repeat=2)))
    def test_release_build_stops_after_qualifier(self, build_server_mode, is_dirty):
        result = resolve(
            "v3.0.0-beta-2",
            [],
            config(release_mode=True, build_server_mode=build_server_mode, is_dirty=is_dirty),
        )
        expected = "3.0.0-beta-2" if build_server_mode else "3.424242.0.0-beta-2"
        assert result == expected

    def test_release_build_drops_distance(self):
        assert resolve("v3.0.0-7-gabc", [], config(release_mode=True, build_server_mode=True)) == "3.0.0"

    def test_dirty_build_server(self):
        assert resolve("v1.0.0", [], config(build_server_mode=True, is_dirty=True)) == "1.0.0-dirty"

    def test_local_build_with_every_piece(self):
        result = resolve("v1.2.3-rc-1-4-gabc", [], config(is_dirty=True))
        assert result == f"1.424242.2.3-rc-1-{TIMESTAMP}-4-gabc-dirty"

    def test_verbatim_tag_skips_disambiguation(self, same_commit_tags):
        result = resolve_detailed(
            "v1.0.0",
            same_commit_tags,
            config(build_server_mode=True, release_mode=True, verbatim_tag=True),
        )
        assert result.version == "1.0.0"
        assert result.resolved_tag == "v1.0.0"

    def test_no_tags_skips_disambiguation(self):
        assert resolve("v1.0.0", None, config(build_server_mode=True)) == "1.0.0"

    @pytest.mark.parametrize("candidate", [None, ""])
    @pytest.mark.parametrize("flags", list(itertools.product([True, False], repeat=3)))
    def test_missing_candidate_yields_empty(self, candidate, flags):
        build_server_mode, release_mode, is_dirty = flags
        cfg = config(build_server_mode=build_server_mode, release_mode=release_mode, is_dirty=is_dirty)
        assert resolve(candidate, [tag("v1.0.0", "c1")], cfg) == ""

    def test_missing_candidate_error(self):
        result = resolve_detailed(None, [], config())
        assert result.error is ResolutionError.NO_CANDIDATE
        assert not result.has_version
        assert result.diagnostics

    def test_rejected_candidate(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = resolve_detailed("1.0.0", [], config())
        assert result.version == ""
        assert result.error is ResolutionError.REJECTED
        assert "does not match the expected version number pattern" in caplog.text
        assert "No version number was generated." in result.diagnostics

    @pytest.mark.parametrize("candidate,expected", [
        ("v2024.01.05-007-gabc", "2024.01.05-007-gabc"),
        ("v01.02.003", "01.02.003"),
        ("v1.0.0-rc-01-007-gabc", "1.0.0-rc-01-007-gabc"),
    ])
    def test_zero_padded_digits_are_kept(self, candidate, expected):
        assert resolve(candidate, [], config(build_server_mode=True)) == expected

    def test_zero_padded_local_build(self):
        assert resolve("v1.0.05", [], config()) == f"1.424242.0.05-{TIMESTAMP}"

    def test_successful_result_has_no_error(self):
        result = resolve_detailed("v1.0.0", [], config(build_server_mode=True))
        assert result.has_version
        assert result.error is None
        assert result.diagnostics == []
