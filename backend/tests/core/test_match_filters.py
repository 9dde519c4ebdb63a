"""Tests for match filter rules: mixed groups match any level."""

from studyhub.core.domain_types import MatchType
from studyhub.core.matching import group_levels_for, resolve_match_type


def test_no_level_means_no_filter():
    assert group_levels_for(None) is None
    assert group_levels_for("") is None


def test_specific_level_also_accepts_mixed():
    assert set(group_levels_for("advanced")) == {"advanced", "mixed"}


def test_mixed_level_matches_only_mixed():
    assert group_levels_for("mixed") == ["mixed"]


def test_group_type_selects_group_search():
    assert resolve_match_type("group") is MatchType.GROUP


def test_any_other_type_selects_user_search():
    assert resolve_match_type(None) is MatchType.USER
    assert resolve_match_type("user") is MatchType.USER
    assert resolve_match_type("groups") is MatchType.USER
