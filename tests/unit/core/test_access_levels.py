"""Unit tests for the AccessLevel hierarchy and its display configuration."""

import itertools

import pytest

from app.config.access_levels import (
    ACCESS_LEVEL_CONFIG,
    CHANNEL_PRESETS,
    get_access_level_label,
)
from app.models.access_token import AccessLevel

ORDER = [AccessLevel.PUBLIC, AccessLevel.AFTER_CLICK, AccessLevel.AFTER_RFQ]


class TestAccessLevelOrdering:
    def test_ranks_are_ordered(self):
        assert [level.rank for level in ORDER] == [0, 1, 2]

    @pytest.mark.parametrize("viewer,required", list(itertools.product(ORDER, ORDER)))
    def test_includes_iff_rank_at_least(self, viewer, required):
        assert viewer.includes(required) is (viewer.rank >= required.rank)

    def test_after_click_cannot_see_after_rfq(self):
        assert AccessLevel.AFTER_CLICK.includes(AccessLevel.PUBLIC)
        assert not AccessLevel.AFTER_CLICK.includes(AccessLevel.AFTER_RFQ)

    def test_highest_is_after_rfq(self):
        assert AccessLevel.highest() is AccessLevel.AFTER_RFQ


class TestAccessLevelParse:
    def test_parses_known_strings(self):
        assert AccessLevel.parse("after_click") is AccessLevel.AFTER_CLICK

    def test_passes_enum_through(self):
        assert AccessLevel.parse(AccessLevel.AFTER_RFQ) is AccessLevel.AFTER_RFQ

    @pytest.mark.parametrize("value", ["admin", "AFTER_RFQ", "", None, "2"])
    def test_unknown_falls_back_to_public(self, value):
        assert AccessLevel.parse(value) is AccessLevel.PUBLIC

    def test_unknown_uses_explicit_default(self):
        assert AccessLevel.parse("bogus", default=AccessLevel.AFTER_RFQ) is AccessLevel.AFTER_RFQ


class TestDisplayConfig:
    def test_every_level_has_config(self):
        assert set(ACCESS_LEVEL_CONFIG) == set(AccessLevel)

    def test_labels(self):
        assert get_access_level_label(AccessLevel.AFTER_RFQ) == "Full Access"
        assert get_access_level_label("after_click", short=True) == "Link"

    def test_unknown_label_is_public(self):
        assert get_access_level_label("mystery") == "Browse Mode"

    def test_presets_are_link_level(self):
        assert all(p.access_level is AccessLevel.AFTER_CLICK for p in CHANNEL_PRESETS)
