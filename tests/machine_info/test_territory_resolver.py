"""
Unit tests for the territory resolver.

The last matching assignment wins; these tests pin that behavior.
"""

import pytest

from machine_info.config import MergeSettings
from machine_info.models import TerritoryAssignment
from machine_info.territory_resolver import (
    GROUP_TRACK,
    OWNER_TRACK,
    is_general,
    resolve_territory,
    resolve_track,
)


def row(category_id, name=None, owner=None, group_name=None, group_owner=None):
    return TerritoryAssignment(category_id, name, owner, group_name, group_owner)


class TestResolveTrack:
    """Tests for resolve_track."""

    @pytest.mark.parametrize("assignments", [None, []])
    def test_absent_or_empty_list(self, assignments):
        assert resolve_track(assignments, "3") == ""

    def test_name_and_owner_joined(self):
        assert resolve_track([row("3", "North", "Smith")], "3") == "North-Smith"

    def test_name_only_has_no_joiner(self):
        assert resolve_track([row("3", "North", None)], "3") == "North"

    def test_owner_only_has_no_joiner(self):
        assert resolve_track([row("3", None, "Smith")], "3") == "Smith"

    def test_empty_name_has_no_joiner(self):
        assert resolve_track([row("3", "", "Smith")], "3") == "Smith"

    @pytest.mark.parametrize("name", ["General", "general", "  GENERAL  ", "General "])
    def test_general_sentinel_ignores_owner(self, name):
        assert resolve_track([row("3", name, "Smith")], "3") == "General"

    def test_non_matching_category_ignored(self):
        assert resolve_track([row("2", "North", "Smith")], "3") == ""

    def test_last_match_wins(self):
        assignments = [row("3", "North", "Smith"), row("3", "South", "Jones")]
        assert resolve_track(assignments, "3") == resolve_track([assignments[1]], "3")
        assert resolve_track(assignments, "3") == "South-Jones"

    def test_later_non_match_does_not_reset(self):
        assignments = [row("3", "North", "Smith"), row("2", "Other", "Person")]
        assert resolve_track(assignments, "3") == "North-Smith"

    def test_group_track(self):
        assignments = [row("3", "North", "Smith", "Great Lakes", "Adams")]
        assert resolve_track(assignments, "3", GROUP_TRACK) == "Great Lakes-Adams"
        assert resolve_track(assignments, "3", OWNER_TRACK) == "North-Smith"

    def test_custom_general_label(self):
        assert resolve_track([row("3", "Open", "Smith")], "3", general_label="Open") == "Open"

    def test_integer_category_from_document(self):
        assignment = TerritoryAssignment.from_dict(
            {"catId": 3, "territoryName": "North", "territoryOwner": "Smith"}
        )
        assert resolve_track([assignment], "3") == "North-Smith"


class TestResolveTerritory:
    """Tests for resolve_territory."""

    def test_both_tracks_and_raw_names(self):
        assignments = [
            row("3", "North", "Smith", "Great Lakes", "Adams"),
            row("3", "South", "Jones", "Gulf", None),
        ]
        display = resolve_territory(assignments, "3")
        assert display.owner == "South-Jones"
        assert display.group_owner == "Gulf"
        assert display.territory_name == "South"
        assert display.group_name == "Gulf"

    def test_category_selected_by_caller(self):
        assignments = [row("3", "North", "Smith"), row("2", "Region", "Lee")]
        assert resolve_territory(assignments, "2").owner == "Region-Lee"
        assert resolve_territory(assignments, "3").owner == "North-Smith"

    def test_no_match_is_empty_not_none(self):
        display = resolve_territory([row("2", "Region", "Lee")], "3", MergeSettings())
        assert display.owner == ""
        assert display.group_owner == ""
        assert display.territory_name == ""
        assert display.group_name == ""

    def test_is_general(self):
        assert is_general(" general ")
        assert not is_general("Generals")
