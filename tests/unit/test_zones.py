#!/usr/bin/env python3
"""Unit tests for the zone model."""

import pytest

from goldfish.errors import CardNotFound, InsufficientLibrary
from goldfish.zones import Zone, ZoneView, Zones


class TestZoneBasics:
    """Test multiset queries and name normalization."""

    def test_names_are_normalized(self):
        """Card identity is case-insensitive."""
        zone = Zone("hand", ["Forest", "  GIANT  Growth "])
        assert zone.contains("forest")
        assert zone.cards() == ("forest", "giant growth")

    def test_count(self):
        zone = Zone("hand", ["forest", "forest", "rancor"])
        assert zone.count("forest") == 2
        assert zone.count("forest", "rancor") == 3
        assert zone.count() == 3

    def test_find_first_uses_argument_order(self):
        """find_first() returns the first requested card present, not the first in the zone."""
        zone = Zone("hand", ["rancor", "forest"])
        assert zone.find_first("forest", "rancor") == "forest"
        assert zone.find_first("pendelhaven") is None

    def test_find_all_uses_zone_order(self):
        zone = Zone("hand", ["rancor", "forest", "rancor"])
        assert zone.find_all("forest", "rancor") == ["rancor", "forest", "rancor"]

    def test_first_on_empty_zone(self):
        with pytest.raises(CardNotFound):
            Zone("hand").first()

    def test_remove_missing_card(self):
        """Removing an absent card is a CardNotFound."""
        zone = Zone("hand", ["forest"])
        with pytest.raises(CardNotFound) as exc:
            zone.remove("rancor")
        assert exc.value.zone == "hand"


class TestLibrary:
    """Test ordered draws."""

    def test_draw_from_front(self):
        library = Zone("library", ["a", "b", "c"], ordered=True)
        assert library.draw(2) == ["a", "b"]
        assert library.cards() == ("c",)

    def test_add_to_bottom(self):
        library = Zone("library", ["a"], ordered=True)
        library.add_to_bottom("b")
        assert library.draw(2) == ["a", "b"]

    def test_insufficient_library(self):
        """Overdrawing raises and removes nothing."""
        library = Zone("library", ["a", "b"], ordered=True)
        with pytest.raises(InsufficientLibrary) as exc:
            library.draw(3)
        assert exc.value.requested == 3
        assert exc.value.available == 2
        assert len(library) == 2

    def test_negative_draw(self):
        with pytest.raises(ValueError):
            Zone("library", ["a"]).draw(-1)


class TestTapState:
    """Test per-occurrence tap flags."""

    def test_duplicates_tap_independently(self):
        board = Zone("board", ["forest", "forest"], tracks_tap=True)
        assert board.tap("forest") == 0
        assert board.tap("forest") == 1
        assert board.count_untapped("forest") == 0

    def test_tap_without_untapped_occurrence(self):
        board = Zone("board", ["forest"], tracks_tap=True)
        board.tap("forest")
        with pytest.raises(CardNotFound):
            board.tap("forest")

    def test_untap_all(self):
        board = Zone("board", ["forest", "forest", "rancor"], tracks_tap=True)
        board.tap("forest")
        board.tap("rancor")
        assert board.untap_all() == 2
        assert board.tapped_count() == 0

    def test_remove_prefers_untapped(self):
        """Removing a duplicate takes an untapped occurrence first."""
        board = Zone("board", ["forest", "forest"], tracks_tap=True)
        board.tap("forest")
        assert board.remove("forest") is False
        assert board.is_tapped(0)

    def test_find_first_untapped(self):
        board = Zone("board", ["forest", "pendelhaven"], tracks_tap=True)
        board.tap("forest")
        assert board.find_first_untapped("forest", "pendelhaven") == "pendelhaven"
        assert board.untapped("forest") == []

    def test_untracked_zone_ignores_tapped_flag(self):
        hand = Zone("hand")
        hand.add("forest", tapped=True)
        assert hand.tapped_count() == 0


class TestZoneView:
    """Test the read-only view handed to pilots."""

    def test_view_reflects_zone(self):
        zone = Zone("hand", ["forest"])
        view = ZoneView(zone)
        zone.add("rancor")
        assert "rancor" in view
        assert len(view) == 2

    def test_view_has_no_mutators(self):
        view = ZoneView(Zone("hand"))
        for name in ("add", "remove", "draw", "tap", "untap_all", "clear"):
            assert not hasattr(view, name)


class TestZones:
    """Test the five-zone container."""

    def test_total_and_snapshot(self):
        zones = Zones(library=["a", "b"], hand=["c"])
        zones.graveyard.add("d")
        assert zones.total() == 4
        assert zones.snapshot() == {"library": 2, "hand": 1, "board": 0, "graveyard": 1, "exile": 0}

    def test_unknown_zone(self):
        with pytest.raises(KeyError):
            Zones().get("sideboard")
