"""Tests for position and place-label derivation."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from bus_tracker.domain.models import GeoRecord, PlaceLabels, Position
from bus_tracker.domain.places import (
    derive_labels,
    derive_position,
    pick_name,
    render_labels,
)


@pytest.fixture
def urbana_record():
    return GeoRecord(
        city_names={"en": "Urbana", "ja": "アーバナ"},
        subdivisions=({"en": "Illinois", "fr": "Illinois"},),
        postal_code="61801",
        location=Position(40.11, -88.20),
    )


class TestDerivePosition:
    def test_record_with_location(self, urbana_record):
        assert derive_position(urbana_record) == Position(40.11, -88.20)

    def test_record_without_location(self):
        record = GeoRecord(city_names={"en": "Urbana"})
        assert derive_position(record) == Position.UNKNOWN

    def test_lookup_miss(self):
        position = derive_position(None)
        assert position == Position(0.0, 0.0)
        assert not position.is_known

    def test_idempotent(self, urbana_record):
        assert derive_position(urbana_record) == derive_position(urbana_record)


class TestDeriveLabels:
    def test_full_record_order(self, urbana_record):
        labels = derive_labels(urbana_record)
        assert labels.labels == ("Urbana", "Illinois", "61801")
        assert labels.render() == "Urbana, Illinois, 61801"

    def test_subdivisions_keep_source_order(self):
        record = GeoRecord(
            city_names={"en": "London"},
            subdivisions=({"en": "England"}, {"en": "Greater London"}),
        )
        assert derive_labels(record).labels == ("London", "England", "Greater London")

    def test_lookup_miss_is_empty(self):
        labels = derive_labels(None)
        assert labels.labels == ()
        assert render_labels(labels) == ""

    def test_record_without_fields_is_empty(self):
        labels = derive_labels(GeoRecord())
        assert len(labels) == 0
        assert labels.render() == ""

    def test_postal_code_only(self):
        assert derive_labels(GeoRecord(postal_code="61801")).labels == ("61801",)

    def test_missing_locale_contributes_nothing(self):
        """A name set without the locale is skipped, never guessed."""
        record = GeoRecord(
            city_names={"de": "München"},
            subdivisions=({"en": "Bavaria"},),
        )
        assert derive_labels(record).labels == ("Bavaria",)

    def test_other_locale(self, urbana_record):
        labels = derive_labels(urbana_record, locale="ja")
        assert labels.labels == ("アーバナ", "61801")

    def test_idempotent(self, urbana_record):
        assert derive_labels(urbana_record) == derive_labels(urbana_record)


class TestPickName:
    def test_picks_requested_locale(self):
        assert pick_name({"fr": "Londres", "en": "London"}, "en") == "London"

    def test_empty_name_is_none(self):
        assert pick_name({"en": ""}, "en") is None

    def test_empty_mapping(self):
        assert pick_name({}) is None


class TestRendering:
    def test_uses_comma_separator(self):
        assert PlaceLabels(("a", "b")).render() == "a, b"

    def test_custom_separator(self):
        assert render_labels(PlaceLabels(("a", "b")), " / ") == "a / b"


class TestPosition:
    def test_rejects_out_of_range_latitude(self):
        with pytest.raises(ValueError):
            Position(91.0, 0.0)

    def test_rejects_out_of_range_longitude(self):
        with pytest.raises(ValueError):
            Position(0.0, -181.0)

    def test_real_coordinate_is_known(self):
        assert Position(40.11, -88.20).is_known
