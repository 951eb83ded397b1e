"""Tests for domain models."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from prayer_circle.domain.exceptions import ValidationError
from prayer_circle.domain.models import (
    HIDDEN_PRAYER_FIELDS,
    Impression,
    Participants,
    Prayer,
    PrayerAccess,
    PrayerType,
    ensure_utc,
)


def make_prayer(**overrides) -> Prayer:
    """Build a prayer with sensible defaults."""
    values = {
        "id": "p1",
        "title": "Şifa",
        "description": "Annem için dua",
        "prayer_access": PrayerAccess.PUBLIC,
        "prayer_type": PrayerType.VISIBLE,
        "creator_id": "alice",
        "participants": Participants(users=("bob",), groups=("g1",)),
        "created_at": datetime(2024, 1, 1, tzinfo=UTC),
    }
    values.update(overrides)
    return Prayer(**values)


class TestPrayerType:
    """PrayerType enum tests."""

    def test_parse_valid(self) -> None:
        """Test valid values parse."""
        assert PrayerType.parse("hidden") is PrayerType.HIDDEN
        assert PrayerType.parse("visible") is PrayerType.VISIBLE

    def test_parse_invalid(self) -> None:
        """Test invalid value raises ValidationError."""
        with pytest.raises(ValidationError, match="Invalid prayer type"):
            PrayerType.parse("invalid")

    def test_parse_none(self) -> None:
        """Test missing value raises ValidationError."""
        with pytest.raises(ValidationError):
            PrayerType.parse(None)

    def test_is_valid(self) -> None:
        """Test is_valid helper."""
        assert PrayerType.is_valid("hidden") is True
        assert PrayerType.is_valid("secret") is False
        assert PrayerType.is_valid(None) is False


class TestPrayerAccess:
    """PrayerAccess enum tests."""

    def test_parse_invalid(self) -> None:
        """Test invalid access raises ValidationError."""
        with pytest.raises(ValidationError, match="Invalid prayer access modifier"):
            PrayerAccess.parse("friends")

    def test_validation_error_is_value_error(self) -> None:
        """Test ValidationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            PrayerAccess.parse(None)


class TestParticipants:
    """Participants value object tests."""

    def test_duplicates_collapsed(self) -> None:
        """Test duplicate ids are removed, order kept."""
        participants = Participants(users=("a", "b", "a"), groups=("g", "g"))
        assert participants.users == ("a", "b")
        assert participants.groups == ("g",)

    def test_from_dict_missing_keys(self) -> None:
        """Test missing keys default to empty."""
        participants = Participants.from_dict(None)
        assert participants.users == ()
        assert participants.groups == ()

    def test_to_dict(self) -> None:
        """Test serialization."""
        assert Participants(users=("a",)).to_dict() == {"users": ["a"], "groups": []}


class TestPrayer:
    """Prayer model tests."""

    def test_to_dict_uses_camel_case(self) -> None:
        """Test serialization keys."""
        data = make_prayer().to_dict()
        assert data["id"] == "p1"
        assert data["creatorId"] == "alice"
        assert data["prayerType"] == "visible"
        assert data["prayerAccess"] == "public"
        assert data["participants"] == {"users": ["bob"], "groups": ["g1"]}
        assert data["isOpen"] is True
        assert data["impressionCount"] == 0

    def test_to_document_excludes_id(self) -> None:
        """Test stored document has no id."""
        assert "id" not in make_prayer().to_document()

    def test_from_dict_round_trip(self) -> None:
        """Test deserialization restores the prayer."""
        prayer = make_prayer(end_date_time=datetime(2024, 2, 1, tzinfo=UTC))
        restored = Prayer.from_dict(prayer.id, prayer.to_document())
        assert restored == prayer

    def test_hidden_open_prayer_is_redacted(self) -> None:
        """Test hidden and open prayer exposes only whitelisted fields."""
        prayer = make_prayer(prayer_type=PrayerType.HIDDEN)
        data = prayer.to_visible_dict()

        assert prayer.is_concealed is True
        assert set(data) == set(HIDDEN_PRAYER_FIELDS)
        assert "creatorId" not in data
        assert "participants" not in data

    def test_hidden_closed_prayer_is_full(self) -> None:
        """Test hidden prayer shows every field once closed."""
        prayer = make_prayer(prayer_type=PrayerType.HIDDEN, is_open=False)
        assert prayer.is_concealed is False
        assert prayer.to_visible_dict() == prayer.to_dict()

    def test_visible_prayer_is_full(self) -> None:
        """Test visible prayer shows every field."""
        prayer = make_prayer()
        assert prayer.to_visible_dict()["creatorId"] == "alice"

    def test_is_owned_by(self) -> None:
        """Test ownership check."""
        prayer = make_prayer()
        assert prayer.is_owned_by("alice") is True
        assert prayer.is_owned_by("bob") is False
        assert prayer.is_owned_by(None) is False

    def test_immutable(self) -> None:
        """Test prayer is immutable."""
        prayer = make_prayer()
        with pytest.raises(Exception):  # FrozenInstanceError
            prayer.creator_id = "mallory"  # type: ignore


class TestImpression:
    """Impression model tests."""

    def test_round_trip(self) -> None:
        """Test impression serialization."""
        impression = Impression(id="i1", content="Amin", user_id="bob")
        data = impression.to_dict()
        assert data["userId"] == "bob"
        assert Impression.from_dict("i1", data) == impression


class TestEnsureUtc:
    """ensure_utc helper tests."""

    def test_naive_is_treated_as_utc(self) -> None:
        """Test naive datetime gets UTC tzinfo."""
        value = ensure_utc(datetime(2024, 1, 1, 12, 0))
        assert value == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def test_aware_is_converted(self) -> None:
        """Test aware datetime is converted to UTC."""
        istanbul = timezone(timedelta(hours=3))
        value = ensure_utc(datetime(2024, 1, 1, 15, 0, tzinfo=istanbul))
        assert value == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        assert value.tzinfo is UTC

    def test_none(self) -> None:
        """Test None passes through."""
        assert ensure_utc(None) is None

    def test_overflow_is_validation_error(self) -> None:
        """Test a date that cannot be shifted to UTC is rejected."""
        early = datetime(1, 1, 1, 0, 0, tzinfo=timezone(timedelta(hours=5)))
        with pytest.raises(ValidationError, match="Invalid end date time"):
            ensure_utc(early)
