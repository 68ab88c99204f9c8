# ==============================================================================
# Tests for Date Normalization
# ==============================================================================
"""
Unit tests for classify_raw_date(), parse_date() and safe_parse_date().

Tests cover:
- Seconds vs milliseconds threshold
- Numeric strings treated as timestamps
- ISO-8601 strings with and without offsets
- datetime passthrough
- Absent, empty and malformed values (strict raises, safe returns None)
"""

import os
import time
from datetime import datetime, timedelta, timezone

import pytest

from pagevisits.core.dates import (
    EPOCH_SECONDS_THRESHOLD,
    Absent,
    EpochMillisOrIso,
    EpochSeconds,
    InvalidDateError,
    classify_raw_date,
    instant_sort_key,
    parse_date,
    safe_parse_date,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@pytest.fixture()
def local_zone(monkeypatch):
    """Switch the process-local time zone for naive ISO strings."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    original = os.environ.get("TZ")

    def _set(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield _set
    monkeypatch.delenv("TZ", raising=False)
    if original is not None:
        monkeypatch.setenv("TZ", original)
    time.tzset()


# ==============================================================================
# classify_raw_date
# ==============================================================================


class TestClassifyRawDate:
    """Tests for tagging raw values with their encoding."""

    def test_none_is_absent(self):
        assert classify_raw_date(None) == Absent()

    def test_empty_and_blank_strings_are_absent(self):
        assert classify_raw_date("") == Absent()
        assert classify_raw_date("   ") == Absent()

    def test_ten_digit_number_is_seconds(self):
        assert classify_raw_date(1_700_000_000) == EpochSeconds(1_700_000_000.0)

    def test_thirteen_digit_number_is_millis(self):
        assert classify_raw_date(1_700_000_000_000) == EpochMillisOrIso(1_700_000_000_000.0)

    def test_threshold_is_millis(self):
        assert isinstance(classify_raw_date(EPOCH_SECONDS_THRESHOLD), EpochMillisOrIso)
        assert isinstance(classify_raw_date(EPOCH_SECONDS_THRESHOLD - 1), EpochSeconds)

    def test_numeric_string_is_number(self):
        assert classify_raw_date("1700000000") == EpochSeconds(1_700_000_000.0)
        assert classify_raw_date("1700000000000") == EpochMillisOrIso(1_700_000_000_000.0)

    def test_iso_string(self):
        assert classify_raw_date("2024-06-30T12:00:00Z") == EpochMillisOrIso(
            "2024-06-30T12:00:00Z"
        )

    def test_bool_rejected(self):
        with pytest.raises(InvalidDateError, match="Invalid date type"):
            classify_raw_date(True)

    def test_non_finite_rejected(self):
        with pytest.raises(InvalidDateError):
            classify_raw_date(float("nan"))
        with pytest.raises(InvalidDateError):
            classify_raw_date("inf")

    def test_int_beyond_float_range_rejected(self):
        with pytest.raises(InvalidDateError, match="out of range"):
            classify_raw_date(10**400)

    def test_unsupported_type_rejected(self):
        with pytest.raises(InvalidDateError, match="Invalid date type: list"):
            classify_raw_date([2024, 6, 30])


# ==============================================================================
# parse_date
# ==============================================================================


class TestParseDateNumeric:
    """Numeric inputs: seconds below the threshold, milliseconds at or above."""

    @pytest.mark.parametrize("value", [0, 1, 86_400, 1_700_000_000, 9_999_999_999])
    def test_seconds(self, value):
        assert parse_date(value) == EPOCH + timedelta(milliseconds=value * 1000)

    @pytest.mark.parametrize("value", [10_000_000_000, 1_700_000_000_000])
    def test_milliseconds(self, value):
        assert parse_date(value) == EPOCH + timedelta(milliseconds=value)

    def test_seconds_and_millis_agree(self):
        assert parse_date(1_700_000_000) == parse_date(1_700_000_000_000)

    def test_float_seconds(self):
        assert parse_date(1.5) == EPOCH + timedelta(milliseconds=1500)

    def test_result_is_utc(self):
        assert parse_date(1_700_000_000).tzinfo == timezone.utc

    def test_numeric_string(self):
        assert parse_date("1700000000") == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_out_of_range_raises(self):
        with pytest.raises(InvalidDateError, match="out of range"):
            parse_date(1e20)


class TestParseDateIso:
    """ISO-8601 strings."""

    def test_zulu(self):
        assert parse_date("2024-06-30T12:00:00Z") == datetime(
            2024, 6, 30, 12, tzinfo=timezone.utc
        )

    def test_offset(self):
        parsed = parse_date("2024-06-30T14:00:00+02:00")
        assert parsed == datetime(2024, 6, 30, 12, tzinfo=timezone.utc)

    def test_fractional_seconds(self):
        parsed = parse_date("2024-06-30T12:00:00.123Z")
        assert parsed.microsecond == 123000

    def test_naive_string_is_local_time(self):
        parsed = parse_date("2024-06-30T12:00:00")
        assert parsed.tzinfo is not None
        assert parsed.replace(tzinfo=None) == datetime(2024, 6, 30, 12)

    def test_invalid_string_raises(self):
        with pytest.raises(InvalidDateError, match="Invalid date string: 'yesterday'"):
            parse_date("yesterday")


class TestParseDatePassthroughAndAbsent:
    """datetime passthrough and absent values."""

    def test_datetime_returned_unchanged(self):
        instant = datetime(2024, 6, 30, 12)
        assert parse_date(instant) is instant

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent_raises(self, value):
        with pytest.raises(InvalidDateError, match="null or empty"):
            parse_date(value)


# ==============================================================================
# safe_parse_date
# ==============================================================================


class TestSafeParseDate:
    """The safe variant never raises."""

    @pytest.mark.parametrize(
        "value", [None, "", "not a date", "2024-13-45", True, 1e20, {}, 10**400, "1e400"]
    )
    def test_invalid_returns_none(self, value):
        assert safe_parse_date(value) is None

    def test_valid_matches_strict(self):
        assert safe_parse_date(1_700_000_000) == parse_date(1_700_000_000)

    @pytest.mark.parametrize("local_tz", ["Etc/GMT+5", "Etc/GMT-5"])
    @pytest.mark.parametrize("value", ["0001-01-01T00:00:00", "9999-12-31T23:59:59"])
    def test_naive_edge_of_range_never_raises(self, local_tz, value, local_zone):
        local_zone(local_tz)
        result = safe_parse_date(value)
        assert result is None or result.tzinfo is not None

    def test_aware_edge_of_range_parses(self):
        parsed = safe_parse_date("9999-12-31T23:00:00-05:00")
        assert parsed is not None
        assert parsed.year == 9999


class TestInstantSortKey:
    """Ordering key works across naive and aware datetimes."""

    def test_aware(self):
        assert instant_sort_key(EPOCH + timedelta(seconds=10)) == 10.0

    def test_orders_mixed(self):
        aware = datetime(2024, 6, 30, tzinfo=timezone.utc)
        naive = datetime(2020, 1, 1)
        assert instant_sort_key(naive) < instant_sort_key(aware)
