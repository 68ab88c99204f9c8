# ==============================================================================
# Date Normalization
# ==============================================================================
"""
Normalization of heterogeneous visit timestamps.

The page visit backend stores instants in several encodings:
- Unix timestamps in seconds (10 digits)
- Unix timestamps in milliseconds (13 digits)
- The same numbers serialized as strings
- ISO-8601 strings

classify_raw_date() inspects a raw value once and tags it with its encoding.
parse_date() turns it into a datetime and raises InvalidDateError on failure;
safe_parse_date() is the variant aggregation code uses, returning None instead.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# Values below this magnitude are epoch seconds, the rest epoch milliseconds.
# 10,000,000,000 seconds is in the year 2286.
EPOCH_SECONDS_THRESHOLD = 10_000_000_000

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

RawDateValue = datetime | str | int | float | None


class InvalidDateError(ValueError):
    """Raised when a raw date value cannot be normalized."""


# ==============================================================================
# Raw Date Encodings
# ==============================================================================


@dataclass(frozen=True)
class EpochSeconds:
    """Whole (or fractional) seconds since the Unix epoch."""

    value: float


@dataclass(frozen=True)
class EpochMillisOrIso:
    """Milliseconds since the Unix epoch, or an ISO-8601 string."""

    value: float | str


@dataclass(frozen=True)
class Absent:
    """No date value (None or empty string)."""


RawDate = EpochSeconds | EpochMillisOrIso | Absent


def _classify_number(value: float, original: object) -> RawDate:
    if not math.isfinite(value):
        raise InvalidDateError(f"Invalid date value: {original!r}")
    if abs(value) < EPOCH_SECONDS_THRESHOLD:
        return EpochSeconds(value)
    return EpochMillisOrIso(value)


def classify_raw_date(value: object) -> RawDate:
    """
    Tag a raw date value with its encoding.

    A string that parses as a number is treated as a timestamp, never as a
    literal date string.

    Args:
        value: Raw value as found in a visit record

    Returns:
        EpochSeconds, EpochMillisOrIso or Absent

    Raises:
        InvalidDateError: If the value is not a supported type or is a
            non-finite number
    """
    if value is None:
        return Absent()

    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        raise InvalidDateError(f"Invalid date type: {type(value).__name__}")

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError as e:
            raise InvalidDateError(f"Date value out of range: {value!r}") from e
        return _classify_number(number, value)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return Absent()
        try:
            number = float(text)
        except ValueError:
            return EpochMillisOrIso(text)
        return _classify_number(number, value)

    raise InvalidDateError(f"Invalid date type: {type(value).__name__}")


# ==============================================================================
# Parsing
# ==============================================================================


def _from_millis(millis: float, original: object) -> datetime:
    try:
        return _EPOCH + timedelta(milliseconds=millis)
    except OverflowError as e:
        raise InvalidDateError(f"Date value out of range: {original!r}") from e


def _from_iso(text: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateError(f"Invalid date string: {text!r}") from e
    if parsed.tzinfo is None:
        # Naive ISO strings are local wall-clock time
        try:
            parsed = parsed.astimezone()
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidDateError(f"Date value out of range: {text!r}") from e
    return parsed


def parse_date(value: RawDateValue) -> datetime:
    """
    Convert a raw date value to a datetime.

    Args:
        value: datetime, epoch seconds/milliseconds (number or numeric
            string), or ISO-8601 string

    Returns:
        The normalized instant. datetime input is returned unchanged;
        numeric input yields an aware UTC datetime.

    Raises:
        InvalidDateError: If the value is absent or cannot be parsed
    """
    if isinstance(value, datetime):
        return value

    raw = classify_raw_date(value)

    if isinstance(raw, Absent):
        raise InvalidDateError("Invalid date value: null or empty")
    if isinstance(raw, EpochSeconds):
        return _from_millis(raw.value * 1000, value)
    if isinstance(raw.value, str):
        return _from_iso(raw.value)
    return _from_millis(raw.value, value)


def safe_parse_date(value: RawDateValue) -> datetime | None:
    """Parse a raw date value, returning None if it is absent or invalid."""
    try:
        return parse_date(value)
    except InvalidDateError:
        return None


def instant_sort_key(instant: datetime) -> float:
    """Seconds since the epoch, usable for ordering naive and aware datetimes together."""
    return instant.timestamp()
