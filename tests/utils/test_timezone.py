from datetime import UTC, datetime, timedelta, timezone

import pytest

from blogcms.utils.timezone import PKT, pkt_now, to_pkt_iso, to_utc

INSTANTS = [
    datetime(2024, 1, 31, 19, 0, 0, 1000, tzinfo=UTC),
    datetime(2024, 2, 28, 19, 0, 0, 0, tzinfo=UTC),
    datetime(2024, 2, 29, 18, 59, 59, 999000, tzinfo=UTC),
    datetime(2024, 2, 29, 19, 0, 0, 1000, tzinfo=UTC),
    datetime(2023, 2, 28, 19, 30, 0, 500000, tzinfo=UTC),
    datetime(2024, 12, 31, 18, 59, 59, 999000, tzinfo=UTC),
    datetime(2024, 12, 31, 19, 0, 0, 0, tzinfo=UTC),
    datetime(2000, 2, 29, 23, 59, 59, 999000, tzinfo=UTC),
    datetime(1970, 1, 1, 0, 0, 0, 1000, tzinfo=UTC),
]
EPOCH_MILLIS = [0, 1, 999, 1000, 1706731200123, 1709233199999, 1709233200000, 4102444799999]


class TestToPktIso:
    def test_crosses_into_next_day(self) -> None:
        dt = datetime(2024, 1, 31, 20, 0, 0, tzinfo=UTC)
        assert to_pkt_iso(dt) == "2024-02-01T01:00:00.000+05:00"

    def test_crosses_into_next_year(self) -> None:
        dt = datetime(2023, 12, 31, 20, 30, 0, tzinfo=UTC)
        assert to_pkt_iso(dt) == "2024-01-01T01:30:00.000+05:00"

    def test_keeps_milliseconds(self) -> None:
        dt = datetime(2024, 6, 1, 0, 0, 0, 123456, tzinfo=UTC)
        assert to_pkt_iso(dt) == "2024-06-01T05:00:00.123+05:00"

    def test_naive_datetime_is_utc(self) -> None:
        assert to_pkt_iso(datetime(2024, 3, 10, 12, 0)) == "2024-03-10T17:00:00.000+05:00"

    def test_other_offset_is_converted(self) -> None:
        # 09:00 at UTC-5 is 14:00 UTC
        dt = datetime(2024, 3, 10, 9, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert to_pkt_iso(dt) == "2024-03-10T19:00:00.000+05:00"

    def test_epoch_milliseconds(self) -> None:
        assert to_pkt_iso(0) == "1970-01-01T05:00:00.000+05:00"

    def test_defaults_to_now(self) -> None:
        assert to_pkt_iso().endswith("+05:00")


def test_to_utc_converts_aware_datetimes() -> None:
    local = datetime(2024, 1, 1, 5, 0, tzinfo=PKT)
    assert to_utc(local) == datetime(2024, 1, 1, 0, 0, tzinfo=UTC)


def test_pkt_now_offset() -> None:
    assert pkt_now().utcoffset() == timedelta(hours=5)


@pytest.mark.parametrize("instant", INSTANTS)
def test_output_parses_back_to_the_same_instant(instant: datetime) -> None:
    formatted = to_pkt_iso(instant)
    parsed = datetime.fromisoformat(formatted)

    assert parsed.utcoffset() == timedelta(hours=5)
    assert parsed.astimezone(UTC) == instant
    assert (parsed - timedelta(hours=5)).replace(tzinfo=UTC) == instant


@pytest.mark.parametrize("millis", EPOCH_MILLIS)
def test_epoch_milliseconds_parse_back_exactly(millis: int) -> None:
    parsed = datetime.fromisoformat(to_pkt_iso(millis)).astimezone(UTC)
    assert parsed == datetime(1970, 1, 1, tzinfo=UTC) + timedelta(milliseconds=millis)


def test_epoch_milliseconds_literal() -> None:
    assert to_pkt_iso(1706731200123) == "2024-02-01T01:00:00.123+05:00"


def test_distinct_milliseconds_format_distinctly() -> None:
    window = range(1709233199900, 1709233200100)
    assert len({to_pkt_iso(millis) for millis in window}) == len(window)
    assert len({to_pkt_iso(instant) for instant in INSTANTS}) == len(INSTANTS)


@pytest.mark.parametrize(
    ("millis", "expected"),
    [
        (0.5, timedelta(microseconds=500)),
        (1.5, timedelta(microseconds=1500)),
        (999.0, timedelta(milliseconds=999)),
        (1706731200123.0, timedelta(milliseconds=1706731200123)),
    ],
)
def test_to_utc_accepts_fractional_epoch_milliseconds(millis: float, expected: timedelta) -> None:
    assert to_utc(millis) == datetime(1970, 1, 1, tzinfo=UTC) + expected


def test_sub_millisecond_remainder_is_truncated() -> None:
    assert to_pkt_iso(999.9) == "1970-01-01T05:00:00.999+05:00"
