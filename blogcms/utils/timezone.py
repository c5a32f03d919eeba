"""
Fixed-offset timestamp formatting.

Sitemaps and logs are stamped in Pakistan Standard Time (UTC+5). The zone
has no daylight saving, so the offset is a constant and no timezone
database lookup is involved.
"""

from datetime import UTC, datetime, timedelta, timezone

PKT_OFFSET = timedelta(hours=5)
PKT = timezone(PKT_OFFSET, "PKT")
PKT_SUFFIX = "+05:00"
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

type Instant = datetime | int | float


def to_utc(instant: Instant) -> datetime:
    """
    Normalise an instant to an aware UTC datetime.

    Args:
        instant: Aware datetime, naive datetime (taken as UTC) or epoch
            milliseconds.

    Returns:
        Aware datetime in UTC.
    """
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            return instant.replace(tzinfo=UTC)
        return instant.astimezone(UTC)
    # timedelta keeps integer milliseconds exact
    return EPOCH + timedelta(milliseconds=instant)


def to_pkt_iso(instant: Instant | None = None) -> str:
    """
    Format an instant as ISO-8601 in UTC+5 with millisecond precision.

    Args:
        instant: Instant to format, defaults to now.

    Returns:
        String shaped like ``YYYY-MM-DDTHH:mm:ss.sss+05:00``.

    Example:
        >>> to_pkt_iso(datetime(2024, 1, 31, 20, 0, tzinfo=UTC))
        '2024-02-01T01:00:00.000+05:00'

    """
    utc = to_utc(instant if instant is not None else datetime.now(UTC))
    local = utc + PKT_OFFSET
    millis = local.microsecond // 1000
    return (
        f"{local.year:04d}-{local.month:02d}-{local.day:02d}"
        f"T{local.hour:02d}:{local.minute:02d}:{local.second:02d}"
        f".{millis:03d}{PKT_SUFFIX}"
    )


def pkt_now() -> datetime:
    """Return the current time as an aware datetime in UTC+5."""
    return datetime.now(UTC).astimezone(PKT)
