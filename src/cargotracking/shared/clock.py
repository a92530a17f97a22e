"""Instants in the domain are timezone-aware UTC datetimes.

Callers may hand in naive values (read as UTC) or values in any other zone;
they are converted here so that every stored instant compares with every other.
"""

from datetime import UTC, datetime


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
