"""Time utilities for timezone-aware UTC datetimes and child ages."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends that drop the offset."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def age_in_months(date_of_birth: date | None, today: date | None = None) -> int:
    """Whole months between a birth date and today, never negative.

    A month only counts once the day of month has been reached, so a child
    born on the 20th is one month older on the 20th of the next month, not
    on the 1st.
    """
    if date_of_birth is None:
        return 0
    today = today or utc_now().date()
    months = (today.year - date_of_birth.year) * 12
    months += today.month - date_of_birth.month
    if today.day < date_of_birth.day:
        months -= 1
    return max(0, months)
