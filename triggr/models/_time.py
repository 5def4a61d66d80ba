from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return current UTC time without timezone info (for SQLite compat)."""
    return datetime.now(UTC).replace(tzinfo=None)
