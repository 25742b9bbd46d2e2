"""UTC timestamps for the audit columns (``created_at``, ``updated_at``, ``prediction_date``)."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time, timezone-aware to match the ``timestamptz`` columns."""
    return datetime.now(timezone.utc)
