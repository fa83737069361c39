"""Timezone-aware timestamps for persisted rows."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_column() -> Column:
    """A fresh timezone-aware, non-null DateTime column (one per model field)."""
    return Column(DateTime(timezone=True), nullable=False)
