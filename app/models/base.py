from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware insert timestamps, microsecond resolution for ordering."""
    return datetime.now(timezone.utc)
