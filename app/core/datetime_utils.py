from datetime import datetime, timezone
from zoneinfo import ZoneInfo

IST = ZoneInfo("Asia/Kolkata")
UTC = timezone.utc

def get_now_utc() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(UTC)

def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes (SQLite, legacy rows) as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt

def to_ist(dt: datetime) -> datetime:
    """Convert a datetime to India Standard Time."""
    return ensure_aware(dt).astimezone(IST)

def format_display_date(dt: datetime) -> str:
    """Date as shown in emails, e.g. '19 October 2026'."""
    local = to_ist(dt)
    return f"{local.day} {local.strftime('%B %Y')}"
