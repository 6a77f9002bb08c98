import re
from datetime import datetime, timezone

_OFFSET_RE = re.compile(r"(?:Z|[+-]\d{2}:\d{2})$")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_datetime(value: str | None) -> datetime | None:
    """Parse the ISO-ish strings browsers send from ``datetime-local`` inputs."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def schedule_status(start: str | None, end: str | None, now: datetime | None = None) -> str:
    start_at = parse_datetime(start)
    end_at = parse_datetime(end)
    if start_at is None or end_at is None:
        return "upcoming"
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    if current > end_at:
        return "completed"
    if start_at <= current <= end_at:
        return "ongoing"
    return "upcoming"


def with_seconds(value: str) -> str:
    """``2024-05-01T10:00`` -> ``2024-05-01T10:00:00``; a ``Z`` or ``+HH:MM`` suffix is kept."""
    date_part, sep, time_part = value.partition("T")
    if not sep:
        return value
    match = _OFFSET_RE.search(time_part)
    offset = match.group(0) if match else ""
    clock = time_part[: len(time_part) - len(offset)]
    if clock.count(":") == 1:
        clock = f"{clock}:00"
    return f"{date_part}T{clock}{offset}"
