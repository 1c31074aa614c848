from __future__ import annotations
from datetime import datetime, timezone
from typing import Union


def _suffix(day: int) -> str:
    if 3 < day < 21:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def parse_timestamp(value: str) -> datetime:
    # fromisoformat() only learned the trailing "Z" in 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def format_pretty_date(value: Union[str, datetime]) -> str:
    """'2026-10-19T15:05:00Z' -> '19th Oct 2026, 3:05 PM'. Unparseable strings come back as-is."""
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = parse_timestamp(value)
        except (TypeError, ValueError):
            return value
    hour = dt.hour % 12 or 12
    ampm = "AM" if dt.hour < 12 else "PM"
    return f"{dt.day}{_suffix(dt.day)} {dt.strftime('%b')} {dt.year}, {hour}:{dt.minute:02d} {ampm}"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
