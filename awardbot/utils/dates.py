from datetime import date
from typing import Optional


def parse_iso_date(text: str) -> Optional[date]:
    """Strict 'YYYY-MM-DD' parse; None for anything else, including impossible dates."""
    if not text or len(text) != 10:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def clock_time(value) -> str:
    """Take the 'HH:MM' prefix of a source time like '08:30:00' or '08:30'."""
    if not isinstance(value, str):
        return ""
    return value.strip()[:5]


def to_12_hour(time_24: str) -> str:
    """
    Convert 'HH:MM' to 'H:MMam/pm', e.g. "13:05" -> "1:05pm", "00:00" -> "12:00am".
    Empty or unreadable input gives "".
    """
    if not time_24:
        return ""
    try:
        hh_s, mm_s = time_24.split(":")[:2]
        hh, mm = int(hh_s), int(mm_s)
    except ValueError:
        return ""
    period = "pm" if hh >= 12 else "am"
    hh12 = hh % 12 or 12
    return f"{hh12}:{mm:02d}{period}"
