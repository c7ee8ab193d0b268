from __future__ import annotations

from datetime import date, timedelta


def trailing_window(today: date, days: int = 7) -> tuple[date, date]:
    """Return (start, end) covering `days` full days that end yesterday."""
    end = today - timedelta(days=1)
    start = end - timedelta(days=days - 1)
    return start, end
