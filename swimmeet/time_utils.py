from __future__ import annotations

import re

TIME_RE = re.compile(r"^(\d{2}):(\d{2})\.(\d{2})$")


def is_valid_time(value: str | None) -> bool:
    if value is None:
        return False
    return TIME_RE.match(str(value)) is not None


def parse_time_to_ms(value: str | None) -> int:
    """Convert an ``MM:SS.ss`` string to milliseconds.

    Anything that does not match the format exactly yields 0.
    """
    if value is None:
        return 0
    match = TIME_RE.match(str(value))
    if not match:
        return 0
    minutes = int(match.group(1))
    seconds = int(match.group(2))
    hundredths = int(match.group(3))
    return (minutes * 60 + seconds) * 1000 + hundredths * 10


def format_ms(value: int | None) -> str:
    if value is None or value < 0:
        return "00:00.00"
    total_hundredths = (value + 5) // 10
    total_seconds, hundredths = divmod(total_hundredths, 100)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}.{hundredths:02d}"
