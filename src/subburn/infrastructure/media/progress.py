"""Parse ffmpeg's stderr progress lines.

ffmpeg reports progress as whitespace-padded ``key=value`` fields, e.g.::

    frame=  120 fps= 30.0 q=28.0 size=    1024kB time=00:00:04.00 bitrate=2097.2kbits/s speed=1.5x

and rewrites the line in place with carriage returns.
"""

import math
from typing import Iterable, Iterator, Optional

from subburn.domain.models import ProgressRecord


def extract_value(line: str, key: str) -> Optional[str]:
    """Return the token after ``key``, skipping alignment padding."""
    start = line.find(key)
    if start < 0:
        return None
    rest = line[start + len(key):].lstrip()
    parts = rest.split(None, 1)
    return parts[0] if parts else ""


def parse_time_to_seconds(time_str: str) -> float:
    """``HH:MM:SS.ff`` to seconds; anything else is 0.0."""
    parts = time_str.split(":")
    if len(parts) != 3:
        return 0.0

    total = 0.0
    for part, scale in zip(parts, (3600.0, 60.0, 1.0)):
        try:
            total += float(part) * scale
        except ValueError:
            pass
    return total


def _to_int(value: Optional[str]) -> int:
    try:
        return max(0, int(value)) if value else 0
    except ValueError:
        return 0


def _to_float(value: Optional[str]) -> float:
    try:
        return float(value) if value else 0.0
    except ValueError:
        return 0.0


def compute_percentage(elapsed_seconds: float, total_duration_seconds: float) -> float:
    if total_duration_seconds <= 0:
        return 0.0
    percentage = max(0.0, min(elapsed_seconds / total_duration_seconds * 100.0, 100.0))
    # half-up, not banker's rounding
    return math.floor(percentage * 10 + 0.5) / 10


def parse_progress_line(line: str, total_duration_seconds: float) -> Optional[ProgressRecord]:
    """
    Parse one progress line.

    Args:
        line: A single line (or carriage-return segment) of ffmpeg stderr
        total_duration_seconds: Source duration, 0 when unknown

    Returns:
        ProgressRecord, or None if the line is not a progress line
    """
    if "frame=" not in line or "time=" not in line:
        return None

    time_str = extract_value(line, "time=") or ""

    return ProgressRecord(
        frame=_to_int(extract_value(line, "frame=")),
        fps=_to_float(extract_value(line, "fps=")),
        time=time_str,
        speed=extract_value(line, "speed=") or "",
        percentage=compute_percentage(parse_time_to_seconds(time_str), total_duration_seconds),
    )


def iter_segments(lines: Iterable[str]) -> Iterator[str]:
    """Split each line on carriage returns and yield non-blank trimmed segments."""
    for line in lines:
        for segment in line.split("\r"):
            segment = segment.strip()
            if segment:
                yield segment
