"""ffprobe-based inspection of source media."""

import json
from pathlib import Path
from typing import Optional, List

from subburn.domain.exceptions import ProbeError
from subburn.domain.models import MediaProbe
from subburn.infrastructure.media.ffmpeg import FFmpegWrapper
from subburn.shared.logging import get_logger

logger = get_logger(__name__)

PREFERRED_FORMATS = ("mp4", "mkv", "mov", "webm", "avi", "flv", "wmv")


def build_probe_duration_args(video_path: str) -> List[str]:
    return [
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        video_path,
    ]


def build_probe_info_args(video_path: str) -> List[str]:
    return [
        "-v", "error",
        "-select_streams", "v:0",
        "-show_entries", "stream=codec_type,width,height,duration:format=duration,format_name",
        "-of", "json",
        video_path,
    ]


def format_duration(seconds: float) -> str:
    """Seconds to ``HH:MM:SS``, truncating fractions."""
    total = int(max(0.0, seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def pick_format_label(video_path: str, format_name: Optional[str]) -> str:
    """
    Prefer the file extension; otherwise choose among ffprobe's
    comma-separated format_name candidates.
    """
    ext = Path(video_path).suffix.lstrip(".").lower()
    if ext:
        return ext

    candidates = [c.strip().lower() for c in (format_name or "").split(",") if c.strip()]
    for preferred in PREFERRED_FORMATS:
        if preferred in candidates:
            return preferred
    return candidates[0] if candidates else "unknown"


def _parse_seconds(value) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _resolution(streams) -> str:
    if not isinstance(streams, list) or not streams:
        return "-"
    video = next((s for s in streams if s.get("codec_type") == "video"), streams[0])
    try:
        width = int(video.get("width") or 0)
        height = int(video.get("height") or 0)
    except (TypeError, ValueError):
        width, height = 0, 0
    return f"{width}x{height}"


class ProbeClient:
    """
    Inspects media with ffprobe.
    Implements IProbeClient protocol.
    """

    def __init__(self, ffmpeg: FFmpegWrapper):
        self._ffmpeg = ffmpeg
        self._logger = get_logger(__name__)

    def probe_duration(self, path: str) -> float:
        """
        Get container duration in seconds.

        Raises:
            ProbeError: If ffprobe fails or prints something other than a number
        """
        output = self._ffmpeg.run_ffprobe(build_probe_duration_args(path)).strip()
        try:
            return float(output)
        except ValueError as e:
            raise ProbeError(f"Cannot parse duration for {path}: {output!r}") from e

    def probe_media_info(self, path: str) -> MediaProbe:
        """
        Get format, duration and resolution of a media file.

        Raises:
            ProbeError: If ffprobe fails or its JSON output is malformed
        """
        output = self._ffmpeg.run_ffprobe(build_probe_info_args(path))
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Cannot parse ffprobe output for {path}: {e}") from e
        if not isinstance(data, dict):
            raise ProbeError(f"Unexpected ffprobe output for {path}")

        fmt = data.get("format") or {}
        seconds = _parse_seconds(fmt.get("duration"))

        return MediaProbe(
            duration_seconds=seconds or 0.0,
            format=pick_format_label(path, fmt.get("format_name")),
            duration=format_duration(seconds) if seconds is not None else "-",
            resolution=_resolution(data.get("streams")),
        )
