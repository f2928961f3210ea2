"""Media tooling package."""

from subburn.infrastructure.media.ffmpeg import FFmpegWrapper
from subburn.infrastructure.media.arguments import (
    EncodeArgumentBuilder,
    EncoderCapabilityCache,
    build_output_path,
    escape_filter_path,
)
from subburn.infrastructure.media.probe import ProbeClient
from subburn.infrastructure.media.progress import parse_progress_line, parse_time_to_seconds
from subburn.infrastructure.media.subtitles import list_subtitle_styles

__all__ = [
    "FFmpegWrapper",
    "EncodeArgumentBuilder",
    "EncoderCapabilityCache",
    "build_output_path",
    "escape_filter_path",
    "ProbeClient",
    "parse_progress_line",
    "parse_time_to_seconds",
    "list_subtitle_styles",
]
