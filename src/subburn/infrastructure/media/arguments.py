"""Build ffmpeg arguments for subtitle burn-in jobs."""

import threading
from pathlib import Path
from typing import List, Optional, Dict, Tuple

from subburn.domain.exceptions import ProbeError
from subburn.domain.models import (
    JobParameters,
    EncoderCapability,
    SubtitleStyle,
    SOFTWARE_CODECS,
    COPY_CODEC,
    DEFAULT_SUBTITLE_ENCODING,
)
from subburn.domain.protocols import ICapabilityProvider
from subburn.infrastructure.media.ffmpeg import FFmpegWrapper
from subburn.shared.logging import get_logger

logger = get_logger(__name__)

# Order matters: replacing backslashes first keeps the other escapes intact.
_FILTER_ESCAPES = (
    ("\\", "\\\\"),
    (":", "\\:"),
    (",", "\\,"),
    ("'", "\\'"),
    ("[", "\\["),
    ("]", "\\]"),
    (";", "\\;"),
)

# Checked in priority order; first match wins.
_CAPABILITY_MARKERS = (
    (EncoderCapability.NVENC, ("h264_nvenc", "hevc_nvenc")),
    (EncoderCapability.QSV, ("h264_qsv", "hevc_qsv")),
    (EncoderCapability.VAAPI, ("h264_vaapi", "hevc_vaapi")),
    (EncoderCapability.AMF, ("h264_amf", "hevc_amf")),
)

HARDWARE_CODECS: Dict[Tuple[str, EncoderCapability], str] = {
    ("libx264", EncoderCapability.NVENC): "h264_nvenc",
    ("libx264", EncoderCapability.QSV): "h264_qsv",
    ("libx264", EncoderCapability.VAAPI): "h264_vaapi",
    ("libx264", EncoderCapability.AMF): "h264_amf",
    ("libx265", EncoderCapability.NVENC): "hevc_nvenc",
    ("libx265", EncoderCapability.QSV): "hevc_qsv",
    ("libx265", EncoderCapability.VAAPI): "hevc_vaapi",
    ("libx265", EncoderCapability.AMF): "hevc_amf",
}

MP4_FORMATS = ("mp4", "m4v")


def escape_filter_path(path: str) -> str:
    """Escape a path so it can be embedded as a filtergraph option value."""
    for char, escaped in _FILTER_ESCAPES:
        path = path.replace(char, escaped)
    return path


def build_subtitle_filter(
    params: JobParameters,
    custom_force_style: str = "PrimaryColour=&H00FFFFFF",
    default_encoding: str = DEFAULT_SUBTITLE_ENCODING,
) -> str:
    """Build the ``subtitles=`` video filter for a job."""
    escaped = escape_filter_path(params.subtitle_path)
    subtitle_filter = f"subtitles='{escaped}'"

    if params.subtitle_encoding and params.subtitle_encoding != default_encoding:
        subtitle_filter += f":charenc={params.subtitle_encoding}"

    if params.subtitle_style == SubtitleStyle.CUSTOM.value:
        # TODO: derive force_style from subtitle_style_name once named styles are resolved from the ASS header
        subtitle_filter += f":force_style='{custom_force_style}'"

    return subtitle_filter


def build_output_path(params: JobParameters, suffix: str = "_sub") -> str:
    """``{output_dir}/{video stem}{suffix}.{format}``"""
    stem = Path(params.video_path).stem or "output"
    return f"{params.output_dir}/{stem}{suffix}.{params.output_format}"


def detect_encoder_capability(encoders_text: str) -> EncoderCapability:
    """Pick the first hardware family whose encoders appear in ``ffmpeg -encoders``."""
    lower = encoders_text.lower()
    for capability, markers in _CAPABILITY_MARKERS:
        if any(marker in lower for marker in markers):
            return capability
    return EncoderCapability.NONE


class EncoderCapabilityCache:
    """
    Detects the hardware encoder family once and remembers it.
    Implements ICapabilityProvider protocol.

    Failure to run ffmpeg counts as no hardware support and is cached too.
    """

    def __init__(self, ffmpeg: FFmpegWrapper):
        self._ffmpeg = ffmpeg
        self._lock = threading.Lock()
        self._capability: Optional[EncoderCapability] = None
        self._logger = get_logger(__name__)

    def get(self) -> EncoderCapability:
        with self._lock:
            if self._capability is None:
                self._capability = self._detect()
            return self._capability

    def _detect(self) -> EncoderCapability:
        try:
            text = self._ffmpeg.list_encoders()
        except ProbeError as e:
            self._logger.warning(f"Encoder detection failed, using software encoders: {e}")
            return EncoderCapability.NONE

        capability = detect_encoder_capability(text)
        self._logger.info(f"Hardware encoder capability: {capability.value}")
        return capability


class EncodeArgumentBuilder:
    """Turns JobParameters into the ffmpeg argument list for one job."""

    def __init__(
        self,
        capabilities: ICapabilityProvider,
        default_codec: str = "libx264",
        preset: str = "medium",
        custom_force_style: str = "PrimaryColour=&H00FFFFFF",
        default_subtitle_encoding: str = DEFAULT_SUBTITLE_ENCODING,
    ):
        self._capabilities = capabilities
        self._default_codec = default_codec
        self._preset = preset
        self._custom_force_style = custom_force_style
        self._default_subtitle_encoding = default_subtitle_encoding
        self._logger = get_logger(__name__)

    def select_codec(self, requested: str, capability: EncoderCapability) -> str:
        """
        Map a logical codec to the encoder ffmpeg should use.

        A subtitle filter is always applied, and stream copy cannot be
        combined with filtering, so ``copy`` becomes the default software
        codec and is never mapped to a hardware encoder.
        """
        if requested == COPY_CODEC:
            self._logger.warning(
                f"Codec 'copy' cannot be combined with the subtitle filter; using {self._default_codec}"
            )
            return self._default_codec
        return HARDWARE_CODECS.get((requested, capability), requested)

    def build(self, params: JobParameters, output_path: str) -> List[str]:
        """
        Build the full ffmpeg argument list (without the binary itself).

        Args:
            params: Job parameters
            output_path: Resolved output file path

        Returns:
            Ordered list of ffmpeg arguments
        """
        capability = self._capabilities.get()
        codec = self.select_codec(params.video_codec, capability)

        args = [
            "-i", params.video_path,
            "-vf", build_subtitle_filter(
                params,
                custom_force_style=self._custom_force_style,
                default_encoding=self._default_subtitle_encoding,
            ),
            "-c:v", codec,
        ]

        if capability.is_hardware and codec not in SOFTWARE_CODECS:
            args.extend(["-global_quality", str(params.quality)])
        else:
            # Also taken for a requested "copy": it is re-encoded with the
            # default software codec, so unlike a true stream copy it gets CRF.
            args.extend(["-crf", str(params.quality), "-preset", self._preset])

        # 0 lets ffmpeg pick the thread count
        args.extend(["-threads", "0"])
        args.extend(["-c:a", "copy"])

        if params.output_format.lower() in MP4_FORMATS:
            args.extend(["-movflags", "+faststart"])

        args.extend(["-y", output_path])
        return args
