"""Domain models for subtitle burn-in encoding."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


SOFTWARE_CODECS = ("libx264", "libx265")
COPY_CODEC = "copy"
DEFAULT_SUBTITLE_ENCODING = "utf8"


class EncoderCapability(str, Enum):
    """Hardware encoder family advertised by ffmpeg, in detection priority order."""

    NONE = "none"
    NVENC = "nvenc"
    QSV = "qsv"
    VAAPI = "vaapi"
    AMF = "amf"

    @property
    def is_hardware(self) -> bool:
        return self is not EncoderCapability.NONE


class SubtitleStyle(str, Enum):
    DEFAULT = "default"
    CUSTOM = "custom"


@dataclass(frozen=True)
class JobParameters:
    """Everything needed to burn one subtitle file into one video."""

    video_path: str
    subtitle_path: str
    output_dir: str
    output_format: str = "mp4"
    video_codec: str = "libx264"
    quality: int = 23
    subtitle_encoding: str = DEFAULT_SUBTITLE_ENCODING
    subtitle_style: str = SubtitleStyle.DEFAULT.value
    subtitle_style_name: Optional[str] = None

    def __post_init__(self):
        if not self.output_format:
            raise ValueError("Output format must not be empty")
        if not self.video_codec:
            raise ValueError("Video codec must not be empty")
        if isinstance(self.quality, bool) or not isinstance(self.quality, int):
            raise ValueError(f"Quality must be an integer, got: {self.quality!r}")
        if self.quality < 0:
            raise ValueError(f"Quality cannot be negative, got: {self.quality}")
        if self.subtitle_style not in (SubtitleStyle.DEFAULT.value, SubtitleStyle.CUSTOM.value):
            raise ValueError(f"Invalid subtitle style: {self.subtitle_style}")


@dataclass(frozen=True)
class ProgressRecord:
    """One parsed ffmpeg progress line."""

    frame: int = 0
    fps: float = 0.0
    time: str = ""
    speed: str = ""
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame": self.frame,
            "fps": self.fps,
            "time": self.time,
            "speed": self.speed,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class MediaProbe:
    """Descriptive metadata about a source video."""

    duration_seconds: float = 0.0
    format: str = "unknown"
    duration: str = "-"
    resolution: str = "-"


class EventType(str, Enum):
    PROGRESS = "progress"
    LOG = "log"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class EncodeEvent:
    """Message form of a notification, used by queue-based sinks."""

    type: EventType
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.type in (EventType.COMPLETE, EventType.ERROR)

    @classmethod
    def progress(cls, record: ProgressRecord) -> "EncodeEvent":
        return cls(EventType.PROGRESS, record.to_dict())

    @classmethod
    def log(cls, text: str) -> "EncodeEvent":
        return cls(EventType.LOG, {"text": text})

    @classmethod
    def complete(cls, output_path: str) -> "EncodeEvent":
        return cls(EventType.COMPLETE, {"output_path": output_path})

    @classmethod
    def error(cls, message: str) -> "EncodeEvent":
        return cls(EventType.ERROR, {"message": message})
