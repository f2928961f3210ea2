"""Infrastructure layer package."""

from subburn.infrastructure.config import ConfigLoader, SupervisorConfig
from subburn.infrastructure.media import FFmpegWrapper, ProbeClient, EncodeArgumentBuilder, EncoderCapabilityCache

__all__ = [
    "ConfigLoader",
    "SupervisorConfig",
    "FFmpegWrapper",
    "ProbeClient",
    "EncodeArgumentBuilder",
    "EncoderCapabilityCache",
]
