"""Domain layer package."""

from .models import (
    JobParameters,
    ProgressRecord,
    MediaProbe,
    EncoderCapability,
    SubtitleStyle,
    EncodeEvent,
    EventType,
)
from .exceptions import (
    DomainException,
    ValidationError,
    JobAlreadyRunningError,
    ProbeError,
    SpawnError,
    StopError,
    InternalLockError,
    ConfigurationError,
)
from .protocols import (
    INotificationSink,
    IProbeClient,
    ICapabilityProvider,
    ILogger,
    IMetricsCollector,
)

__all__ = [
    # Models
    "JobParameters",
    "ProgressRecord",
    "MediaProbe",
    "EncoderCapability",
    "SubtitleStyle",
    "EncodeEvent",
    "EventType",
    # Exceptions
    "DomainException",
    "ValidationError",
    "JobAlreadyRunningError",
    "ProbeError",
    "SpawnError",
    "StopError",
    "InternalLockError",
    "ConfigurationError",
    # Protocols
    "INotificationSink",
    "IProbeClient",
    "ICapabilityProvider",
    "ILogger",
    "IMetricsCollector",
]
