"""Protocol definitions for dependency inversion."""

from typing import Protocol

from .models import ProgressRecord, MediaProbe, EncoderCapability


class INotificationSink(Protocol):
    """Receives job events; owned by the presentation layer."""

    def on_progress(self, record: ProgressRecord) -> None:
        """Throttled progress update."""
        ...

    def on_log(self, text: str) -> None:
        """Diagnostic text from ffmpeg that is not a progress line."""
        ...

    def on_complete(self, output_path: str) -> None:
        """Job ended; the output file may be fully or partially written."""
        ...

    def on_error(self, message: str) -> None:
        """Job ended abnormally."""
        ...


class IProbeClient(Protocol):
    """Interface for inspecting source media before a job starts."""

    def probe_duration(self, path: str) -> float:
        """Get total duration in seconds."""
        ...

    def probe_media_info(self, path: str) -> MediaProbe:
        """Get descriptive metadata."""
        ...


class ICapabilityProvider(Protocol):
    """Interface for the memoized hardware-encoder capability."""

    def get(self) -> EncoderCapability:
        """Return the detected capability, detecting on first use."""
        ...


class ILogger(Protocol):
    """Interface for logging."""

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, **kwargs) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, **kwargs) -> None:
        """Log error message."""
        ...

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback."""
        ...


class IMetricsCollector(Protocol):
    """Interface for collecting metrics."""

    def start_timer(self, name: str) -> None:
        """Start a named timer."""
        ...

    def stop_timer(self, name: str) -> float:
        """Stop a named timer and return elapsed time."""
        ...

    def increment_counter(self, name: str, amount: int = 1) -> None:
        """Increment a named counter."""
        ...

    def record_metric(self, name: str, value) -> None:
        """Record a metric value."""
        ...

    def has_timer(self, name: str) -> bool:
        """Check whether a named timer is running."""
        ...

    def get_summary(self) -> dict:
        """Get summary of all metrics."""
        ...
