"""Application layer package."""

from subburn.application.job_state import JobState
from subburn.application.supervisor import EncodeSupervisor, ProgressThrottle
from subburn.application.notifications import (
    QueueNotificationSink,
    LoggingNotificationSink,
    CompositeNotificationSink,
)

__all__ = [
    "JobState",
    "EncodeSupervisor",
    "ProgressThrottle",
    "QueueNotificationSink",
    "LoggingNotificationSink",
    "CompositeNotificationSink",
]
