"""Notification sinks for encode job events."""

import queue
from typing import Optional, Sequence

from subburn.domain.models import EncodeEvent, ProgressRecord
from subburn.domain.protocols import INotificationSink, ILogger
from subburn.shared.logging import get_logger, LoggerAdapter


class QueueNotificationSink:
    """
    Turns callbacks into EncodeEvent messages on a queue.
    Implements INotificationSink protocol.
    """

    def __init__(self, events: Optional["queue.Queue[EncodeEvent]"] = None):
        self.events: "queue.Queue[EncodeEvent]" = events if events is not None else queue.Queue()

    def on_progress(self, record: ProgressRecord) -> None:
        self.events.put(EncodeEvent.progress(record))

    def on_log(self, text: str) -> None:
        self.events.put(EncodeEvent.log(text))

    def on_complete(self, output_path: str) -> None:
        self.events.put(EncodeEvent.complete(output_path))

    def on_error(self, message: str) -> None:
        self.events.put(EncodeEvent.error(message))

    def get(self, timeout: Optional[float] = None) -> EncodeEvent:
        """Next event; raises queue.Empty on timeout."""
        return self.events.get(timeout=timeout)

    def wait_for_terminal(self, timeout: Optional[float] = None) -> EncodeEvent:
        """
        Drain events until ``complete`` or ``error`` arrives.

        Raises:
            queue.Empty: If no terminal event arrives in time
        """
        while True:
            event = self.events.get(timeout=timeout)
            if event.is_terminal:
                return event


class LoggingNotificationSink:
    """Writes every event to a logger."""

    def __init__(self, logger: Optional[ILogger] = None):
        self._logger = logger or LoggerAdapter(get_logger(__name__))

    def on_progress(self, record: ProgressRecord) -> None:
        self._logger.info(
            f"frame={record.frame} fps={record.fps:g} time={record.time} "
            f"speed={record.speed} {record.percentage:.1f}%"
        )

    def on_log(self, text: str) -> None:
        self._logger.debug(f"ffmpeg: {text}")

    def on_complete(self, output_path: str) -> None:
        self._logger.info(f"Encode finished: {output_path}")

    def on_error(self, message: str) -> None:
        self._logger.error(f"Encode failed: {message}")


class CompositeNotificationSink:
    """Forwards each event to several sinks in order."""

    def __init__(self, sinks: Sequence[INotificationSink]):
        self._sinks = list(sinks)

    def on_progress(self, record: ProgressRecord) -> None:
        for sink in self._sinks:
            sink.on_progress(record)

    def on_log(self, text: str) -> None:
        for sink in self._sinks:
            sink.on_log(text)

    def on_complete(self, output_path: str) -> None:
        for sink in self._sinks:
            sink.on_complete(output_path)

    def on_error(self, message: str) -> None:
        for sink in self._sinks:
            sink.on_error(message)
