"""Single-flight supervisor for subtitle burn-in encode jobs."""

import math
import subprocess
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Tuple

from subburn.application.job_state import JobState
from subburn.domain.exceptions import (
    InternalLockError,
    JobAlreadyRunningError,
    ProbeError,
    SpawnError,
    StopError,
    ValidationError,
)
from subburn.domain.models import EventType, JobParameters
from subburn.domain.protocols import (
    ILogger,
    IMetricsCollector,
    INotificationSink,
    IProbeClient,
)
from subburn.infrastructure.media.arguments import EncodeArgumentBuilder, build_output_path
from subburn.infrastructure.media.ffmpeg import FFmpegWrapper
from subburn.infrastructure.media.progress import iter_segments, parse_progress_line
from subburn.shared.logging import get_logger, LoggerAdapter
from subburn.shared.metrics import MetricsCollector

logger = get_logger(__name__)


class ProgressThrottle:
    """Lets an update through at most once per interval; the rest are dropped."""

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        self._interval = interval
        self._clock = clock
        self._last: Optional[float] = None

    def ready(self) -> bool:
        now = self._clock()
        if self._last is not None and now - self._last < self._interval:
            return False
        self._last = now
        return True


class EncodeSupervisor:
    """
    Runs at most one ffmpeg subtitle burn-in job at a time.

    ``start`` validates, probes, claims the job slot, spawns ffmpeg and
    hands its stderr to a monitor thread. The monitor forwards progress and
    log lines to the sink and, once stderr closes, reaps the process, frees
    the slot and emits exactly one ``complete`` or ``error``.
    """

    def __init__(
        self,
        ffmpeg: FFmpegWrapper,
        probe: IProbeClient,
        builder: EncodeArgumentBuilder,
        sink: INotificationSink,
        state: Optional[JobState] = None,
        logger: Optional[ILogger] = None,
        metrics: Optional[IMetricsCollector] = None,
        progress_interval: float = 0.2,
        output_suffix: str = "_sub",
        stop_wait_timeout: float = 5.0,
    ):
        self._ffmpeg = ffmpeg
        self._probe = probe
        self._builder = builder
        self._sink = sink
        self._state = state or JobState()
        self._logger = logger or LoggerAdapter(get_logger(__name__))
        self._metrics = metrics or MetricsCollector()
        self._progress_interval = progress_interval
        self._output_suffix = output_suffix
        self._stop_wait_timeout = stop_wait_timeout
        self._monitor_thread: Optional[threading.Thread] = None

    @property
    def state(self) -> JobState:
        return self._state

    @property
    def metrics(self) -> IMetricsCollector:
        return self._metrics

    def is_running(self) -> bool:
        return self._state.is_active()

    def validate(self, params: JobParameters) -> None:
        """
        Check that the job's inputs exist.

        Raises:
            ValidationError: If a source file is missing or the output dir is invalid
        """
        if not Path(params.video_path).exists():
            raise ValidationError(f"Video file not found: {params.video_path}")
        if not Path(params.subtitle_path).exists():
            raise ValidationError(f"Subtitle file not found: {params.subtitle_path}")
        if not Path(params.output_dir).is_dir():
            raise ValidationError(f"Invalid output directory: {params.output_dir}")

    def start(self, params: JobParameters) -> str:
        """
        Start an encode job.

        If ``stop`` runs while ffmpeg is still being spawned, the new
        process is killed and reaped here and ``complete`` is emitted, as
        for any other stopped job.

        Returns:
            The output file path

        Raises:
            JobAlreadyRunningError: If another job is active
            ValidationError: If inputs are invalid
            SpawnError: If ffmpeg cannot be started
            InternalLockError: If the job state lock is unavailable
        """
        if self._state.is_active():
            raise JobAlreadyRunningError("An encode job is already running")

        self.validate(params)
        total_duration = self._probe_total_duration(params.video_path)

        job_id = self._state.begin(total_duration)
        try:
            output_path = build_output_path(params, self._output_suffix)
            args = self._builder.build(params, output_path)
            process = self._ffmpeg.spawn_encode(args)
            if process.stderr is None:
                self._terminate(process)
                raise SpawnError("ffmpeg stderr is not available")
            if not self._state.store_handle(process, job_id):
                # stop() ran while ffmpeg was starting
                self._logger.info("Encode stopped before ffmpeg started; terminating it")
                self._terminate(process)
                self._state.finish(job_id)
                self._metrics.increment_counter("jobs_stopped_starting")
                self._emit(self._sink.on_complete, output_path)
                return output_path

            self._metrics.start_timer(f"encode_{job_id}")
            self._monitor_thread = threading.Thread(
                target=self._monitor,
                args=(job_id, process.stderr, output_path, total_duration),
                name=f"encode-monitor-{job_id}",
                daemon=True,
            )
            self._monitor_thread.start()
        except Exception:
            self._abort(job_id)
            raise

        self._metrics.increment_counter("jobs_started")
        self._logger.info(f"ffmpeg started, output: {output_path}")
        return output_path

    def stop(self) -> None:
        """
        Kill the running ffmpeg process, if any, and clear the active flag.

        The monitor thread still emits the terminal event.

        Raises:
            StopError: If the process cannot be signalled
        """
        try:
            handle = self._state.take_handle()
            if handle is None:
                self._logger.info("No encode process to stop")
                return
            try:
                handle.kill()
            except OSError as e:
                raise StopError(f"Failed to terminate ffmpeg: {e}") from e
            try:
                handle.wait(timeout=self._stop_wait_timeout)
            except subprocess.TimeoutExpired:
                self._logger.warning(f"ffmpeg did not exit within {self._stop_wait_timeout}s after kill")
            self._logger.info("Encode process terminated")
        finally:
            self._state.set_active(False)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the current monitor thread; True once it has finished."""
        thread = self._monitor_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _probe_total_duration(self, video_path: str) -> float:
        try:
            duration = self._probe.probe_duration(video_path)
        except ProbeError as e:
            self._logger.warning(f"Cannot probe duration ({e}); progress percentage disabled")
            return 0.0
        if not math.isfinite(duration) or duration < 0:
            self._logger.warning(f"Ignoring invalid duration {duration}; progress percentage disabled")
            return 0.0
        return duration

    def _abort(self, job_id: int) -> None:
        handle = self._state.take_handle(job_id)
        if handle is not None:
            self._terminate(handle)
        self._state.finish(job_id)

    def _terminate(self, process) -> None:
        """Kill a process that never got a monitor and reap it."""
        if process.poll() is None:
            process.kill()
        try:
            process.wait(timeout=self._stop_wait_timeout)
        except subprocess.TimeoutExpired:
            self._logger.warning(f"ffmpeg did not exit within {self._stop_wait_timeout}s after kill")
        if process.stderr is not None:
            try:
                process.stderr.close()
            except OSError:
                pass

    def _monitor(self, job_id: int, stream, output_path: str, total_duration: float) -> None:
        throttle = ProgressThrottle(self._progress_interval)
        try:
            for segment in iter_segments(stream):
                self._handle_segment(segment, total_duration, throttle)
        except (OSError, ValueError) as e:
            self._logger.warning(f"Reading ffmpeg output stopped: {e}")
        finally:
            try:
                stream.close()
            except OSError:
                pass
            self._reconcile(job_id, output_path)

    def _handle_segment(self, segment: str, total_duration: float, throttle: ProgressThrottle) -> None:
        record = parse_progress_line(segment, total_duration)
        if record is None:
            self._logger.debug(f"ffmpeg: {segment}")
            self._metrics.increment_counter("log_lines")
            self._emit(self._sink.on_log, segment)
        elif throttle.ready():
            self._metrics.increment_counter("progress_emitted")
            self._emit(self._sink.on_progress, record)
        else:
            self._metrics.increment_counter("progress_dropped")

    def _reconcile(self, job_id: int, output_path: str) -> None:
        outcome: Tuple[EventType, str] = (EventType.ERROR, "Encode monitor failed")
        try:
            outcome = self._collect_outcome(job_id, output_path)
        finally:
            try:
                self._state.finish(job_id)
            except InternalLockError as e:
                self._logger.exception(f"Cannot reset job state: {e}")
                outcome = (EventType.ERROR, f"Internal lock error: {e}")

        timer = f"encode_{job_id}"
        if self._metrics.has_timer(timer):
            elapsed = self._metrics.stop_timer(timer)
            self._metrics.record_metric("encode_seconds", elapsed)
            self._logger.info(f"Encode job {job_id} ran for {elapsed:.1f}s")

        kind, text = outcome
        if kind is EventType.COMPLETE:
            self._metrics.increment_counter("jobs_completed")
            self._logger.info(f"Encode complete: {text}")
            self._emit(self._sink.on_complete, text)
        else:
            self._metrics.increment_counter("jobs_failed")
            self._logger.error(f"Encode failed: {text}")
            self._emit(self._sink.on_error, text)

    def _collect_outcome(self, job_id: int, output_path: str) -> Tuple[EventType, str]:
        try:
            handle = self._state.take_handle(job_id)
        except InternalLockError as e:
            self._logger.exception(f"Cannot take encode process: {e}")
            return EventType.ERROR, f"Internal lock error: {e}"

        if handle is None:
            # stop() already took and killed the process
            return EventType.COMPLETE, output_path

        try:
            returncode = handle.wait()
        except OSError as e:
            return EventType.ERROR, f"Waiting for ffmpeg failed: {e}"

        if returncode == 0:
            return EventType.COMPLETE, output_path
        if returncode is not None and returncode < 0:
            return EventType.ERROR, f"ffmpeg terminated by signal {-returncode}"
        return EventType.ERROR, f"ffmpeg exited abnormally: code={returncode}"

    def _emit(self, callback: Callable, *args) -> None:
        try:
            callback(*args)
        except Exception:
            # stderr must keep draining even if the sink raises
            self._logger.exception(f"Notification sink {getattr(callback, '__name__', callback)} failed")
