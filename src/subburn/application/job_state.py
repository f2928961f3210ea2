"""Shared state of the single active encode job."""

import threading
from contextlib import contextmanager
from typing import Optional, Iterator

from subburn.domain.exceptions import InternalLockError, JobAlreadyRunningError


class JobState:
    """
    Whether a job is active, its process handle and its expected duration.

    All fields are guarded by one lock. Every method acquires it, reads or
    mutates, and releases it before returning; nothing here blocks on I/O.
    Each accepted job gets a new id so the monitor of an old job can only
    touch its own handle and flag.
    """

    def __init__(self, lock_timeout: float = 5.0):
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout
        self._active = False
        self._handle = None
        self._total_duration = 0.0
        self._job_id = 0

    @contextmanager
    def _locked(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise InternalLockError(f"Job state lock not acquired within {self._lock_timeout}s")
        try:
            yield
        finally:
            self._lock.release()

    def is_active(self) -> bool:
        with self._locked():
            return self._active

    def set_active(self, value: bool) -> None:
        with self._locked():
            self._active = value

    def begin(self, total_duration: float = 0.0) -> int:
        """
        Mark a new job active and return its id.

        Raises:
            JobAlreadyRunningError: If a job is already active
        """
        with self._locked():
            if self._active:
                raise JobAlreadyRunningError("An encode job is already running")
            self._active = True
            self._total_duration = total_duration
            self._job_id += 1
            return self._job_id

    @property
    def current_job_id(self) -> int:
        with self._locked():
            return self._job_id

    def store_handle(self, handle, job_id: Optional[int] = None) -> bool:
        """
        Replace the stored process handle.

        With ``job_id``, the handle is only stored while that job is still
        current and active; returns False if it was stopped or superseded.
        """
        with self._locked():
            if job_id is not None and (job_id != self._job_id or not self._active):
                return False
            self._handle = handle
            return True

    def take_handle(self, job_id: Optional[int] = None):
        """
        Remove and return the stored handle, or None if there is none.

        With ``job_id``, only take it while that job is still current.
        """
        with self._locked():
            if job_id is not None and job_id != self._job_id:
                return None
            handle, self._handle = self._handle, None
            return handle

    def finish(self, job_id: Optional[int] = None) -> None:
        """Clear the active flag (and any leftover handle) of the given or current job."""
        with self._locked():
            if job_id is not None and job_id != self._job_id:
                return
            self._active = False
            self._handle = None

    def set_total_duration(self, seconds: float) -> None:
        with self._locked():
            self._total_duration = seconds

    def get_total_duration(self) -> float:
        with self._locked():
            return self._total_duration
