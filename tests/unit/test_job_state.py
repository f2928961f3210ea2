"""
Unit tests for JobState.
"""

import threading

import pytest

from subburn.application.job_state import JobState
from subburn.domain.exceptions import InternalLockError, JobAlreadyRunningError


class TestJobState:
    """Test JobState operations."""

    def test_initial_state(self):
        state = JobState()

        assert state.is_active() is False
        assert state.take_handle() is None
        assert state.get_total_duration() == 0.0
        assert state.current_job_id == 0

    def test_begin_sets_active_and_duration(self):
        state = JobState()

        job_id = state.begin(42.5)

        assert job_id == 1
        assert state.is_active() is True
        assert state.get_total_duration() == 42.5

    def test_begin_rejects_second_job(self):
        state = JobState()
        state.begin()

        with pytest.raises(JobAlreadyRunningError):
            state.begin()
        assert state.current_job_id == 1

    def test_take_handle_is_idempotent(self):
        state = JobState()
        handle = object()
        state.store_handle(handle)

        assert state.take_handle() is handle
        assert state.take_handle() is None

    def test_store_handle_replaces(self):
        state = JobState()
        state.store_handle("first")
        state.store_handle("second")
        assert state.take_handle() == "second"

    def test_set_active_and_duration(self):
        state = JobState()
        state.set_active(True)
        state.set_total_duration(3.0)

        assert state.is_active() is True
        assert state.get_total_duration() == 3.0

        state.set_active(False)
        assert state.is_active() is False

    def test_finish_clears_flag_and_handle(self):
        state = JobState()
        job_id = state.begin()
        state.store_handle("proc")

        state.finish(job_id)

        assert state.is_active() is False
        assert state.take_handle() is None

    def test_stale_job_cannot_touch_newer_job(self):
        """A late monitor of a stopped job leaves the next job alone."""
        state = JobState()
        old_job = state.begin()
        state.set_active(False)  # stopped externally

        new_job = state.begin()
        state.store_handle("new-proc")

        assert state.take_handle(old_job) is None
        state.finish(old_job)

        assert state.is_active() is True
        assert state.take_handle(new_job) == "new-proc"

    def test_store_handle_refused_after_stop(self):
        """A handle for a job that was stopped while starting is not stored."""
        state = JobState()
        job_id = state.begin()
        state.set_active(False)

        assert state.store_handle("late-proc", job_id) is False
        assert state.take_handle() is None

    def test_store_handle_refused_for_superseded_job(self):
        state = JobState()
        old_job = state.begin()
        state.set_active(False)
        new_job = state.begin()

        assert state.store_handle("old-proc", old_job) is False
        assert state.store_handle("new-proc", new_job) is True
        assert state.take_handle(new_job) == "new-proc"

    def test_concurrent_begin_admits_one(self):
        state = JobState()
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            try:
                results.append(state.begin())
            except JobAlreadyRunningError:
                results.append(None)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len([r for r in results if r is not None]) == 1

    def test_lock_timeout_raises_internal_error(self):
        state = JobState(lock_timeout=0.05)
        state._lock.acquire()
        try:
            with pytest.raises(InternalLockError):
                state.is_active()
        finally:
            state._lock.release()
