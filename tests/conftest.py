import io
import os
import subprocess
import sys
import threading

import pytest

# Ensure src/ is on sys.path so the 'subburn' package is importable
SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC not in sys.path:
    sys.path.insert(0, SRC)


class FakeProcess:
    """
    Stand-in for subprocess.Popen.

    With ``blocking=False`` stderr is a finished StringIO and the process
    has already exited with ``returncode``. With ``blocking=True`` stderr is
    a real pipe that stays open until ``finish()`` or ``kill()``.
    """

    def __init__(self, stderr_text: str = "", returncode: int = 0, blocking: bool = False):
        self._exited = threading.Event()
        self._final_returncode = returncode
        self.returncode = None
        self.killed = False
        self._writer = None

        if blocking:
            read_fd, write_fd = os.pipe()
            self.stderr = os.fdopen(read_fd, 'r', encoding='utf-8')
            self._writer = os.fdopen(write_fd, 'w', encoding='utf-8')
            if stderr_text:
                self.feed(stderr_text)
        else:
            self.stderr = io.StringIO(stderr_text)
            self.returncode = returncode
            self._exited.set()

    def feed(self, text: str) -> None:
        self._writer.write(text)
        self._writer.flush()

    def finish(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self._exited.set()
        if self._writer is not None and not self._writer.closed:
            self._writer.close()

    def kill(self) -> None:
        self.killed = True
        if self.returncode is None:
            self.finish(-9)

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if not self._exited.wait(timeout):
            raise subprocess.TimeoutExpired("ffmpeg", timeout)
        return self.returncode


@pytest.fixture
def job_inputs(tmp_path):
    """Existing video, subtitle and output directory."""
    video = tmp_path / "movie.mp4"
    video.write_bytes(b"\x00")
    subtitle = tmp_path / "movie.srt"
    subtitle.write_text("1\n00:00:01,000 --> 00:00:02,000\nHello\n", encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    return video, subtitle, out_dir


@pytest.fixture
def fake_process_cls():
    return FakeProcess
