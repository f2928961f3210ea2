"""FFmpeg wrapper for encode jobs."""

import os
import shlex
import subprocess
from typing import List, Optional

from subburn.domain.exceptions import ProbeError, SpawnError
from subburn.shared.logging import get_logger

logger = get_logger(__name__)


def _hidden_window_kwargs() -> dict:
    """Suppress the console window ffmpeg would otherwise open on Windows."""
    if os.name != "nt":
        return {}
    try:
        startupinfo = subprocess.STARTUPINFO()
        startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
        return {"creationflags": subprocess.CREATE_NO_WINDOW, "startupinfo": startupinfo}
    except AttributeError:
        return {}


class FFmpegWrapper:
    """Low-level wrapper around ffmpeg/ffprobe commands."""

    def __init__(self, ffmpeg_bin: str = "ffmpeg", ffprobe_bin: str = "ffprobe"):
        self.ffmpeg_bin = ffmpeg_bin
        self.ffprobe_bin = ffprobe_bin
        self._logger = get_logger(__name__)

    def run_ffprobe(self, args: List[str]) -> str:
        """
        Run ffprobe and return its standard output.

        Raises:
            ProbeError: If ffprobe cannot be executed
        """
        cmd = [self.ffprobe_bin, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                **_hidden_window_kwargs()
            )
        except OSError as e:
            raise ProbeError(f"Cannot execute ffprobe: {e}") from e

        if result.returncode != 0 and result.stderr:
            self._logger.debug(f"ffprobe exited with {result.returncode}: {result.stderr.strip()}")
        return result.stdout

    def list_encoders(self) -> str:
        """
        Return the text of ``ffmpeg -hide_banner -encoders``.

        Raises:
            ProbeError: If ffmpeg cannot be executed
        """
        return self._run_ffmpeg(["-hide_banner", "-encoders"])

    def get_version(self) -> str:
        """Return the text of ``ffmpeg -version``."""
        return self._run_ffmpeg(["-version"])

    def _run_ffmpeg(self, args: List[str]) -> str:
        cmd = [self.ffmpeg_bin, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                **_hidden_window_kwargs()
            )
        except OSError as e:
            raise ProbeError(f"Cannot execute ffmpeg: {e}") from e
        return result.stdout

    def spawn_encode(self, args: List[str]) -> subprocess.Popen:
        """
        Start an encode with the given arguments.

        stdout and stdin are detached; stderr is piped as text so the
        caller can stream progress from it.

        Raises:
            SpawnError: If the process cannot be started
        """
        cmd = [self.ffmpeg_bin, *args]
        self._logger.info(f"Executing: {self.format_command(args)}")
        try:
            return subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                **_hidden_window_kwargs()
            )
        except (OSError, ValueError) as e:
            raise SpawnError(f"Failed to start ffmpeg: {e}") from e

    def format_command(self, args: Optional[List[str]] = None) -> str:
        return " ".join(shlex.quote(part) for part in [self.ffmpeg_bin, *(args or [])])
