"""Process seam shared by every external collaborator.

``CommandRunner`` is the only place that touches ``subprocess`` and
``psutil``. The lifecycle manager, renderer, focus helper and font lister all
receive a runner, so tests swap in fakes that report liveness and exit codes
deterministically.
"""

from __future__ import annotations

import subprocess
from typing import Sequence

import psutil

from fontpreview_core.errors import CommandFailure, CommandTimeout


class ViewerProcess:
    """psutil-backed handle on a detached child process."""

    def __init__(self, popen: psutil.Popen) -> None:
        self._popen = popen

    @property
    def pid(self) -> int:
        return int(self._popen.pid)

    @property
    def returncode(self) -> int | None:
        return self._popen.returncode

    def is_alive(self) -> bool:
        try:
            if self._popen.poll() is not None:
                return False
            return self._popen.status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False

    def terminate(self, grace_s: float = 2.0) -> int | None:
        """Send SIGTERM, escalate to SIGKILL after ``grace_s``, and reap."""
        try:
            if self._popen.poll() is None:
                self._popen.terminate()
                try:
                    return self._popen.wait(timeout=grace_s)
                except psutil.TimeoutExpired:
                    self._popen.kill()
        except psutil.NoSuchProcess:
            pass
        return self.wait()

    def wait(self, timeout: float | None = None) -> int | None:
        try:
            return self._popen.wait(timeout=timeout)
        except psutil.NoSuchProcess:
            return self._popen.returncode


class CommandRunner:
    def run(
        self,
        argv: Sequence[str],
        capture: bool = False,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                list(argv),
                stdin=subprocess.DEVNULL,
                capture_output=capture,
                text=True,
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeout(f"{argv[0]} did not finish within {timeout:.1f}s") from exc
        except OSError as exc:
            raise CommandFailure(f"could not run {argv[0]}", [str(exc)]) from exc

    def spawn(self, argv: Sequence[str]) -> ViewerProcess:
        try:
            popen = psutil.Popen(
                list(argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            raise CommandFailure(f"could not start {argv[0]}", [str(exc)]) from exc
        return ViewerProcess(popen)

    def open_pipe(self, argv: Sequence[str]) -> subprocess.Popen:
        """Start an interactive program fed through stdin; it keeps the terminal for its UI."""
        try:
            return subprocess.Popen(list(argv), stdin=subprocess.PIPE, stdout=subprocess.PIPE, text=True)
        except OSError as exc:
            raise CommandFailure(f"could not start {argv[0]}", [str(exc)]) from exc


def check_output(runner: CommandRunner, argv: Sequence[str], timeout: float | None = None) -> str:
    """Run ``argv`` capturing stdout; a non-zero exit is a ``CommandFailure``."""
    result = runner.run(argv, capture=True, timeout=timeout)
    if result.returncode != 0:
        stderr = (result.stderr or "").strip().splitlines()
        raise CommandFailure(f"{' '.join(argv)} exited with status {result.returncode}", stderr)
    return result.stdout or ""
