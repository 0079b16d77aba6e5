"""Interactive session: fzf over the font list, previews driven through a named pipe."""

from __future__ import annotations

import os
import shlex
import shutil
import signal
import tempfile
import threading
from pathlib import Path
from typing import Callable, Iterable

from fontpreview_core.config import PreviewConfig
from fontpreview_core.errors import CommandFailure, Interrupted
from fontpreview_core.logging_setup import get_logger
from fontpreview_preview import (
    CommandRunner,
    FontSelection,
    ViewerLifecycleManager,
    WindowFocus,
    iter_candidates,
)
from fontpreview_preview.lifecycle import FOCUS_TIMEOUT_S


_STOP = "\x00stop"
_HANDLED_SIGNALS = tuple(getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name))


def build_finder_command(cfg: PreviewConfig, pipe: Path, program: str = "fzf") -> list[str]:
    action = f"execute-silent(printf '%s\\n' {{}} > {shlex.quote(str(pipe))})"
    return [program, f"--prompt={cfg.search_prompt}", "--bind", f"{cfg.trigger}:{action}"]


class PreviewBridge:
    """Reads highlighted entries that fzf writes into a FIFO and hands them to ``handler``.

    The reader thread is the only caller of ``handler``. After the first failure
    it records the error, notifies ``on_error`` and keeps draining the pipe so
    that writers never block on it. Once ``close`` starts, queued entries are
    dropped unread.
    """

    def __init__(
        self,
        path: Path,
        handler: Callable[[str], object],
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        self.path = Path(path)
        self.error: BaseException | None = None
        self._handler = handler
        self._on_error = on_error or (lambda _exc: None)
        self._thread: threading.Thread | None = None
        self._stopping = threading.Event()

    def start(self) -> None:
        os.mkfifo(self.path, 0o600)
        # The read end is open before start() returns, so send() always finds a reader.
        # O_RDWR keeps a writer attached, so reads never hit EOF between fzf events.
        try:
            fd = os.open(self.path, os.O_RDWR)
        except OSError:
            self.path.unlink()
            raise
        self._thread = threading.Thread(target=self._run, args=(fd,), name="fontpreview-bridge", daemon=True)
        self._thread.start()

    def _run(self, fd: int) -> None:
        with os.fdopen(fd, "r", encoding="utf-8", errors="replace") as stream:
            for line in stream:
                entry = line.rstrip("\n")
                if entry == _STOP:
                    return
                if self._stopping.is_set() or self.error is not None or not entry.strip():
                    continue
                try:
                    self._handler(entry)
                except Exception as exc:
                    self.error = exc
                    get_logger().error(f"preview failed: {exc}", extra={"event": "bridge_error"})
                    self._on_error(exc)

    def send(self, entry: str) -> None:
        fd = os.open(self.path, os.O_WRONLY | os.O_NONBLOCK)
        try:
            os.write(fd, f"{entry}\n".encode("utf-8"))
        finally:
            os.close(fd)

    def close(self, timeout_s: float = 5.0) -> None:
        self._stopping.set()
        thread = self._thread
        if thread is not None and thread.is_alive():
            try:
                self.send(_STOP)
            except OSError as exc:
                get_logger().warning(f"could not signal bridge reader: {exc}", extra={"event": "bridge_stop_failed"})
            thread.join(timeout=timeout_s)
        self._thread = None
        if self.path.exists():
            self.path.unlink()


class PreviewSession:
    """Owns the temp directory, the lifecycle manager and the guaranteed teardown."""

    def __init__(
        self,
        cfg: PreviewConfig,
        runner: CommandRunner | None = None,
        focus: WindowFocus | None = None,
        finder_program: str = "fzf",
        temp_root: Path | None = None,
    ) -> None:
        self.cfg = cfg
        self.finder_program = finder_program
        self.workdir: Path | None = None
        self.manager: ViewerLifecycleManager | None = None
        self.bridge: PreviewBridge | None = None

        self._runner = runner or CommandRunner()
        self._focus = focus or WindowFocus(self._runner)
        self._temp_root = temp_root
        self._finder = None
        self._previous_handlers: dict[int, object] = {}

    def __enter__(self) -> "PreviewSession":
        self.workdir = Path(tempfile.mkdtemp(prefix="fontpreview-", dir=self._temp_root))
        try:
            self._install_signal_handlers()
            self_window = self._focus.active_window(timeout=FOCUS_TIMEOUT_S)
            self.manager = ViewerLifecycleManager(
                self.cfg,
                self._runner,
                self._focus,
                self_window=self_window,
                default_output=self.cfg.output or (self.workdir / "preview.png"),
            )
        except BaseException:
            self.close()
            raise
        get_logger().info(f"session started window={self_window}", extra={"event": "session_start"})
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    def _install_signal_handlers(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return

        def _interrupt(signum, _frame) -> None:
            raise Interrupted(signum)

        for signum in _HANDLED_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, _interrupt)

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    def _abort_finder(self, _exc: BaseException | None = None) -> None:
        finder = self._finder
        if finder is not None and finder.poll() is None:
            finder.terminate()

    def run_interactive(self, fonts: Iterable[FontSelection]) -> FontSelection | None:
        if self.workdir is None or self.manager is None:
            raise RuntimeError("preview session has not been entered")
        self.bridge = PreviewBridge(self.workdir / "preview.fifo", self.manager.show_preview, self._abort_finder)
        self.bridge.start()

        argv = build_finder_command(self.cfg, self.bridge.path, self.finder_program)
        self._finder = self._runner.open_pipe(argv)
        stdout, _ = self._finder.communicate("".join(f"{c}\n" for c in iter_candidates(fonts)))
        returncode = self._finder.returncode
        self._finder = None

        if self.bridge.error is not None:
            raise self.bridge.error
        if returncode == 0:
            chosen = next((line for line in stdout.splitlines() if line.strip()), None)
            return FontSelection.parse(chosen) if chosen else None
        if returncode in (1, 130):
            return None
        raise CommandFailure(f"{self.finder_program} exited with status {returncode}")

    def preview_files(self, paths: Iterable[Path]) -> None:
        """Preview each file in turn, waiting for the viewer to be closed before the next."""
        if self.manager is None:
            raise RuntimeError("preview session has not been entered")
        for path in paths:
            self.manager.show_preview(FontSelection.from_file(path))
            self.manager.wait_for_viewer()

    def close(self) -> None:
        try:
            if self._finder is not None:
                self._abort_finder()
                self._finder.wait()
                self._finder = None
            if self.bridge is not None:
                self.bridge.close()
        finally:
            try:
                if self.manager is not None:
                    self.manager.close()
            finally:
                self._restore_signal_handlers()
                if self.workdir is not None:
                    shutil.rmtree(self.workdir, ignore_errors=True)
                    self.workdir = None
                get_logger().info("session closed", extra={"event": "session_end"})
