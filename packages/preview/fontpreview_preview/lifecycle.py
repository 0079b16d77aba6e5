"""Viewer lifecycle: at most one preview window, focus handed back to the prompt."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from fontpreview_core.config import PreviewConfig
from fontpreview_core.errors import CommandTimeout, RasterizationFailure, ViewerCrash
from fontpreview_core.logging_setup import get_logger

from .commands import CommandRunner
from .focus import WindowFocus
from .models import FontSelection, PreviewHandle, PreviewState
from .render import RenderInvoker


FOCUS_TIMEOUT_S = 3.0
POLL_INTERVAL_S = 0.05


def build_viewer_command(cfg: PreviewConfig, image: Path, program: str = "sxiv") -> list[str]:
    return [program, "-b", "-g", cfg.geometry, str(image)]


class ViewerLifecycleManager:
    def __init__(
        self,
        cfg: PreviewConfig,
        runner: CommandRunner,
        focus: WindowFocus,
        self_window: str,
        default_output: Path,
        renderer: RenderInvoker | None = None,
        viewer_program: str = "sxiv",
        timeout_s: float = FOCUS_TIMEOUT_S,
        poll_interval_s: float = POLL_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cfg = cfg
        self.self_window = self_window
        self.default_output = Path(default_output)
        self.viewer_program = viewer_program
        self.timeout_s = timeout_s
        self.poll_interval_s = poll_interval_s

        self._runner = runner
        self._focus = focus
        self._renderer = renderer or RenderInvoker(runner, cfg)
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.RLock()
        self._handle: PreviewHandle | None = None
        self._state = PreviewState.NO_PREVIEW
        self._events: list[dict[str, Any]] = []
        self._closed = False

    @property
    def state(self) -> PreviewState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def handle(self) -> PreviewHandle | None:
        return self._handle

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        return self._events[-limit:]

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "state": self._state.value,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > 1000:
            self._events = self._events[-1000:]
        get_logger().info(
            " ".join([event] + [f"{k}={v}" for k, v in fields.items()]),
            extra={"event": event},
        )

    def show_preview(self, selection: FontSelection | str, output_path: Path | None = None) -> PreviewHandle:
        if isinstance(selection, str):
            selection = FontSelection.parse(selection)

        with self._lock:
            if self._closed:
                raise RuntimeError("preview manager is closed")
            self.kill_preview()

            font = selection.font_identifier()
            output = Path(output_path) if output_path is not None else self.default_output
            self._state = PreviewState.LAUNCHING
            self._log_event("preview_start", font=font)

            try:
                self._renderer.render(font, output)
            except RasterizationFailure:
                self._state = PreviewState.FAILED
                self._log_event("preview_render_failed", font=font)
                raise

            process = self._runner.spawn(build_viewer_command(self.cfg, output, self.viewer_program))
            handle = PreviewHandle(process=process, image_path=output, selection=selection)
            self._handle = handle
            self._log_event("viewer_spawned", pid=handle.pid, image=output)

            self._await_viewer(handle)

            if process.is_alive():
                self._restore_focus(handle)
                self._state = PreviewState.VISIBLE
                self._log_event("preview_visible", pid=handle.pid, font=font)
                return handle

            returncode = process.wait()
            self._handle = None
            self._state = PreviewState.FAILED
            self._log_event("viewer_crashed", pid=handle.pid, returncode=returncode)
            raise ViewerCrash(returncode, str(output))

    def _await_viewer(self, handle: PreviewHandle) -> None:
        """Wait for the viewer to take focus, exit, or run out the deadline."""
        deadline = self._clock() + self.timeout_s
        while handle.process.is_alive():
            remaining = deadline - self._clock()
            try:
                active = self._focus.active_window(timeout=max(remaining, self.poll_interval_s))
            except CommandTimeout:
                active = self.self_window
            if active != self.self_window:
                return
            if self._clock() >= deadline:
                self._log_event("focus_wait_timeout", pid=handle.pid)
                return
            self._sleep(self.poll_interval_s)

    def _restore_focus(self, handle: PreviewHandle) -> None:
        try:
            self._focus.activate(self.self_window, timeout=self.timeout_s)
        except CommandTimeout:
            self._log_event("focus_restore_timeout", pid=handle.pid, window=self.self_window)

    def kill_preview(self) -> None:
        with self._lock:
            handle = self._handle
            if handle is None:
                return
            returncode = handle.process.terminate()
            self._handle = None
            self._state = PreviewState.NO_PREVIEW
            self._log_event("viewer_reaped", pid=handle.pid, returncode=returncode)

    def close(self) -> None:
        """Reap the live viewer and refuse further previews."""
        with self._lock:
            self._closed = True
            self.kill_preview()

    def wait_for_viewer(self) -> int | None:
        """Block until the live viewer is closed by the user, then reap it."""
        handle = self._handle
        if handle is None:
            return None
        returncode = handle.process.wait()
        with self._lock:
            if self._handle is handle:
                self._handle = None
                self._state = PreviewState.NO_PREVIEW
                self._log_event("viewer_closed", pid=handle.pid, returncode=returncode)
        return returncode
