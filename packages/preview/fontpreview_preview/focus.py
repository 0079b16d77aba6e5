"""Foreground-window query and activation through xdotool."""

from __future__ import annotations

from .commands import CommandRunner, check_output


class WindowFocus:
    def __init__(self, runner: CommandRunner, program: str = "xdotool") -> None:
        self._runner = runner
        self.program = program

    def active_window(self, timeout: float | None = None) -> str:
        """Id of the focused window; raises ``CommandTimeout`` if xdotool outlives ``timeout``."""
        return check_output(self._runner, [self.program, "getactivewindow"], timeout=timeout).strip()

    def activate(self, window_id: str, timeout: float | None = None) -> None:
        check_output(self._runner, [self.program, "windowactivate", window_id], timeout=timeout)
