"""Preview pipeline: font listing, rendering, and the viewer process lifecycle."""

from .commands import CommandRunner, ViewerProcess
from .focus import WindowFocus
from .fonts import iter_candidates, list_fonts, parse_fc_list, version_key
from .lifecycle import ViewerLifecycleManager, build_viewer_command
from .models import SEPARATOR, FontSelection, PreviewHandle, PreviewState
from .render import RenderInvoker, build_render_command

__all__ = [
    "CommandRunner",
    "FontSelection",
    "PreviewHandle",
    "PreviewState",
    "RenderInvoker",
    "SEPARATOR",
    "ViewerLifecycleManager",
    "ViewerProcess",
    "WindowFocus",
    "build_render_command",
    "build_viewer_command",
    "iter_candidates",
    "list_fonts",
    "parse_fc_list",
    "version_key",
]
