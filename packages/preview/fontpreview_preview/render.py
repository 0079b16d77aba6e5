"""Sample-image rasterization through ImageMagick."""

from __future__ import annotations

from pathlib import Path

from fontpreview_core.config import PreviewConfig
from fontpreview_core.errors import RasterizationFailure
from fontpreview_core.logging_setup import get_logger

from .commands import CommandRunner


BACKEND_HINT = "is ImageMagick installed with its FreeType and Ghostscript delegates?"


def build_render_command(font: str, cfg: PreviewConfig, output: Path, program: str = "convert") -> list[str]:
    return [
        program,
        "-size",
        cfg.size,
        f"xc:{cfg.bg_color}",
        "-gravity",
        "center",
        "-pointsize",
        str(cfg.font_size),
        "-font",
        font,
        "-fill",
        cfg.fg_color,
        "-annotate",
        "+0+0",
        cfg.preview_text,
        "-flatten",
        str(output),
    ]


class RenderInvoker:
    def __init__(self, runner: CommandRunner, cfg: PreviewConfig, program: str = "convert") -> None:
        self._runner = runner
        self.cfg = cfg
        self.program = program

    def render(self, font: str, output: Path) -> Path:
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        argv = build_render_command(font, self.cfg, output, program=self.program)
        result = self._runner.run(argv, capture=True)
        if result.returncode != 0:
            stderr = (result.stderr or "").strip().splitlines()
            get_logger().error(
                f"render failed font={font} status={result.returncode}",
                extra={"event": "render_failed"},
            )
            raise RasterizationFailure(
                f"could not render a preview of {font!r} ({self.program} exited with status {result.returncode})",
                [*stderr, BACKEND_HINT],
            )
        get_logger().debug(f"rendered font={font} output={output}", extra={"event": "render_ok"})
        return output
