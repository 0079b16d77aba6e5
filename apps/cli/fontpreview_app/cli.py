"""CLI entrypoint: fuzzy font search with a live preview, or direct previews of font files."""

from __future__ import annotations

import argparse
import sys
from importlib import metadata
from pathlib import Path

from fontpreview_core import (
    FontPreviewError,
    Interrupted,
    InvalidConfiguration,
    PreviewConfig,
    UnknownOption,
    apply_overrides,
    check_dependencies,
    format_error,
    load_config,
    required_tools,
    validate_config,
)
from fontpreview_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from fontpreview_preview import CommandRunner, list_fonts

from .session import PreviewSession


def _installed_version() -> str:
    try:
        return metadata.version("fontpreview")
    except metadata.PackageNotFoundError:
        return "0.1.0"


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UnknownOption(message, [f"try '{self.prog} --help' for more information"])


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="fontpreview",
        description="Fuzzy-search installed fonts and preview a rendered sample.",
    )
    parser.add_argument(
        "fonts",
        nargs="*",
        metavar="FONT_FILE",
        help="Preview these font files directly instead of searching",
    )
    parser.add_argument("-i", "--input", action="append", default=[], metavar="FONT_FILE", help="Font file to preview (repeatable)")
    parser.add_argument("-o", "--output", default=None, help="Write the preview image here; the file is kept on exit")
    parser.add_argument("--size", default=None, metavar="WxH", help="Preview image size, e.g. 532x365")
    parser.add_argument("--position", default=None, metavar="+X+Y", help="Viewer window location, e.g. +0+0")
    parser.add_argument("--font-size", default=None, metavar="N", help="Point size of the sample text")
    parser.add_argument("--bg-color", default=None, metavar="#RRGGBB", help="Background color")
    parser.add_argument("--fg-color", default=None, metavar="#RRGGBB", help="Text color")
    parser.add_argument("--preview-text", default=None, help="Sample text to render")
    parser.add_argument("--search-prompt", default=None, help="Prompt shown by the fuzzy finder")
    parser.add_argument("--trigger", default=None, help="fzf key or event that refreshes the preview (default: focus)")
    parser.add_argument("--config", default=None, help="Settings file (default: ~/.config/fontpreview/config.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Also log to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_installed_version()}")
    return parser


def resolve_config(args: argparse.Namespace) -> PreviewConfig:
    cfg = load_config(Path(args.config).expanduser() if args.config else None)
    cfg = apply_overrides(
        cfg,
        bg_color=args.bg_color,
        fg_color=args.fg_color,
        size=args.size,
        position=args.position,
        font_size=args.font_size,
        preview_text=args.preview_text,
        search_prompt=args.search_prompt,
        trigger=args.trigger,
        output=args.output,
    )
    return validate_config(cfg)


def resolve_font_files(names: list[str]) -> list[Path]:
    paths = [Path(name).expanduser() for name in names]
    missing = [str(p) for p in paths if not p.is_file()]
    if missing:
        raise InvalidConfiguration("font file not found", missing)
    return [p.resolve() for p in paths]


def run(args: argparse.Namespace) -> int:
    cfg = resolve_config(args)
    files = resolve_font_files([*args.fonts, *args.input])
    check_dependencies(required_tools(interactive=not files))
    runner = CommandRunner()

    if files:
        with PreviewSession(cfg, runner) as session:
            session.preview_files(files)
        return 0

    fonts = list_fonts(runner)
    get_logger().info(f"listed {len(fonts)} fonts", extra={"event": "fonts_listed"})
    with PreviewSession(cfg, runner) as session:
        choice = session.run_interactive(fonts)

    if choice is not None:
        print(choice.font_identifier())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        configure_logging(console=args.verbose)
        install_crash_hooks()
        return int(run(args))
    except FontPreviewError as exc:
        get_logger().error(exc.message, extra={"event": exc.event})
        print(format_error(exc), file=sys.stderr)
        return exc.exit_code
    except KeyboardInterrupt:
        exc = Interrupted()
        get_logger().info(exc.message, extra={"event": exc.event})
        print(format_error(exc), file=sys.stderr)
        return exc.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
