"""Fatal error kinds and their user-facing rendering."""

from __future__ import annotations

from typing import Iterable


ERROR_PREFIX = "fontpreview: error:"


class FontPreviewError(RuntimeError):
    """Base for every error that ends the session."""

    exit_code = 1
    event = "fatal_error"

    def __init__(self, message: str, details: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.details = tuple(d for d in details if d)


class MissingDependency(FontPreviewError):
    event = "missing_dependency"


class InvalidConfiguration(FontPreviewError):
    event = "invalid_configuration"


class RasterizationFailure(FontPreviewError):
    event = "rasterization_failure"


class ViewerCrash(FontPreviewError):
    event = "viewer_crash"

    def __init__(self, returncode: int | None, image_path: str = "") -> None:
        details = [f"image: {image_path}"] if image_path else []
        super().__init__(f"image viewer exited before it became visible (exit status {returncode})", details)
        self.returncode = returncode


class UnknownOption(FontPreviewError):
    event = "unknown_option"


class CommandFailure(FontPreviewError):
    event = "command_failure"


class CommandTimeout(CommandFailure):
    event = "command_timeout"


class Interrupted(FontPreviewError):
    event = "interrupted"

    def __init__(self, signum: int | None = None) -> None:
        super().__init__("interrupted" if signum is None else f"interrupted by signal {signum}")
        self.signum = signum


def format_error(exc: FontPreviewError) -> str:
    lines = [f"{ERROR_PREFIX} {exc.message}"]
    lines.extend(f"    {line}" for line in exc.details)
    return "\n".join(lines)
