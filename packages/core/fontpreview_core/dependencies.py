"""Startup check for the external programs fontpreview drives."""

from __future__ import annotations

import shutil
from typing import Callable, Iterable

from .errors import MissingDependency


# Executable -> package that usually provides it.
PROVIDERS: dict[str, str] = {
    "fzf": "fzf",
    "fc-list": "fontconfig",
    "convert": "imagemagick",
    "sxiv": "sxiv",
    "xdotool": "xdotool",
}

PREVIEW_TOOLS = ("convert", "sxiv", "xdotool")
INTERACTIVE_TOOLS = ("fzf", "fc-list") + PREVIEW_TOOLS


def required_tools(interactive: bool) -> tuple[str, ...]:
    return INTERACTIVE_TOOLS if interactive else PREVIEW_TOOLS


def missing_tools(tools: Iterable[str], which: Callable[[str], str | None] = shutil.which) -> list[str]:
    return [tool for tool in tools if which(tool) is None]


def check_dependencies(tools: Iterable[str], which: Callable[[str], str | None] = shutil.which) -> None:
    missing = missing_tools(tools, which)
    if not missing:
        return
    noun = "program" if len(missing) == 1 else "programs"
    raise MissingDependency(
        f"missing required {noun}: {', '.join(missing)}",
        [f"{tool} (install package: {PROVIDERS.get(tool, tool)})" for tool in missing],
    )
