"""Preview settings schema, layered loading and validation."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from .errors import InvalidConfiguration
from .logging_setup import get_logger


DEFAULT_PREVIEW_TEXT = "\n".join(
    [
        "ABCDEFGHIJKLM",
        "NOPQRSTUVWXYZ",
        "abcdefghijklm",
        "nopqrstuvwxyz",
        "1234567890",
        "!@$\\%(){}[]",
    ]
)

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
SIZE_PATTERN = re.compile(r"^([1-9][0-9]*)x([1-9][0-9]*)$")
POSITION_PATTERN = re.compile(r"^[+-][0-9]+[+-][0-9]+$")

ENV_PREFIX = "FONTPREVIEW_"


@dataclass(frozen=True)
class PreviewConfig:
    bg_color: str = "#ffffff"
    fg_color: str = "#000000"
    size: str = "532x365"
    position: str = "+0+0"
    font_size: int = 38
    preview_text: str = DEFAULT_PREVIEW_TEXT
    search_prompt: str = "❯ "
    output: Path | None = None
    trigger: str = "focus"

    @property
    def canvas(self) -> tuple[int, int]:
        match = SIZE_PATTERN.match(self.size)
        if match is None:
            raise InvalidConfiguration(f"invalid size {self.size!r}", ["expected WIDTHxHEIGHT, e.g. 532x365"])
        return int(match.group(1)), int(match.group(2))

    @property
    def geometry(self) -> str:
        return f"{self.size}{self.position}"


DEFAULT_CONFIG = PreviewConfig()

# Environment variable suffix -> config field.
_ENV_FIELDS = {
    "SEARCH_PROMPT": "search_prompt",
    "SIZE": "size",
    "POSITION": "position",
    "FONT_SIZE": "font_size",
    "BG_COLOR": "bg_color",
    "FG_COLOR": "fg_color",
    "PREVIEW_TEXT": "preview_text",
    "TRIGGER": "trigger",
}


def config_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    base = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "fontpreview" / "config.json"


def _coerce(name: str, value: Any) -> Any:
    if name == "font_size":
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(f"invalid font size {value!r}", ["expected a positive integer"]) from exc
    if name == "output":
        return Path(value).expanduser() if value else None
    return str(value)


def _merge(cfg: PreviewConfig, raw: Mapping[str, Any]) -> PreviewConfig:
    known = {f.name for f in fields(PreviewConfig)}
    updates = {k: _coerce(k, v) for k, v in raw.items() if k in known and v is not None}
    return replace(cfg, **updates) if updates else cfg


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> PreviewConfig:
    """Defaults, then the JSON settings file, then ``FONTPREVIEW_*`` variables."""
    env = os.environ if environ is None else environ
    path = path or config_path(env)
    cfg = PreviewConfig()

    if path.exists():
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            get_logger().warning(f"ignoring settings file {path}: {exc}", extra={"event": "config_ignored"})
            raw = {}
        if isinstance(raw, dict):
            unknown = sorted(set(raw) - {f.name for f in fields(PreviewConfig)})
            if unknown:
                get_logger().warning(f"unknown settings ignored: {', '.join(unknown)}", extra={"event": "config_unknown_keys"})
            cfg = _merge(cfg, raw)

    from_env = {name: env[ENV_PREFIX + suffix] for suffix, name in _ENV_FIELDS.items() if ENV_PREFIX + suffix in env}
    return _merge(cfg, from_env)


def apply_overrides(cfg: PreviewConfig, **overrides: Any) -> PreviewConfig:
    return _merge(cfg, overrides)


def validate_config(cfg: PreviewConfig) -> PreviewConfig:
    for label, value in (("background color", cfg.bg_color), ("foreground color", cfg.fg_color)):
        if not COLOR_PATTERN.match(value):
            raise InvalidConfiguration(f"invalid {label} {value!r}", ["expected #RRGGBB, e.g. #ffffff"])
    if not SIZE_PATTERN.match(cfg.size):
        raise InvalidConfiguration(f"invalid size {cfg.size!r}", ["expected WIDTHxHEIGHT, e.g. 532x365"])
    if not POSITION_PATTERN.match(cfg.position):
        raise InvalidConfiguration(f"invalid position {cfg.position!r}", ["expected +X+Y with signed offsets, e.g. +0+0"])
    if cfg.font_size <= 0:
        raise InvalidConfiguration(f"invalid font size {cfg.font_size!r}", ["expected a positive integer"])
    if not cfg.trigger.strip():
        raise InvalidConfiguration("empty preview trigger", ["expected an fzf key or event name, e.g. focus"])
    return cfg
