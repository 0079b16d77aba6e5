"""Typed models for font selections and the live preview."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .commands import ViewerProcess


SEPARATOR = " <- "
FAMILY_FILLER = "-"


class PreviewState(str, Enum):
    NO_PREVIEW = "NoPreview"
    LAUNCHING = "Launching"
    VISIBLE = "Visible"
    FAILED = "Failed"


@dataclass(frozen=True)
class FontSelection:
    label: str
    path: str | None = None

    @classmethod
    def parse(cls, raw: str) -> "FontSelection":
        line = raw.strip("\r\n")
        if not line.strip():
            raise ValueError("font selection must not be empty")
        label, _sep, path = line.partition(SEPARATOR)
        return cls(label=label.strip(), path=path.strip() or None)

    @classmethod
    def from_file(cls, path: str | Path) -> "FontSelection":
        p = Path(path)
        return cls(label=p.stem, path=str(p))

    def font_identifier(self) -> str:
        """Explicit file when known, otherwise a family name ImageMagick accepts."""
        if self.path:
            return self.path
        return self.label.replace(" ", FAMILY_FILLER)

    def __str__(self) -> str:
        if self.path:
            return f"{self.label}{SEPARATOR}{self.path}"
        return self.label


@dataclass(frozen=True)
class PreviewHandle:
    process: "ViewerProcess"
    image_path: Path
    selection: FontSelection

    @property
    def pid(self) -> int:
        return self.process.pid
