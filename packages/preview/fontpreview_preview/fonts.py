"""Installed-font enumeration through fontconfig."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from .commands import CommandRunner, check_output
from .models import FontSelection


FC_LIST_FORMAT = "%{family[0]}\t%{style[0]}\t%{file}\n"

_DIGITS = re.compile(r"(\d+)")


def version_key(text: str) -> list[tuple[int, int | str]]:
    """Sort key comparing digit runs numerically, like ``sort -V``."""
    key: list[tuple[int, int | str]] = []
    for part in _DIGITS.split(text):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part))
    return key


def parse_fc_list(output: str) -> list[FontSelection]:
    seen: set[FontSelection] = set()
    fonts: list[FontSelection] = []
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) != 3:
            continue
        family, style, path = (p.strip() for p in parts)
        if not family or not path:
            continue
        label = f"{family} {style}" if style else family
        selection = FontSelection(label=label, path=path)
        if selection in seen:
            continue
        seen.add(selection)
        fonts.append(selection)
    fonts.sort(key=lambda s: version_key(str(s)))
    return fonts


def list_fonts(runner: CommandRunner, program: str = "fc-list") -> list[FontSelection]:
    return parse_fc_list(check_output(runner, [program, "--format", FC_LIST_FORMAT]))


def iter_candidates(fonts: Iterable[FontSelection]) -> Iterator[str]:
    for font in fonts:
        yield str(font)
