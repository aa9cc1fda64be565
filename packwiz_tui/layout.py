"""Terminal styling and block layout for ANSI text."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, replace

from wcwidth import wcwidth

_CSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_HEX = re.compile(r"#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")

_BORDERS = {
    "rounded": ("╭", "╮", "╰", "╯", "─", "│"),
    "normal": ("┌", "┐", "└", "┘", "─", "│"),
}


class Align(enum.Enum):
    """Position along an axis, from 0.0 (start) to 1.0 (end)."""

    LEFT = 0.0
    CENTER = 0.5
    RIGHT = 1.0
    TOP = 0.0
    BOTTOM = 1.0


def _offset(extra: int, align: Align) -> int:
    return int(extra * align.value) if extra > 0 else 0


def strip_escapes(text: str) -> str:
    """Remove ANSI CSI escape sequences."""
    return _CSI.sub("", text)


def _line_width(line: str) -> int:
    return sum(max(wcwidth(ch), 0) for ch in line)


def visible_width(text: str) -> int:
    """Width in terminal cells of the widest line of ``text``."""
    return max(_line_width(line) for line in strip_escapes(text).split("\n"))


def text_height(text: str) -> int:
    """Number of lines in ``text``."""
    return text.count("\n") + 1


def _rgb(color: str) -> tuple[int, int, int]:
    match = _HEX.fullmatch(color)
    if match is None:
        raise ValueError(f"invalid colour {color!r}, expected #rrggbb")
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def _fg(color: str) -> str:
    return "38;2;{};{};{}".format(*_rgb(color))


def _bg(color: str) -> str:
    return "48;2;{};{};{}".format(*_rgb(color))


def _paint(text: str, codes: str) -> str:
    if not codes or not text:
        return text
    return f"\x1b[{codes}m{text}\x1b[0m"


@dataclass(frozen=True)
class Style:
    """An immutable description of how to render a block of text."""

    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    strikethrough: bool = False
    padding: tuple[int, ...] = (0, 0, 0, 0)
    border: str | None = None
    border_foreground: str | None = None
    width: int | None = None
    height: int | None = None
    align: Align = Align.LEFT

    def __post_init__(self) -> None:
        pad = tuple(self.padding)
        if len(pad) == 1:
            pad = pad * 4
        elif len(pad) == 2:
            pad = (pad[0], pad[1], pad[0], pad[1])
        elif len(pad) != 4:
            raise ValueError("padding takes 1, 2 or 4 values")
        if any(p < 0 for p in pad):
            raise ValueError("padding cannot be negative")
        object.__setattr__(self, "padding", pad)
        if self.border is not None and self.border not in _BORDERS:
            raise ValueError(f"unknown border {self.border!r}")
        for color in (self.foreground, self.background, self.border_foreground):
            if color is not None:
                _rgb(color)

    def with_size(self, width: int | None = None, height: int | None = None) -> Style:
        """Return a copy with the given width and/or height set."""
        return replace(
            self,
            width=self.width if width is None else width,
            height=self.height if height is None else height,
        )

    def _codes(self) -> str:
        codes = []
        if self.bold:
            codes.append("1")
        if self.strikethrough:
            codes.append("9")
        if self.foreground:
            codes.append(_fg(self.foreground))
        if self.background:
            codes.append(_bg(self.background))
        return ";".join(codes)

    def render(self, text: str) -> str:
        """Render ``text`` with padding, size, colours and border applied."""
        lines = text.replace("\r\n", "\n").split("\n")
        top, right, bottom, left = self.padding
        inner = max(_line_width(strip_escapes(line)) for line in lines)
        if self.width is not None:
            inner = max(inner, self.width - left - right)

        body = []
        for line in lines:
            extra = inner - _line_width(strip_escapes(line))
            lead = _offset(extra, self.align)
            body.append(" " * (left + lead) + line + " " * (extra - lead + right))
        full = inner + left + right
        blank = " " * full
        body = [blank] * top + body + [blank] * bottom
        if self.height is not None and len(body) < self.height:
            body.extend([blank] * (self.height - len(body)))

        codes = self._codes()
        body = [_paint(line, codes) for line in body]

        if self.border:
            tl, tr, bl, br, horiz, vert = _BORDERS[self.border]
            border_codes = _fg(self.border_foreground) if self.border_foreground else ""
            side = _paint(vert, border_codes)
            body = (
                [_paint(tl + horiz * full + tr, border_codes)]
                + [side + line + side for line in body]
                + [_paint(bl + horiz * full + br, border_codes)]
            )
        return "\n".join(body)


def join_vertical(align: Align, *args: str) -> str:
    """Stack blocks on top of each other, aligning lines horizontally."""
    if not args:
        return ""
    lines = [line for block in args for line in block.split("\n")]
    width = max(_line_width(strip_escapes(line)) for line in lines)
    out = []
    for line in lines:
        extra = width - _line_width(strip_escapes(line))
        lead = _offset(extra, align)
        out.append(" " * lead + line + " " * (extra - lead))
    return "\n".join(out)


def join_horizontal(align: Align, *args: str) -> str:
    """Place blocks side by side, aligning them vertically."""
    if not args:
        return ""
    blocks = [block.split("\n") for block in args]
    height = max(len(block) for block in blocks)
    columns = []
    for block in blocks:
        width = max(_line_width(strip_escapes(line)) for line in block)
        extra = height - len(block)
        lead = _offset(extra, align)
        padded = [""] * lead + block + [""] * (extra - lead)
        columns.append(
            [line + " " * (width - _line_width(strip_escapes(line))) for line in padded]
        )
    return "\n".join("".join(row) for row in zip(*columns))


def place(width: int, height: int, halign: Align, valign: Align, content: str) -> str:
    """Position ``content`` inside a ``width`` x ``height`` area of blank space."""
    lines = content.split("\n")
    content_width = max(_line_width(strip_escapes(line)) for line in lines)
    if width > content_width:
        placed = []
        for line in lines:
            total = width - _line_width(strip_escapes(line))
            lead = _offset(total, halign)
            placed.append(" " * lead + line + " " * (total - lead))
        lines = placed
    if height > len(lines):
        extra = height - len(lines)
        lead = _offset(extra, valign)
        blank = " " * max(width, content_width)
        lines = [blank] * lead + lines + [blank] * (extra - lead)
    return "\n".join(lines)