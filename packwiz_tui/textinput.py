"""A single-line editable text field."""

from __future__ import annotations

from dataclasses import dataclass

from .styles import style_muted

_REVERSE = "\x1b[7m"
_RESET = "\x1b[0m"


def _cursor(char: str) -> str:
    return f"{_REVERSE}{char}{_RESET}"


@dataclass
class TextInput:
    """Editable text with a cursor, placeholder, character limit and view width."""

    placeholder: str = ""
    char_limit: int = 0
    width: int = 0
    prompt: str = "> "
    value: str = ""
    cursor: int = 0
    focused: bool = False

    def focus(self) -> None:
        """Start accepting keys."""
        self.focused = True

    def blur(self) -> None:
        """Stop accepting keys."""
        self.focused = False

    def _insert(self, value: str, pos: int, char: str) -> tuple[str, int]:
        if self.char_limit and len(value) >= self.char_limit:
            return value, pos
        return value[:pos] + char + value[pos:], pos + 1

    def handle_key(self, key: str) -> bool:
        """Apply a key to the field; return whether the key was used."""
        if not self.focused:
            return False
        value = self.value
        pos = min(max(self.cursor, 0), len(value))

        if key in ("backspace", "ctrl+h"):
            if pos:
                value = value[: pos - 1] + value[pos:]
                pos -= 1
        elif key in ("delete", "ctrl+d"):
            value = value[:pos] + value[pos + 1 :]
        elif key in ("left", "ctrl+b"):
            pos = max(pos - 1, 0)
        elif key in ("right", "ctrl+f"):
            pos = min(pos + 1, len(value))
        elif key in ("home", "ctrl+a"):
            pos = 0
        elif key in ("end", "ctrl+e"):
            pos = len(value)
        elif key == "ctrl+u":
            value, pos = value[pos:], 0
        elif key == "ctrl+k":
            value = value[:pos]
        elif key in ("ctrl+w", "alt+backspace"):
            cut = value[:pos].rstrip().rfind(" ") + 1
            value, pos = value[:cut] + value[pos:], cut
        elif key == "space":
            value, pos = self._insert(value, pos, " ")
        elif len(key) == 1 and key.isprintable():
            value, pos = self._insert(value, pos, key)
        else:
            return False

        self.value = value
        self.cursor = pos
        return True

    def view(self) -> str:
        """Render the prompt and the visible part of the field."""
        if not self.value and self.placeholder:
            text = self.placeholder
            if self.width:
                text = text[: self.width]
            if self.focused:
                return self.prompt + _cursor(text[0]) + style_muted(text[1:])
            return self.prompt + style_muted(text)

        value = self.value
        pos = min(max(self.cursor, 0), len(value))
        start = 0
        if self.width and pos >= self.width:
            start = pos - self.width + 1
        end = start + self.width if self.width else len(value)

        if not self.focused:
            return self.prompt + value[start:end]
        under = value[pos] if pos < len(value) else " "
        after_end = end if end > pos else pos
        return self.prompt + value[start:pos] + _cursor(under) + value[pos + 1 : after_end]