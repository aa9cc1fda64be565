"""Terminal front end: reads keys and mouse clicks, draws the interface, runs effects."""

from __future__ import annotations

import argparse
import queue
import re
import subprocess
import sys
import threading
from collections import deque
from contextlib import ExitStack

import blessed

from .app import App
from .tasks import (
    CommandDone,
    KeyPressed,
    MouseReleased,
    QuitRequest,
    RunExternal,
    Task,
    Tick,
    WindowResized,
)
from .views import render

MOUSE_ON = "\x1b[?1000h\x1b[?1003h\x1b[?1006h"
MOUSE_OFF = "\x1b[?1006l\x1b[?1003l\x1b[?1000l"
INPUT_TIMEOUT = 0.05
_MOUSE_PREFIX = "\x1b[<"
_MAX_MOUSE_LEN = 32

_SGR_MOUSE = re.compile(r"\x1b\[<(\d+);(\d+);(\d+)([mM])\Z")

_CONTROL = {
    "\x03": "ctrl+c",
    "\r": "enter",
    "\n": "enter",
    "\x1b": "esc",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\t": "tab",
}

_NAMED = {
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_LEFT": "left",
    "KEY_RIGHT": "right",
    "KEY_ENTER": "enter",
    "KEY_ESCAPE": "esc",
    "KEY_BACKSPACE": "backspace",
    "KEY_DELETE": "delete",
    "KEY_HOME": "home",
    "KEY_END": "end",
    "KEY_TAB": "tab",
    "KEY_PGUP": "pgup",
    "KEY_PGDOWN": "pgdown",
}


def decode_mouse(sequence: str) -> MouseReleased | None:
    """Decode an SGR mouse report; only a left-button release yields a message."""
    match = _SGR_MOUSE.match(sequence)
    if match is None:
        return None
    button, x, y, final = match.groups()
    code = int(button)
    if final != "m" or code & 0b11 != 0 or code & (32 | 64):
        return None
    return MouseReleased(x=int(x) - 1, y=int(y) - 1)


def key_name(keystroke: object) -> str | None:
    """The name of a keystroke as the interface expects it, or None for no key."""
    text = str(keystroke)
    if text in _CONTROL:
        return _CONTROL[text]
    name = getattr(keystroke, "name", None)
    if getattr(keystroke, "is_sequence", False) and name:
        return _NAMED.get(name, name.removeprefix("KEY_").lower())
    if not text:
        return None
    if len(text) == 1 and 1 <= ord(text) <= 26:
        return "ctrl+" + chr(ord(text) + 96)
    return text


class _Session:
    """Full-screen, unbuffered, mouse-reporting terminal mode that can be paused."""

    def __init__(self, term: blessed.Terminal) -> None:
        self._term = term
        self._stack: ExitStack | None = None

    def _write(self, text: str) -> None:
        self._term.stream.write(text)
        self._term.stream.flush()

    def open(self) -> None:
        if self._stack is not None:
            return
        stack = ExitStack()
        stack.enter_context(self._term.fullscreen())
        stack.enter_context(self._term.cbreak())
        stack.enter_context(self._term.hidden_cursor())
        self._write(MOUSE_ON)
        stack.callback(self._write, MOUSE_OFF)
        self._stack = stack

    def close(self) -> None:
        if self._stack is not None:
            stack, self._stack = self._stack, None
            stack.close()


def _start_task(task: Task, events: queue.Queue) -> None:
    def work() -> None:
        try:
            result = task.work()
        except Exception as exc:  # a failed background job is shown, not fatal
            events.put(CommandDone(output="", error=str(exc)))
            return
        if result is not None:
            events.put(result)

    threading.Thread(target=work, daemon=True).start()


def _start_timer(tick: Tick, events: queue.Queue) -> None:
    timer = threading.Timer(tick.delay, events.put, args=(tick.message,))
    timer.daemon = True
    timer.start()


def _run_external(effect: RunExternal) -> str | None:
    try:
        proc = subprocess.run(list(effect.argv), cwd=effect.cwd, check=False)
    except OSError as exc:
        return str(exc)
    if proc.returncode != 0:
        return f"exit status {proc.returncode}"
    return None


def _read_mouse(term: blessed.Terminal, first: str) -> str | None:
    """Complete a mouse report that starts with ``first``; None if it is not one."""
    seq = first
    while len(seq) < len(_MOUSE_PREFIX) and _MOUSE_PREFIX.startswith(seq):
        ch = str(term.inkey(timeout=0))
        if not ch:
            break
        seq += ch
    if not seq.startswith(_MOUSE_PREFIX):
        if len(seq) > len(first):
            term.ungetch(seq[len(first):])
        return None
    while len(seq) < _MAX_MOUSE_LEN and seq[-1] not in "mM":
        ch = str(term.inkey(timeout=INPUT_TIMEOUT))
        if not ch:
            return ""
        seq += ch
    return seq


def _read_input(term: blessed.Terminal) -> object | None:
    key = term.inkey(timeout=INPUT_TIMEOUT)
    if not key:
        return None
    text = str(key)
    if text.startswith("\x1b"):
        report = _read_mouse(term, text)
        if report is not None:
            return decode_mouse(report)
    name = key_name(key)
    return KeyPressed(key=name) if name is not None else None


def _draw(term: blessed.Terminal, frame: str) -> None:
    parts = [term.home]
    for row, line in enumerate(frame.split("\n")[: term.height]):
        parts.append(term.move_yx(row, 0) + line + term.clear_eol)
    parts.append(term.clear_eos)
    term.stream.write("".join(parts))
    term.stream.flush()


def _run(term: blessed.Terminal) -> None:
    app = App()
    events: queue.Queue = queue.Queue()
    effects: deque = deque(app.init())
    session = _Session(term)
    size: tuple[int, int] | None = None
    frame: str | None = None

    session.open()
    try:
        while True:
            while effects:
                effect = effects.popleft()
                if isinstance(effect, QuitRequest):
                    return
                if isinstance(effect, Task):
                    _start_task(effect, events)
                elif isinstance(effect, Tick):
                    _start_timer(effect, events)
                elif isinstance(effect, RunExternal):
                    session.close()
                    error = _run_external(effect)
                    session.open()
                    size = None
                    frame = None
                    events.put(effect.on_exit(error))

            current = (term.width, term.height)
            if current != size:
                size = current
                effects.extend(app.update(WindowResized(width=current[0], height=current[1])))
                continue

            rendered = render(app)
            if rendered != frame:
                _draw(term, rendered)
                frame = rendered

            msg = _read_input(term)
            if msg is not None:
                effects.extend(app.update(msg))

            while True:
                try:
                    msg = events.get_nowait()
                except queue.Empty:
                    break
                effects.extend(app.update(msg))
    finally:
        session.close()


def main(argv: list[str] | None = None) -> int:
    """Start the interface; returns the exit status."""
    parser = argparse.ArgumentParser(
        prog="packwiz-tui",
        description="Manage a packwiz modpack from the terminal.",
    )
    parser.parse_args(argv)

    term = blessed.Terminal(stream=sys.stdout)
    if not term.is_a_tty:
        print("Error: standard output is not a terminal", file=sys.stderr)
        return 1
    try:
        _run(term)
    except KeyboardInterrupt:
        return 0
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())