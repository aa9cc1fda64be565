"""Running the packwiz command line tool and catching its questions."""

from __future__ import annotations

import fcntl
import os
import pty
import select
import subprocess
import termios
import threading
import time
from dataclasses import dataclass
from typing import IO

from .gitops import CommandError
from .prompts import (
    InteractivePrompt,
    already_answered,
    combine_search_results,
    detect_interactive_prompt,
    extract_yes_no_prompt,
    strip_ansi,
)

PACKWIZ = "packwiz"
INTERACTIVE_TIMEOUT = 10.0
INPUT_LINE_DELAY = 0.05
DRAIN_DELAY = 0.05
_READ_SIZE = 1024


@dataclass
class PackwizResult:
    """What packwiz printed, and the question it asked if it is waiting for input."""

    output: str
    prompt: InteractivePrompt | None = None


def _decode(chunks: list[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


def _failure(returncode: int, output: str) -> CommandError:
    return CommandError(f"{PACKWIZ} exited with status {returncode}", output, returncode)


def _start(args: tuple[str, ...], **kwargs) -> subprocess.Popen:
    try:
        return subprocess.Popen([PACKWIZ, *args], **kwargs)
    except OSError as exc:
        raise CommandError(f"{PACKWIZ}: {exc}") from exc


class _Collector:
    """Reads a stream on a background thread and keeps everything it read."""

    def __init__(self, stream: IO[bytes]) -> None:
        self._chunks: list[bytes] = []
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._pump, args=(stream,), daemon=True)
        self._thread.start()

    def _pump(self, stream: IO[bytes]) -> None:
        try:
            while chunk := stream.read1(_READ_SIZE):
                with self._lock:
                    self._chunks.append(chunk)
        except (OSError, ValueError):
            return

    def text(self) -> str:
        with self._lock:
            return _decode(self._chunks)

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)


class _Terminal:
    """The controlling side of a pseudo-terminal, safe to write from another thread."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._lock = threading.Lock()
        self._closed = False

    def write_line(self, line: str) -> bool:
        with self._lock:
            if self._closed:
                return False
            try:
                os.write(self.fd, (line + "\n").encode("utf-8"))
            except OSError:
                return False
            return True

    def read(self) -> bytes:
        try:
            return os.read(self.fd, _READ_SIZE)
        except OSError:
            return b""

    def ready(self, timeout: float) -> bool:
        readable, _, _ = select.select([self.fd], [], [], timeout)
        return bool(readable)

    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._closed = True
                os.close(self.fd)


def _claim_terminal() -> None:
    try:
        fcntl.ioctl(0, termios.TIOCSCTTY, 0)
    except OSError:
        pass


def run_packwiz(pack_dir: str, *args: str) -> str:
    """Run packwiz in ``pack_dir`` and return its trimmed combined output."""
    try:
        proc = subprocess.run(
            [PACKWIZ, *args],
            cwd=pack_dir,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise CommandError(f"{PACKWIZ}: {exc}") from exc
    output = (proc.stdout or "").strip()
    if proc.returncode != 0:
        raise _failure(proc.returncode, output)
    return output


def run_packwiz_interactive(pack_dir: str, *args: str) -> PackwizResult:
    """Run packwiz, returning its question if it stops to ask one.

    A command still running after ``INTERACTIVE_TIMEOUT`` seconds is stopped when
    its output so far holds a list of choices; otherwise it is waited for.
    """
    proc = _start(
        args,
        cwd=pack_dir,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
    )
    collector = _Collector(proc.stdout)
    try:
        proc.wait(timeout=INTERACTIVE_TIMEOUT)
    except subprocess.TimeoutExpired:
        output = collector.text()
        prompt = detect_interactive_prompt(output)
        if prompt is not None:
            proc.kill()
            proc.wait()
            return PackwizResult(output=output, prompt=prompt)
        proc.wait()
    collector.join()
    proc.stdout.close()

    output = collector.text()
    prompt = detect_interactive_prompt(output)
    if prompt is not None:
        return PackwizResult(output=output, prompt=prompt)
    if proc.returncode != 0:
        raise _failure(proc.returncode, output.strip())
    return PackwizResult(output=output.strip())


def run_packwiz_with_input(pack_dir: str, input_text: str, *args: str) -> PackwizResult:
    """Run packwiz on a pseudo-terminal, typing ``input_text`` one line at a time.

    If packwiz asks a yes/no question that the input does not answer yet, it is
    stopped and the question is returned.
    """
    master, slave = pty.openpty()
    try:
        proc = subprocess.Popen(
            [PACKWIZ, *args],
            cwd=pack_dir,
            stdin=slave,
            stdout=slave,
            stderr=slave,
            start_new_session=True,
            preexec_fn=_claim_terminal,
        )
    except OSError as exc:
        os.close(master)
        raise CommandError(f"{PACKWIZ}: {exc}") from exc
    finally:
        os.close(slave)

    terminal = _Terminal(master)

    def feed() -> None:
        for line in input_text.split("\n"):
            if line:
                if not terminal.write_line(line):
                    return
                time.sleep(INPUT_LINE_DELAY)

    threading.Thread(target=feed, daemon=True).start()

    answered = already_answered(input_text)
    chunks: list[bytes] = []
    try:
        while True:
            if terminal.ready(DRAIN_DELAY):
                data = terminal.read()
                if not data:
                    break
                chunks.append(data)
                if not answered:
                    clean = strip_ansi(_decode(chunks))
                    prompt = extract_yes_no_prompt(clean)
                    if prompt is not None:
                        proc.kill()
                        return PackwizResult(output=clean, prompt=prompt)
            elif proc.poll() is not None:
                while terminal.ready(DRAIN_DELAY):
                    data = terminal.read()
                    if not data:
                        break
                    chunks.append(data)
                break
    finally:
        terminal.close()
        proc.wait()
    return PackwizResult(output=strip_ansi(_decode(chunks)).strip())


def run_both_packwiz_searches(pack_dir: str, mod_name: str) -> PackwizResult:
    """Add a mod from Modrinth, searching CurseForge too when Modrinth needs a choice.

    Raises ``CommandError`` when neither source offers any choice.
    """
    mr_output = ""
    mr_prompt = None
    try:
        result = run_packwiz_interactive(pack_dir, "mr", "add", mod_name)
    except CommandError as exc:
        mr_output = exc.output
    else:
        if result.prompt is None:
            return result
        mr_output, mr_prompt = result.output, result.prompt

    cf_output = ""
    cf_prompt = None
    try:
        result = run_packwiz_interactive(pack_dir, "cf", "add", mod_name)
    except CommandError as exc:
        cf_output = exc.output
    else:
        cf_output, cf_prompt = result.output, result.prompt

    try:
        combined = combine_search_results(mr_output, mr_prompt, cf_output, cf_prompt)
    except LookupError as exc:
        raise CommandError("no results found", str(exc)) from exc
    return PackwizResult(output=combined.output, prompt=combined)