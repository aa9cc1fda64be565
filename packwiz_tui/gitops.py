"""Git operations on the modpack repository."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from datetime import datetime

COMMIT_MESSAGE_PREFIX = "chore: update modpack via packwiz-tui"


class CommandError(RuntimeError):
    """An external command could not be run or exited with a failure status."""

    def __init__(self, message: str, output: str = "", returncode: int | None = None):
        super().__init__(message)
        self.output = output
        self.returncode = returncode


@dataclass
class GitStatus:
    """Absolute, normalised paths of changed files grouped by kind of change."""

    modified: set[str] = field(default_factory=set)
    added: set[str] = field(default_factory=set)
    deleted: set[str] = field(default_factory=set)


def _git(*args: str, cwd: str | None = None, combined: bool = False) -> str:
    stderr = subprocess.STDOUT if combined else subprocess.PIPE
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=stderr,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise CommandError(f"git: {exc}") from exc
    output = proc.stdout or ""
    if proc.returncode != 0:
        raise CommandError(
            f"git {args[0]} exited with status {proc.returncode}",
            output,
            proc.returncode,
        )
    return output


def detect_git_repo() -> str:
    """Return the top-level directory of the repository holding the working directory."""
    return _git("rev-parse", "--show-toplevel").strip()


def get_git_remote(repo_path: str) -> str:
    """Return the origin URL of the repository, or an empty string."""
    try:
        return _git("-C", repo_path, "remote", "get-url", "origin").strip()
    except CommandError:
        return ""


def clone_repo(url: str, target_dir: str) -> str:
    """Clone ``url`` into ``target_dir`` and return git's output."""
    return _git("clone", url, target_dir, combined=True)


def git_checkout_file(repo_root: str, file_path: str) -> None:
    """Restore ``file_path`` from the index."""
    _git("checkout", "--", file_path, cwd=repo_root)


def parse_porcelain(output: str, repo_root: str) -> GitStatus:
    """Group the files in ``git status --porcelain`` output by change."""
    status = GitStatus()
    for line in output.split("\n"):
        if len(line) < 4:
            continue
        code = line[:2]
        filename = line[3:].strip()
        if not filename:
            continue
        path = os.path.normpath(os.path.join(repo_root, filename))
        if "A" in code:
            status.added.add(path)
        elif "M" in code:
            status.modified.add(path)
        if "D" in code:
            status.deleted.add(path)
    return status


def get_git_status(repo_root: str) -> GitStatus:
    """Return the working-tree status of the repository."""
    return parse_porcelain(_git("status", "--porcelain", cwd=repo_root), repo_root)


def git_push_all(repo_root: str) -> str:
    """Stage everything, commit and push; return the combined output."""
    added = _git("add", ".", cwd=repo_root, combined=True)
    stamp = datetime.now().strftime("%Y-%m-%d %H:%M")
    message = f"{COMMIT_MESSAGE_PREFIX} [{stamp}]"
    try:
        committed = _git("commit", "-m", message, cwd=repo_root, combined=True)
    except CommandError as exc:
        committed = exc.output  # nothing to commit is not a failure
    try:
        pushed = _git("push", cwd=repo_root, combined=True)
    except CommandError as exc:
        raise CommandError(str(exc), added + committed + exc.output, exc.returncode) from exc
    return added + committed + pushed