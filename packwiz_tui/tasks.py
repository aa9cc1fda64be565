"""Messages exchanged with the interface, and the background work that produces them."""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .gitops import (
    CommandError,
    GitStatus,
    clone_repo,
    detect_git_repo,
    get_git_remote,
    get_git_status,
    git_push_all,
)
from .packwiz import (
    PackwizResult,
    run_both_packwiz_searches,
    run_packwiz_interactive,
    run_packwiz_with_input,
)
from .repos import (
    MOD_SUFFIX,
    ModFile,
    RepoEntry,
    add_recent_repo,
    find_pack_toml,
    get_repo_name,
    list_mod_files,
    load_recent_repos,
    parse_pack_name,
)

FALLBACK_EDITORS = ("vim", "vi", "nano", "emacs")
SEARCH_SOURCES = ("mr", "cf")
CLONE_DIR = "modpacks"


@dataclass(frozen=True)
class PendingCommand:
    """A packwiz command waiting for the user's answer, with the input typed so far."""

    pack_dir: str
    args: tuple[str, ...]
    input: str = ""


@dataclass(frozen=True)
class ReposLoaded:
    repos: list[RepoEntry]


@dataclass(frozen=True)
class PackFound:
    pack_dir: str
    pack_name: str
    repo_root: str


@dataclass(frozen=True)
class PackError:
    error: str


@dataclass(frozen=True)
class ModsLoaded:
    mods: list[ModFile]
    modified: set[str] = field(default_factory=set)
    added: set[str] = field(default_factory=set)
    deleted: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class CommandDone:
    output: str = ""
    error: str | None = None


@dataclass(frozen=True)
class PromptReceived:
    prompt: str
    options: list[str]
    sources: list[str]
    pending: PendingCommand


@dataclass(frozen=True)
class SpinTick:
    pass


@dataclass(frozen=True)
class StatusExpire:
    pass


@dataclass(frozen=True)
class EditorDone:
    error: str | None
    file_path: str
    mod_time: float | None = None


@dataclass(frozen=True)
class LazygitDone:
    error: str | None = None


@dataclass(frozen=True)
class WindowResized:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class MouseReleased:
    """A left mouse button release at a screen cell."""

    x: int
    y: int


@dataclass(frozen=True)
class Task:
    """Work to run in the background; its return value is delivered as a message."""

    work: Callable[[], object]


@dataclass(frozen=True)
class RunExternal:
    """A program to run in the foreground with the terminal handed over to it."""

    argv: tuple[str, ...]
    on_exit: Callable[[str | None], object]
    cwd: str | None = None


@dataclass(frozen=True)
class Tick:
    """Deliver ``message`` after ``delay`` seconds."""

    delay: float
    message: object


@dataclass(frozen=True)
class QuitRequest:
    pass


def _timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _open_pack(root: str, home: str | os.PathLike[str] | None) -> PackFound:
    pack_toml = find_pack_toml(root)
    pack_dir = os.path.dirname(pack_toml)
    name = parse_pack_name(pack_toml)
    remote = get_git_remote(root)
    add_recent_repo(
        RepoEntry(
            name=get_repo_name(remote, root),
            path=root,
            remote=remote,
            last_used=_timestamp(),
        ),
        home,
    )
    return PackFound(pack_dir=pack_dir, pack_name=name, repo_root=root)


def detect_repo(home: str | os.PathLike[str] | None = None) -> PackFound | ReposLoaded:
    """Open the pack in the current repository, or list the recent repositories."""
    try:
        root = detect_git_repo()
    except CommandError:
        root = ""
    if root:
        try:
            return _open_pack(root, home)
        except FileNotFoundError:
            pass
    return ReposLoaded(repos=load_recent_repos(home))


def load_pack_from_repo(
    repo: RepoEntry, home: str | os.PathLike[str] | None = None
) -> PackFound | PackError:
    """Open the pack in a known repository."""
    try:
        return _open_pack(repo.path, home)
    except FileNotFoundError:
        return PackError(error=f"pack.toml not found in {repo.path}")


def clone_target(url: str, home: str | os.PathLike[str] | None = None) -> str:
    """The directory under ``~/modpacks`` that ``url`` is cloned into."""
    base = Path(home) if home is not None else Path.home()
    folder = url.removesuffix(".git").split("/")[-1]
    return str(base / CLONE_DIR / folder)


def clone_into_home(
    url: str, home: str | os.PathLike[str] | None = None
) -> PackFound | CommandDone:
    """Clone ``url`` under ``~/modpacks`` and open the pack it holds."""
    target = clone_target(url, home)
    try:
        output = clone_repo(url, target)
    except CommandError as exc:
        return CommandDone(output=exc.output, error=str(exc))
    try:
        return _open_pack(target, home)
    except FileNotFoundError as exc:
        return CommandDone(
            output="Cloned but pack.toml not found:\n" + output, error=str(exc)
        )


def merge_deleted_mods(
    mods: Iterable[ModFile], deleted: Iterable[str], pack_dir: str
) -> list[ModFile]:
    """Add mod files deleted from the mods directory, then sort by name ignoring case."""
    mods_dir = os.path.normpath(os.path.join(pack_dir, "mods"))
    prefix = mods_dir + os.sep
    merged = list(mods)
    known = {mod.path for mod in merged}
    for path in sorted(deleted):
        norm = os.path.normpath(path)
        inside = (norm + os.sep).startswith(prefix) or os.path.dirname(norm) == mods_dir
        if not inside or path in known or norm in known:
            continue
        filename = os.path.basename(path)
        if filename.endswith(MOD_SUFFIX):
            merged.append(
                ModFile(name=filename.removesuffix(MOD_SUFFIX), filename=filename, path=norm)
            )
            known.add(norm)
    merged.sort(key=lambda mod: mod.name.lower())
    return merged


def load_mods(pack_dir: str, repo_root: str) -> ModsLoaded | CommandDone:
    """List the pack's mods together with their git status."""
    try:
        mods = list_mod_files(pack_dir)
    except OSError as exc:
        return CommandDone(output=str(exc), error=str(exc))
    try:
        status = get_git_status(repo_root)
    except CommandError:
        status = GitStatus()
    return ModsLoaded(
        mods=merge_deleted_mods(mods, status.deleted, pack_dir),
        modified=status.modified,
        added=status.added,
        deleted=status.deleted,
    )


def _outcome(result: PackwizResult, pending: PendingCommand) -> PromptReceived | CommandDone:
    if result.prompt is not None:
        return PromptReceived(
            prompt=result.prompt.prompt,
            options=list(result.prompt.options),
            sources=list(result.prompt.sources),
            pending=pending,
        )
    return CommandDone(output=result.output)


def run_packwiz_command(
    pack_dir: str, args: Sequence[str]
) -> PromptReceived | CommandDone:
    """Run packwiz; adding a mod searches both Modrinth and CurseForge."""
    args = tuple(args)
    try:
        if len(args) >= 3 and args[1] == "add" and args[0] in SEARCH_SOURCES:
            result = run_both_packwiz_searches(pack_dir, args[2])
        else:
            result = run_packwiz_interactive(pack_dir, *args)
    except CommandError as exc:
        return CommandDone(output=exc.output, error=str(exc))
    return _outcome(result, PendingCommand(pack_dir=pack_dir, args=args))


def run_packwiz_with_answer(
    input_text: str, pending: PendingCommand
) -> PromptReceived | CommandDone:
    """Run the pending command again, typing the answers given so far."""
    try:
        result = run_packwiz_with_input(pending.pack_dir, input_text, *pending.args)
    except CommandError as exc:
        return CommandDone(output=exc.output, error=str(exc))
    return _outcome(
        result,
        PendingCommand(pack_dir=pending.pack_dir, args=pending.args, input=input_text),
    )


def push_changes(repo_root: str) -> CommandDone:
    """Commit everything and push it."""
    try:
        return CommandDone(output=git_push_all(repo_root))
    except CommandError as exc:
        return CommandDone(output=exc.output, error=str(exc))


def find_editor(environ: Mapping[str, str] | None = None) -> str | None:
    """The editor named by ``$EDITOR``, else the first common editor on the path."""
    if environ is None:
        environ = os.environ
    editor = environ.get("EDITOR", "")
    if editor:
        return editor
    search_path = environ.get("PATH")
    for name in FALLBACK_EDITORS:
        if shutil.which(name, path=search_path):
            return name
    return None