"""Recently used repositories, pack discovery and mod file listing."""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

RECENT_REPOS_FILE = ".packwiz-tui-recents.json"
MAX_RECENT_REPOS = 20
PACK_FILE = "pack.toml"
MOD_SUFFIX = ".toml"
_SKIPPED_DIRS = frozenset({".git", "node_modules"})


@dataclass
class RepoEntry:
    """Metadata about a known modpack repository."""

    name: str = ""
    path: str = ""
    remote: str = ""
    last_used: str = ""

    def to_dict(self) -> dict[str, str]:
        """Return the entry as it is stored on disk."""
        return {
            "name": self.name,
            "path": self.path,
            "remote": self.remote,
            "last_used": self.last_used,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepoEntry:
        """Build an entry from its stored form; missing fields are empty."""
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        values = {}
        for key in ("name", "path", "remote", "last_used"):
            value = data.get(key)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise TypeError(f"field {key!r} must be a string")
            values[key] = value
        return cls(**values)


@dataclass(frozen=True)
class ModFile:
    """A mod metadata file in the pack's mods directory."""

    name: str
    filename: str
    path: str


def get_repo_name(remote: str, path: str) -> str:
    """Derive a display name from a remote URL, or from the path if there is none."""
    if remote:
        parts = remote.removesuffix(".git").split("/")
        if len(parts) >= 2:
            return f"{parts[-2]}/{parts[-1]}"
        return parts[-1]
    return os.path.basename(os.path.normpath(path))


def _recents_path(home: str | os.PathLike[str] | None) -> Path:
    base = Path(home) if home is not None else Path.home()
    return base / RECENT_REPOS_FILE


def load_recent_repos(home: str | os.PathLike[str] | None = None) -> list[RepoEntry]:
    """Read the recents list; an unreadable or malformed file gives an empty list."""
    try:
        data = json.loads(_recents_path(home).read_text(encoding="utf-8"))
    except (OSError, RuntimeError, ValueError):
        return []
    if data is None:
        return []
    if not isinstance(data, list):
        return []
    try:
        return [RepoEntry.from_dict(item) for item in data]
    except TypeError:
        return []


def save_recent_repos(
    repos: list[RepoEntry], home: str | os.PathLike[str] | None = None
) -> None:
    """Write the recents list, silently giving up if it cannot be written."""
    text = json.dumps([repo.to_dict() for repo in repos], indent=2, ensure_ascii=False)
    try:
        _recents_path(home).write_text(text, encoding="utf-8")
    except (OSError, RuntimeError):
        return


def add_recent_repo(
    entry: RepoEntry, home: str | os.PathLike[str] | None = None
) -> list[RepoEntry]:
    """Put ``entry`` first in the recents list, replacing any with the same path."""
    repos = [repo for repo in load_recent_repos(home) if repo.path != entry.path]
    updated = [entry, *repos][:MAX_RECENT_REPOS]
    save_recent_repos(updated, home)
    return updated


def _walk_for_pack(directory: str) -> Iterator[str]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        return
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            if entry.name in _SKIPPED_DIRS:
                continue
            yield from _walk_for_pack(entry.path)
        elif entry.name == PACK_FILE:
            yield entry.path


def find_pack_toml(root: str | os.PathLike[str]) -> str:
    """Return the first pack.toml under ``root`` in lexical walk order."""
    root = os.fspath(root)
    if os.path.isdir(root) and not os.path.islink(root):
        if os.path.basename(os.path.normpath(root)) not in _SKIPPED_DIRS:
            for found in _walk_for_pack(root):
                return found
    elif os.path.basename(root) == PACK_FILE and os.path.lexists(root):
        return root
    raise FileNotFoundError(f"{PACK_FILE} not found in {root}")


def list_mod_files(pack_dir: str | os.PathLike[str]) -> list[ModFile]:
    """Return the .toml files in ``<pack_dir>/mods``, sorted by file name."""
    mods_dir = os.path.join(os.fspath(pack_dir), "mods")
    with os.scandir(mods_dir) as it:
        entries = sorted(it, key=lambda e: e.name)
    return [
        ModFile(
            name=entry.name.removesuffix(MOD_SUFFIX),
            filename=entry.name,
            path=os.path.normpath(os.path.join(mods_dir, entry.name)),
        )
        for entry in entries
        if not entry.is_dir(follow_symlinks=False) and entry.name.endswith(MOD_SUFFIX)
    ]


def parse_pack_name(pack_toml: str | os.PathLike[str]) -> str:
    """Read the pack's name, falling back to the name of its directory."""
    pack_toml = os.fspath(pack_toml)
    fallback = os.path.basename(os.path.dirname(pack_toml) or ".")
    try:
        with open(pack_toml, encoding="utf-8", errors="replace") as handle:
            text = handle.read()
    except OSError:
        return fallback
    for line in text.split("\n"):
        line = line.strip()
        if line.startswith("name"):
            key, sep, value = line.partition("=")
            if sep:
                return value.strip().strip("\"'")
    return fallback