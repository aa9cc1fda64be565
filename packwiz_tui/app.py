"""Interface state and how it changes in response to messages."""

from __future__ import annotations

import enum
import os
import shutil
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from functools import partial

from .gitops import CommandError, git_checkout_file
from .packwiz import run_packwiz
from .prompts import SOURCE_CURSEFORGE, SOURCE_HEADER, SOURCE_MODRINTH, is_yes_no
from .repos import ModFile, RepoEntry
from .styles import SPINNER_FRAMES
from .tasks import (
    CommandDone,
    EditorDone,
    KeyPressed,
    LazygitDone,
    ModsLoaded,
    MouseReleased,
    PackError,
    PackFound,
    PendingCommand,
    PromptReceived,
    QuitRequest,
    ReposLoaded,
    RunExternal,
    SpinTick,
    StatusExpire,
    Task,
    Tick,
    WindowResized,
    clone_into_home,
    detect_repo,
    find_editor,
    load_mods,
    load_pack_from_repo,
    push_changes,
    run_packwiz_command,
    run_packwiz_with_answer,
)
from .textinput import TextInput

SPIN_INTERVAL = 0.08
STATUS_SECONDS = 4.0
SHORT_STATUS_SECONDS = 2.0
LAZYGIT = "lazygit"

_UP = ("up", "k")
_DOWN = ("down", "j")
_LEFT = ("left", "h")
_RIGHT = ("right", "l")
_SELECT = ("enter", " ", "space")


class Screen(enum.Enum):
    """Which view is active."""

    LOADING = enum.auto()
    REPO_SELECT = enum.auto()
    CLONE_REPO = enum.auto()
    MAIN_MENU = enum.auto()
    MANAGE_MODS = enum.auto()
    MANAGE_LOADER = enum.auto()
    OUTPUT = enum.auto()
    INTERACTIVE = enum.auto()


@dataclass(frozen=True)
class ClickZone:
    """A screen rectangle that triggers an action when clicked."""

    x: int
    y: int
    w: int
    h: int
    action: str

    def contains(self, x: int, y: int) -> bool:
        """Whether the cell ``(x, y)`` lies inside the zone."""
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h


@dataclass(frozen=True)
class MenuItem:
    icon: str
    label: str


MAIN_MENU_ITEMS = (
    MenuItem("◈", "Manage Mods"),
    MenuItem("⚙", "Manage Loader"),
    MenuItem("↑", "Push & Exit"),
    MenuItem("✕", "Exit without Pushing"),
)


def _clone_input() -> TextInput:
    return TextInput(placeholder="https://example.com/user/modpack", char_limit=256, width=50)


def _search_input() -> TextInput:
    return TextInput(placeholder="search mods…", char_limit=64, width=32)


def _add_mod_input() -> TextInput:
    return TextInput(placeholder="e.g. jei", char_limit=128, width=40)


def _clear(field_input: TextInput) -> None:
    field_input.value = ""
    field_input.cursor = 0


def _refresh_pack(pack_dir: str) -> None:
    try:
        run_packwiz(pack_dir, "refresh")
    except CommandError:
        pass
    return None


def _mtime(path: str) -> float | None:
    try:
        return os.stat(path).st_mtime
    except OSError:
        return None


@dataclass(eq=False)
class App:
    """The whole interface state; ``update`` returns the effects to carry out."""

    home: str | None = None
    clock: Callable[[], float] = time.monotonic
    environ: Mapping[str, str] | None = None

    screen: Screen = Screen.LOADING
    width: int = 0
    height: int = 0
    spin_frame: int = 0

    repo_list: list[RepoEntry] = field(default_factory=list)
    repo_list_idx: int = 0

    clone_input: TextInput = field(default_factory=_clone_input)
    clone_error: str = ""

    repo_root: str = ""
    pack_dir: str = ""
    pack_name: str = ""

    menu_idx: int = 0

    mods: list[ModFile] = field(default_factory=list)
    mods_filtered: list[ModFile] = field(default_factory=list)
    mods_idx: int = 0
    mods_modified: set[str] = field(default_factory=set)
    mods_added: set[str] = field(default_factory=set)
    mods_deleted: set[str] = field(default_factory=set)
    search_input: TextInput = field(default_factory=_search_input)
    search_focus: bool = False
    add_mod_modal: bool = False
    add_mod_input: TextInput = field(default_factory=_add_mod_input)
    return_to_add_modal: bool = False

    output_lines: list[str] = field(default_factory=list)
    output_err: bool = False
    output_done: bool = False

    interactive_prompt: str = ""
    interactive_options: list[str] = field(default_factory=list)
    interactive_sources: list[str] = field(default_factory=list)
    interactive_selected: int = 0
    interactive_pending: PendingCommand | None = None

    loading_msg: str = "Detecting git repository…"

    status_msg: str = ""
    status_is_err: bool = False
    status_expire: float = 0.0

    click_zones: list[ClickZone] = field(default_factory=list)

    # ── effects ──────────────────────────────────────────────────────────────

    def init(self) -> list[object]:
        """The effects to start with: the spinner and repository detection."""
        return [Tick(SPIN_INTERVAL, SpinTick()), Task(partial(detect_repo, self.home))]

    def _load_mods_task(self) -> Task:
        return Task(partial(load_mods, self.pack_dir, self.repo_root))

    def _refresh_task(self) -> Task:
        return Task(partial(_refresh_pack, self.pack_dir))

    def _open_lazygit(self) -> list[object]:
        search_path = self.environ.get("PATH") if self.environ is not None else None
        if shutil.which(LAZYGIT, path=search_path) is None:
            return [Task(partial(LazygitDone, "lazygit not found"))]
        return [RunExternal(argv=(LAZYGIT,), on_exit=LazygitDone, cwd=self.repo_root)]

    def _open_in_editor(self, file_path: str) -> list[object]:
        editor = find_editor(self.environ)
        if editor is None:
            return [Task(partial(EditorDone, "no editor found (set $EDITOR)", file_path))]
        mod_time = _mtime(file_path)

        def on_exit(error: str | None) -> EditorDone:
            return EditorDone(error=error, file_path=file_path, mod_time=mod_time)

        return [RunExternal(argv=(editor, file_path), on_exit=on_exit)]

    def _open_add_modal(self) -> None:
        self.add_mod_modal = True
        self.add_mod_input.focus()

    # ── public helpers ───────────────────────────────────────────────────────

    def set_status(self, text: str, is_error: bool, seconds: float = STATUS_SECONDS) -> Tick:
        """Flash a status message; returns the tick that will clear it."""
        self.status_msg = text
        self.status_is_err = is_error
        self.status_expire = self.clock() + seconds
        return Tick(STATUS_SECONDS, StatusExpire())

    def start_output(self) -> None:
        """Switch to the output screen, waiting for a command's result."""
        self.screen = Screen.OUTPUT
        self.output_lines = []
        self.output_done = False
        self.output_err = False

    def filter_mods(self) -> None:
        """Recompute the visible mods from the search text."""
        query = self.search_input.value.lower()
        if not query:
            self.mods_filtered = list(self.mods)
            return
        self.mods_filtered = [mod for mod in self.mods if query in mod.name.lower()]
        if self.mods_idx >= len(self.mods_filtered):
            self.mods_idx = 0

    def is_yes_no_prompt(self) -> bool:
        """Whether the current question is a yes/no question."""
        return is_yes_no(self.interactive_options)

    def activate_menu_item(self) -> list[object]:
        """Carry out the selected main-menu entry."""
        if self.menu_idx == 0:
            self.loading_msg = "Loading mods…"
            self.screen = Screen.LOADING
            return [self._load_mods_task()]
        if self.menu_idx == 1:
            self.screen = Screen.MANAGE_LOADER
        elif self.menu_idx == 2:
            self.start_output()
            return [Task(partial(push_changes, self.repo_root))]
        elif self.menu_idx == 3:
            return [QuitRequest()]
        return []

    def delete_mod(self) -> list[object]:
        """Delete the selected mod file, or restore it if git shows it deleted."""
        if not self.mods_filtered or self.mods_idx >= len(self.mods_filtered):
            return []
        mod = self.mods_filtered[self.mods_idx]

        if mod.path in self.mods_deleted:
            try:
                git_checkout_file(self.repo_root, mod.path)
            except CommandError as exc:
                return [self.set_status(f"Restore failed: {exc}", True)]
            tick = self.set_status(f"Restored {mod.name}", False, SHORT_STATUS_SECONDS)
            return [tick, self._load_mods_task(), self._refresh_task()]

        try:
            os.remove(mod.path)
        except OSError as exc:
            return [self.set_status(f"Delete failed: {exc}", True)]
        tick = self.set_status(f"Deleted {mod.name}", False, SHORT_STATUS_SECONDS)
        return [tick, self._load_mods_task(), self._refresh_task()]

    # ── update ───────────────────────────────────────────────────────────────

    def update(self, msg: object) -> list[object]:
        """Apply a message and return the effects it calls for."""
        match msg:
            case MouseReleased(x=x, y=y):
                return self._on_click(x, y)
            case WindowResized(width=width, height=height):
                self.width, self.height = width, height
                return []
            case SpinTick():
                self.spin_frame = (self.spin_frame + 1) % len(SPINNER_FRAMES)
                return [Tick(SPIN_INTERVAL, SpinTick())]
            case StatusExpire():
                if self.clock() > self.status_expire:
                    self.status_msg = ""
                return []
            case ReposLoaded(repos=repos):
                self.repo_list = list(repos)
                self.screen = Screen.REPO_SELECT
                return []
            case PackFound():
                self.pack_dir = msg.pack_dir
                self.pack_name = msg.pack_name
                self.repo_root = msg.repo_root
                self.screen = Screen.MAIN_MENU
                self.menu_idx = 0
                return []
            case PackError(error=error):
                tick = self.set_status(f"Error: {error}", True)
                self.screen = Screen.REPO_SELECT
                return [tick]
            case ModsLoaded():
                return self._on_mods_loaded(msg)
            case CommandDone():
                self._on_command_done(msg)
                return []
            case PromptReceived():
                self._on_prompt(msg)
                return []
            case EditorDone():
                return self._on_editor_done(msg)
            case LazygitDone(error=error):
                if error is not None:
                    return [self.set_status(f"Lazygit error: {error}", True)]
                tick = self.set_status(
                    "Lazygit closed, refreshing...", False, SHORT_STATUS_SECONDS
                )
                return [tick, self._load_mods_task()]
            case KeyPressed(key=key):
                return self._on_key(key)
        return []

    def _on_click(self, x: int, y: int) -> list[object]:
        for zone in self.click_zones:
            if not zone.contains(x, y):
                continue
            if zone.action == "add_mod":
                self._open_add_modal()
                return []
            kind, _, number = zone.action.partition(":")
            try:
                idx = int(number)
            except ValueError:
                continue
            if kind == "del":
                if idx < len(self.mods_filtered):
                    old = self.mods_idx
                    self.mods_idx = idx
                    effects = self.delete_mod()
                    self.mods_idx = old
                    return effects
            elif kind == "menu":
                self.menu_idx = idx
                return self.activate_menu_item()
        return []

    def _on_mods_loaded(self, msg: ModsLoaded) -> list[object]:
        self.mods = list(msg.mods)
        self.mods_modified = set(msg.modified)
        self.mods_added = set(msg.added)
        self.mods_deleted = set(msg.deleted)
        self.filter_mods()
        self.screen = Screen.MANAGE_MODS
        if self.return_to_add_modal:
            self.return_to_add_modal = False
            self._open_add_modal()
        return []

    def _on_command_done(self, msg: CommandDone) -> None:
        text = msg.output
        if msg.error is not None:
            error_line = f"Error: {msg.error}"
            text = f"{text}\n\n{error_line}" if text else error_line
        self.output_lines = text.strip().split("\n")
        self.output_err = msg.error is not None
        self.output_done = True

    def _on_prompt(self, msg: PromptReceived) -> None:
        self.interactive_prompt = msg.prompt
        self.interactive_options = list(msg.options)
        self.interactive_sources = list(msg.sources)
        self.interactive_selected = 0
        while (
            self.interactive_selected < len(self.interactive_options)
            and self.interactive_selected < len(self.interactive_sources)
            and self.interactive_sources[self.interactive_selected] == SOURCE_HEADER
        ):
            self.interactive_selected += 1
        self.interactive_pending = msg.pending
        self.screen = Screen.INTERACTIVE

    def _on_editor_done(self, msg: EditorDone) -> list[object]:
        if msg.error is not None:
            return [self.set_status(f"Editor error: {msg.error}", True)]
        current = _mtime(msg.file_path)
        changed = current is not None and (msg.mod_time is None or current > msg.mod_time)
        if changed:
            tick = self.set_status(
                "File saved, refreshing... (press r if mouse broken)", False
            )
            return [tick, self._load_mods_task(), self._refresh_task()]
        tick = self.set_status("No changes (press r if mouse broken)", False)
        return [tick, self._load_mods_task()]

    def _on_key(self, key: str) -> list[object]:
        handlers = {
            Screen.REPO_SELECT: self._key_repo_select,
            Screen.CLONE_REPO: self._key_clone_repo,
            Screen.MAIN_MENU: self._key_main_menu,
            Screen.MANAGE_MODS: self._key_manage_mods,
            Screen.MANAGE_LOADER: self._key_manage_loader,
            Screen.OUTPUT: self._key_output,
            Screen.INTERACTIVE: self._key_interactive,
        }
        handler = handlers.get(self.screen)
        return handler(key) if handler is not None else []

    # ── per-screen keys ──────────────────────────────────────────────────────

    def _key_repo_select(self, key: str) -> list[object]:
        total = len(self.repo_list) + 1
        if key in ("ctrl+c", "q"):
            return [QuitRequest()]
        if key in _UP:
            self.repo_list_idx = (self.repo_list_idx - 1) % total
        elif key in _DOWN:
            self.repo_list_idx = (self.repo_list_idx + 1) % total
        elif key in _SELECT:
            if self.repo_list_idx == len(self.repo_list):
                self.screen = Screen.CLONE_REPO
                self.clone_input.focus()
                return []
            repo = self.repo_list[self.repo_list_idx]
            self.loading_msg = "Loading pack…"
            self.screen = Screen.LOADING
            return [Task(partial(load_pack_from_repo, repo, self.home))]
        return []

    def _key_clone_repo(self, key: str) -> list[object]:
        if key == "ctrl+c":
            return [QuitRequest()]
        if key == "esc":
            self.screen = Screen.REPO_SELECT
            self.clone_input.blur()
            return []
        if key == "enter":
            url = self.clone_input.value.strip()
            if not url:
                self.clone_error = "Please enter a URL"
                return []
            self.clone_error = ""
            self.loading_msg = "Cloning repository…"
            self.screen = Screen.LOADING
            return [Task(partial(clone_into_home, url, self.home))]
        self.clone_input.handle_key(key)
        return []

    def _key_main_menu(self, key: str) -> list[object]:
        count = len(MAIN_MENU_ITEMS)
        if key in ("ctrl+c", "q"):
            return [QuitRequest()]
        if key in _UP:
            self.menu_idx = (self.menu_idx - 1) % count
        elif key in _DOWN:
            self.menu_idx = (self.menu_idx + 1) % count
        elif key in ("1", "2", "3", "4"):
            self.menu_idx = int(key) - 1
            return self.activate_menu_item()
        elif key == "g":
            return self._open_lazygit()
        elif key in _SELECT:
            return self.activate_menu_item()
        return []

    def _key_manage_loader(self, key: str) -> list[object]:
        if key in ("ctrl+c", "q"):
            return [QuitRequest()]
        if key == "esc":
            self.screen = Screen.MAIN_MENU
        return []

    def _key_add_modal(self, key: str) -> list[object]:
        if key == "ctrl+c":
            return [QuitRequest()]
        if key == "esc":
            self.add_mod_modal = False
            _clear(self.add_mod_input)
            return []
        if key == "enter":
            name = self.add_mod_input.value.strip()
            if not name:
                return []
            self.add_mod_modal = False
            _clear(self.add_mod_input)
            self.return_to_add_modal = True
            self.start_output()
            return [Task(partial(run_packwiz_command, self.pack_dir, ("mr", "add", name)))]
        self.add_mod_input.handle_key(key)
        return []

    def _key_manage_mods(self, key: str) -> list[object]:
        if self.add_mod_modal:
            return self._key_add_modal(key)

        focused = self.search_focus
        if key == "ctrl+c":
            return [QuitRequest()]
        if key == "esc":
            if focused:
                if not self.search_input.value:
                    self.search_focus = False
                    self.search_input.blur()
            else:
                self.screen = Screen.MAIN_MENU
                _clear(self.search_input)
                self.filter_mods()
                return []
        elif key == "/" and not focused:
            self.search_focus = True
            self.search_input.focus()
            return []
        elif key == "n" and not focused:
            self._open_add_modal()
            return []
        elif key in _UP and not focused:
            if self.mods_idx > 0:
                self.mods_idx -= 1
        elif key in _DOWN and not focused:
            if self.mods_idx < len(self.mods_filtered) - 1:
                self.mods_idx += 1
        elif key == "enter":
            if focused:
                self.search_focus = False
                self.search_input.blur()
            elif self.mods_filtered and self.mods_idx < len(self.mods_filtered):
                return self._open_in_editor(self.mods_filtered[self.mods_idx].path)
        elif key == "r" and not focused:
            return [self._load_mods_task()]
        elif key == "g" and not focused:
            return self._open_lazygit()
        elif key == "d" and not focused:
            return self.delete_mod()

        if self.search_focus:
            previous = self.search_input.value
            self.search_input.handle_key(key)
            if self.search_input.value != previous:
                self.filter_mods()
                self.mods_idx = 0
        return []

    def _key_output(self, key: str) -> list[object]:
        if key == "ctrl+c":
            return [QuitRequest()]
        if key in ("q", "esc", "enter") and self.output_done:
            if self.output_err:
                self.screen = Screen.MAIN_MENU
                self.return_to_add_modal = False
            else:
                self.loading_msg = "Refreshing mod list…"
                self.screen = Screen.LOADING
                return [self._load_mods_task()]
        return []

    def _is_header(self, idx: int) -> bool:
        return (
            idx < len(self.interactive_sources)
            and self.interactive_sources[idx] == SOURCE_HEADER
        )

    def _key_interactive(self, key: str) -> list[object]:
        yes_no = self.is_yes_no_prompt()
        last = len(self.interactive_options) - 1
        if key == "ctrl+c":
            return [QuitRequest()]
        if key == "esc":
            self.screen = Screen.MANAGE_MODS
            self.return_to_add_modal = False
            return []
        if key in _UP:
            if not yes_no and self.interactive_selected > 0:
                self.interactive_selected -= 1
                while self.interactive_selected > 0 and self._is_header(
                    self.interactive_selected
                ):
                    self.interactive_selected -= 1
        elif key in _DOWN:
            if not yes_no and self.interactive_selected < last:
                self.interactive_selected += 1
                while self.interactive_selected < last and self._is_header(
                    self.interactive_selected
                ):
                    self.interactive_selected += 1
        elif key in _LEFT:
            if yes_no and self.interactive_selected > 0:
                self.interactive_selected -= 1
        elif key in _RIGHT:
            if yes_no and self.interactive_selected < last:
                self.interactive_selected += 1
        elif key in _SELECT:
            return self._answer(yes_no)
        return []

    def _answer(self, yes_no: bool) -> list[object]:
        pending = self.interactive_pending
        if pending is None:
            return []
        selected = self.interactive_selected
        if yes_no:
            selection = "y" if selected == 0 else "n"
        elif selected < len(self.interactive_sources):
            source = self.interactive_sources[selected]
            if source in (SOURCE_MODRINTH, SOURCE_CURSEFORGE):
                index = self.interactive_sources[:selected].count(source)
                command = "mr" if source == SOURCE_MODRINTH else "cf"
                pending = replace(pending, args=(command, *pending.args[1:]))
                self.interactive_pending = pending
                selection = str(index)
            else:
                selection = str(selected)
        else:
            selection = str(selected)

        if pending.input:
            selection = f"{pending.input}\n{selection}"
        self.start_output()
        return [Task(partial(run_packwiz_with_answer, selection, pending))]