"""Rendering the interface state to text."""

from __future__ import annotations

from .app import MAIN_MENU_ITEMS, App, ClickZone, Screen
from .helpers import clamp, truncate, visible_window
from .layout import (
    Align,
    Style,
    join_horizontal,
    join_vertical,
    place,
    text_height,
    visible_width,
)
from .prompts import SOURCE_HEADER
from .styles import (
    COLOR_ACCENT,
    COLOR_DANGER,
    COLOR_MUTED,
    COLOR_SUCCESS,
    SPINNER_FRAMES,
    STYLE_ADD_BTN,
    STYLE_BADGE,
    STYLE_DELETE_BTN,
    STYLE_HIGHLIGHT,
    STYLE_LOADER,
    STYLE_LOGO_SUB,
    STYLE_MENU_ITEM,
    STYLE_MENU_ITEM_SELECTED,
    STYLE_MOD_ITEM,
    STYLE_MOD_ITEM_DELETED,
    STYLE_MOD_ITEM_SELECTED,
    STYLE_MODAL,
    STYLE_MODAL_TITLE,
    STYLE_OUTPUT_ERROR,
    STYLE_OUTPUT_SUCCESS,
    STYLE_PANEL_FOCUSED,
    STYLE_REPO_ITEM,
    STYLE_REPO_ITEM_SELECTED,
    STYLE_REPO_PATH,
    STYLE_SEARCH_ACTIVE,
    STYLE_SEARCH_LABEL,
    STYLE_STATUS_KEY,
    STYLE_STATUS_SEP,
    STYLE_SUBTITLE,
    STYLE_TITLE,
    render_logo,
    style_muted,
)

_MUTED = Style(foreground=COLOR_MUTED)
_SUCCESS = Style(foreground=COLOR_SUCCESS)
_DANGER = Style(foreground=COLOR_DANGER)
_HEADER = Style(foreground=COLOR_ACCENT, bold=True)

_ADD_STR = " + "
_DEL_STR = " − "
_SEARCH_PREFIX = " / "
_RESERVED_ROWS = 11
_STATUS_INDICATOR_W = 2
_MENU_HEADER_ROWS = 10
_REPO_PATH_LIMIT = 56

_HINTS = {
    Screen.REPO_SELECT: ["↑↓ navigate", "enter select", "q quit"],
    Screen.CLONE_REPO: ["enter clone", "esc back", "ctrl+c quit"],
    Screen.MAIN_MENU: [
        "↑↓ navigate",
        "enter select",
        "1-4 shortcut",
        "g lazygit",
        "q quit",
    ],
    Screen.MANAGE_MODS: [
        "enter edit",
        "g lazygit",
        "r refresh",
        "/ search",
        "n add",
        "d delete/restore",
        "esc back",
    ],
}


def _place_center(app: App, content: str) -> str:
    return place(app.width, app.height - 1, Align.CENTER, Align.CENTER, content)


def _panel(width: int, height: int | None = None) -> Style:
    return STYLE_PANEL_FOCUSED.with_size(width, height)


def render(app: App) -> str:
    """Render the whole screen: the active view above the status bar."""
    if app.width == 0:
        return "Loading…"
    views = {
        Screen.LOADING: view_loading,
        Screen.REPO_SELECT: view_repo_select,
        Screen.CLONE_REPO: view_clone_repo,
        Screen.MAIN_MENU: view_main_menu,
        Screen.MANAGE_MODS: view_manage_mods,
        Screen.MANAGE_LOADER: view_manage_loader,
        Screen.OUTPUT: view_output,
        Screen.INTERACTIVE: view_interactive,
    }
    view = views.get(app.screen)
    body = view(app) if view is not None else "unknown screen"
    return join_vertical(Align.LEFT, body, view_status_bar(app))


def _hints(app: App) -> list[str]:
    if app.screen == Screen.OUTPUT:
        return ["enter continue"] if app.output_done else ["running…"]
    if app.screen == Screen.INTERACTIVE:
        if app.is_yes_no_prompt():
            return ["←→ navigate", "enter select", "esc cancel"]
        return ["↑↓ navigate", "enter select", "esc cancel"]
    return list(_HINTS.get(app.screen, []))


def view_status_bar(app: App) -> str:
    """Key hints on the left, a status message or the pack name on the right."""
    sep = "  " + STYLE_STATUS_SEP.render("│") + "  "
    rendered = []
    for hint in _hints(app):
        idx = hint.find(" ")
        if idx > 0:
            rendered.append(STYLE_STATUS_KEY.render(hint[:idx]) + _MUTED.render(hint[idx:]))
        else:
            rendered.append(_MUTED.render(hint))

    right = ""
    if app.status_msg:
        if app.status_is_err:
            right = _DANGER.render("✗ " + app.status_msg)
        else:
            right = _SUCCESS.render("✓ " + app.status_msg)
    elif app.pack_name:
        right = _MUTED.render("pack: ") + STYLE_HIGHLIGHT.render(app.pack_name)

    left = sep.join(rendered)
    gap = max(app.width - visible_width(left) - visible_width(right) - 2, 0)
    return left + " " * gap + right


def view_loading(app: App) -> str:
    """The logo with a spinner and the loading message."""
    spinner = STYLE_LOADER.render(SPINNER_FRAMES[app.spin_frame])
    content = join_vertical(
        Align.CENTER,
        render_logo(),
        "",
        spinner + " " + STYLE_SUBTITLE.render(app.loading_msg),
    )
    return _place_center(app, content)


def view_repo_select(app: App) -> str:
    """The list of recent repositories with an entry for cloning a new one."""
    rows = [STYLE_TITLE.render("  Recent Repositories"), ""]
    for i, repo in enumerate(app.repo_list):
        path_line = STYLE_REPO_PATH.render("     " + truncate(repo.path, _REPO_PATH_LIMIT))
        if i == app.repo_list_idx:
            rows.append(STYLE_REPO_ITEM_SELECTED.render(" ▶  " + repo.name))
        else:
            rows.append(STYLE_REPO_ITEM.render("    " + repo.name))
        rows.extend((path_line, ""))

    if app.repo_list_idx == len(app.repo_list):
        rows.append(STYLE_REPO_ITEM_SELECTED.render(" ▶  + Clone new repository"))
    else:
        rows.append(
            STYLE_REPO_ITEM.render("    ") + STYLE_ADD_BTN.render("+ Clone new repository")
        )

    panel_w = clamp(70, 40, app.width - 4)
    panel = _panel(panel_w).render("\n".join(rows))
    content = join_vertical(
        Align.CENTER,
        render_logo(),
        STYLE_LOGO_SUB.render("  Minecraft Modpack Manager"),
        "",
        panel,
    )
    return _place_center(app, content)


def view_clone_repo(app: App) -> str:
    """The form asking for a URL to clone."""
    err_line = ""
    if app.clone_error:
        err_line = "\n" + STYLE_OUTPUT_ERROR.render("  ✗ " + app.clone_error)
    panel_w = clamp(64, 40, app.width - 4)
    panel = _panel(panel_w).render(
        join_vertical(
            Align.LEFT,
            STYLE_TITLE.render("  Clone Repository"),
            STYLE_SUBTITLE.render("  Enter a git URL to clone"),
            "",
            STYLE_SEARCH_LABEL.render("  URL: ") + app.clone_input.view(),
            err_line,
            "",
            STYLE_SUBTITLE.render("  enter to clone  ·  esc to go back"),
        )
    )
    return _place_center(app, panel)


def view_main_menu(app: App) -> str:
    """The main menu; registers a click zone for each entry."""
    app.click_zones = []
    panel_w = clamp(52, 36, app.width - 4)
    panel_x = (app.width - panel_w) // 2
    content_h = _MENU_HEADER_ROWS + 2 + len(MAIN_MENU_ITEMS) * 2 + 2
    top_y = max((app.height - 1 - content_h) // 2, 0)
    first_item_y = top_y + _MENU_HEADER_ROWS + 2

    rows = [""]
    for i, item in enumerate(MAIN_MENU_ITEMS):
        num = STYLE_STATUS_SEP.render(f"[{i + 1}]")
        text = f" {item.icon}  {item.label} "
        style = STYLE_MENU_ITEM_SELECTED if i == app.menu_idx else STYLE_MENU_ITEM
        rows.extend((num + " " + style.render(text), ""))
        app.click_zones.append(
            ClickZone(x=panel_x, y=first_item_y + i * 2, w=panel_w, h=1, action=f"menu:{i}")
        )

    panel = _panel(panel_w).render("\n".join(rows))
    content = join_vertical(
        Align.CENTER,
        render_logo(),
        "  " + STYLE_BADGE.render(" " + app.pack_name + " "),
        STYLE_SUBTITLE.render("  " + app.pack_dir),
        "",
        panel,
    )
    return _place_center(app, content)


def _status_indicator(deleted: bool, added: bool, modified: bool) -> str:
    if deleted:
        return STYLE_DELETE_BTN.render("D") + " "
    if added:
        return _SUCCESS.render("A") + " "
    if modified:
        return STYLE_HIGHLIGHT.render("M") + " "
    return "  "


def view_manage_mods(app: App) -> str:
    """The searchable mod list; registers click zones for the add and delete buttons."""
    app.click_zones = []
    panel_w = clamp(64, 40, app.width - 4)
    panel_x = (app.width - panel_w) // 2
    inner_w = panel_w - 4

    add_btn = STYLE_ADD_BTN.render(_ADD_STR)
    prefix_style = STYLE_SEARCH_ACTIVE if app.search_focus else STYLE_SEARCH_LABEL
    search_prefix = prefix_style.render(_SEARCH_PREFIX)
    app.search_input.width = inner_w - len(_SEARCH_PREFIX) - len(_ADD_STR)
    gap = " " * (inner_w - len(_SEARCH_PREFIX) - app.search_input.width - len(_ADD_STR))
    search_row = search_prefix + app.search_input.view() + gap + add_btn
    add_btn_x = panel_x + panel_w - len(_ADD_STR) - 2

    stats = []
    if app.mods_added:
        stats.append(_SUCCESS.render(f"+{len(app.mods_added)}"))
    if app.mods_deleted:
        stats.append(_DANGER.render(f"-{len(app.mods_deleted)}"))
    subtitle = STYLE_SUBTITLE.render(f"  {len(app.mods_filtered)} mods") + "  " + " ".join(stats)

    list_h = max(app.height - _RESERVED_ROWS, 4)
    search_y = 0
    subtitle_y = search_y + text_height(search_row)
    list_y = subtitle_y + text_height(subtitle) + 1

    app.click_zones.append(
        ClickZone(x=add_btn_x, y=search_y, w=len(_ADD_STR), h=1, action="add_mod")
    )

    del_w = len(_DEL_STR)
    name_w = inner_w - del_w - _STATUS_INDICATOR_W - 1

    rows = []
    if not app.mods_filtered:
        rows.append(STYLE_SUBTITLE.render("  no mods found"))
    for i, mod in enumerate(app.mods_filtered):
        deleted = mod.path in app.mods_deleted
        indicator = _status_indicator(
            deleted, mod.path in app.mods_added, mod.path in app.mods_modified
        )
        name = truncate(mod.name, name_w)
        padded = name + " " * (name_w - visible_width(name))
        button = STYLE_ADD_BTN.render(_ADD_STR) if deleted else STYLE_DELETE_BTN.render(_DEL_STR)
        if i == app.mods_idx:
            name_line = STYLE_MOD_ITEM_SELECTED.render(padded)
        elif deleted:
            name_line = STYLE_MOD_ITEM_DELETED.render(padded)
        else:
            name_line = STYLE_MOD_ITEM.render(padded)
        rows.append(indicator + name_line + " " + button)

    start, end = visible_window(app.mods_idx, len(rows), list_h)
    visible = rows[start:end]

    del_x = panel_x + inner_w - del_w + 2
    for row, absolute in enumerate(range(start, end)):
        if absolute < len(app.mods_filtered):
            app.click_zones.append(
                ClickZone(x=del_x, y=list_y + row, w=del_w, h=1, action=f"del:{absolute}")
            )

    panel = _panel(panel_w, list_h).render("\n".join(visible))
    content = join_vertical(Align.LEFT, search_row, subtitle, "", panel)
    placed = place(app.width, app.height - 1, Align.CENTER, Align.TOP, content)
    if app.add_mod_modal:
        return render_with_modal(app.width, placed, view_add_mod_modal(app))
    return placed


def view_add_mod_modal(app: App) -> str:
    """The dialog asking for the mod to add."""
    content = join_vertical(
        Align.LEFT,
        STYLE_MODAL_TITLE.render("◈ Add Mod from Modrinth"),
        "",
        _MUTED.render("Enter a mod slug or name"),
        "",
        app.add_mod_input.view(),
        "",
        _MUTED.render("enter to add  ·  esc to cancel"),
    )
    return STYLE_MODAL.render(content)


def render_with_modal(width: int, bg: str, modal: str) -> str:
    """Overlay ``modal`` centred on ``bg``; rows it covers lose their other content."""
    bg_lines = bg.split("\n")
    modal_lines = modal.split("\n")
    modal_w = visible_width(modal_lines[0])
    x = max((width - modal_w) // 2, 0)
    y = max((len(bg_lines) - len(modal_lines)) // 2, 0)

    result = []
    for i, bg_line in enumerate(bg_lines):
        modal_idx = i - y
        if 0 <= modal_idx < len(modal_lines):
            modal_line = modal_lines[modal_idx]
            modal_end = x + visible_width(modal_line)
            after = " " * max(visible_width(bg_line) - modal_end, 0)
            result.append(" " * x + modal_line + after)
        else:
            result.append(bg_line)
    return "\n".join(result)


def view_manage_loader(app: App) -> str:
    """Instructions for managing the mod loader."""
    rows = [
        STYLE_SUBTITLE.render("  Loader management via packwiz CLI:"),
        "",
        STYLE_MENU_ITEM.render(style_muted("◈") + " packwiz fabric install"),
        STYLE_MENU_ITEM.render(style_muted("◈") + " packwiz forge install"),
        STYLE_MENU_ITEM.render(style_muted("◈") + " packwiz neoforge install"),
        STYLE_MENU_ITEM.render(style_muted("◈") + " packwiz quilt install"),
        "",
        STYLE_SUBTITLE.render("  (Run these manually in your pack directory)"),
        "",
        STYLE_SUBTITLE.render("  esc to go back"),
    ]
    panel_w = clamp(56, 36, app.width - 4)
    panel = _panel(panel_w).render(
        join_vertical(Align.LEFT, STYLE_TITLE.render("  Manage Loader"), "", "\n".join(rows))
    )
    return _place_center(app, panel)


def view_output(app: App) -> str:
    """A command's output, or a spinner while it runs."""
    if not app.output_done:
        spinner = STYLE_LOADER.render(SPINNER_FRAMES[app.spin_frame])
        lines = [spinner + " " + STYLE_SUBTITLE.render("Running…")]
    else:
        style = STYLE_OUTPUT_ERROR if app.output_err else STYLE_OUTPUT_SUCCESS
        lines = [style.render(line) for line in app.output_lines if line]
        lines.append("")
        lines.append(style.render("✗ Command failed" if app.output_err else "✓ Done"))
        lines.extend(("", STYLE_SUBTITLE.render("  press enter or q to continue")))

    panel_w = clamp(72, 40, app.width - 4)
    panel_h = clamp(app.height - 6, 4, 30)
    panel = _panel(panel_w, panel_h).render("\n".join(lines))
    return _place_center(
        app, join_vertical(Align.LEFT, STYLE_TITLE.render("  Output"), "", panel)
    )


def _view_yes_no(app: App) -> str:
    panel_w = clamp(64, 40, app.width - 4)
    panel_h = clamp(20, 10, app.height - 4)
    rows = [
        place(panel_w - 4, 1, Align.CENTER, Align.TOP, STYLE_SUBTITLE.render(line.strip()))
        for line in app.interactive_prompt.split("\n")
        if line.strip()
    ]
    rows.extend(("", ""))

    if app.interactive_selected == 0:
        yes_btn = STYLE_MENU_ITEM_SELECTED.render("  Yes  ")
        no_btn = STYLE_MENU_ITEM.render("  No  ")
    else:
        yes_btn = STYLE_MENU_ITEM.render("  Yes  ")
        no_btn = STYLE_MENU_ITEM_SELECTED.render("  No  ")
    buttons = join_horizontal(Align.LEFT, yes_btn, "   ", no_btn)
    rows.append(place(panel_w - 4, 1, Align.CENTER, Align.TOP, buttons))

    centered = place(panel_w - 4, panel_h - 2, Align.CENTER, Align.CENTER, "\n".join(rows))
    return _place_center(app, _panel(panel_w, panel_h).render(centered))


def view_interactive(app: App) -> str:
    """A question from packwiz: yes/no buttons or a numbered list of choices."""
    if app.is_yes_no_prompt():
        return _view_yes_no(app)

    rows = ["", STYLE_SUBTITLE.render("  " + app.interactive_prompt), ""]
    for i, option in enumerate(app.interactive_options):
        is_header = (
            i < len(app.interactive_sources) and app.interactive_sources[i] == SOURCE_HEADER
        )
        if is_header:
            rows.extend(("", _HEADER.render("  " + option), ""))
            continue
        style = STYLE_MENU_ITEM_SELECTED if i == app.interactive_selected else STYLE_MENU_ITEM
        rows.append(style.render(f" [{i}] {option}"))

    panel_w = clamp(64, 40, app.width - 4)
    panel = _panel(panel_w).render("\n".join(rows))
    return _place_center(
        app,
        join_vertical(
            Align.LEFT, STYLE_TITLE.render("  Multiple Options Found"), "", panel
        ),
    )