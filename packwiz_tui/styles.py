"""Colour palette, shared styles and the logo."""

from __future__ import annotations

from .layout import Style

COLOR_BG = "#0d0f14"
COLOR_BG_PANEL = "#141720"
COLOR_BG_HOVER = "#1c2030"
COLOR_BORDER = "#2a3045"
COLOR_BORDER_FOCUSED = "#ff6b2b"
COLOR_ACCENT = "#ff6b2b"
COLOR_ACCENT2 = "#ffab76"
COLOR_TEXT = "#e8eaf0"
COLOR_MUTED = "#5a6380"
COLOR_DANGER = "#ff4444"
COLOR_SUCCESS = "#44cc88"
COLOR_INFO = "#5599ff"

STYLE_BASE = Style(background=COLOR_BG, foreground=COLOR_TEXT)
STYLE_TITLE = Style(foreground=COLOR_ACCENT, bold=True, padding=(0, 0, 0, 1))
STYLE_SUBTITLE = Style(foreground=COLOR_MUTED, padding=(0, 0, 0, 1))
STYLE_PANEL = Style(border="rounded", border_foreground=COLOR_BORDER, padding=(0, 1))
STYLE_PANEL_FOCUSED = Style(
    border="rounded", border_foreground=COLOR_BORDER_FOCUSED, padding=(0, 1)
)
STYLE_MENU_ITEM = Style(foreground=COLOR_MUTED)
STYLE_MENU_ITEM_SELECTED = Style(
    foreground=COLOR_ACCENT, background=COLOR_BG_HOVER, bold=True
)
STYLE_MENU_ITEM_ICON = Style(foreground=COLOR_ACCENT, padding=(0, 1, 0, 0))
STYLE_MOD_ITEM = Style(foreground=COLOR_TEXT, padding=(0, 0, 0, 1))
STYLE_MOD_ITEM_SELECTED = Style(
    foreground=COLOR_ACCENT, background=COLOR_BG_HOVER, bold=True, padding=(0, 0, 0, 1)
)
STYLE_MOD_ITEM_DELETED = Style(
    foreground=COLOR_MUTED, strikethrough=True, padding=(0, 0, 0, 1)
)
STYLE_DELETE_BTN = Style(foreground=COLOR_BG, background=COLOR_DANGER, bold=True)
STYLE_SEARCH_LABEL = Style(foreground=COLOR_MUTED)
STYLE_SEARCH_ACTIVE = Style(foreground=COLOR_ACCENT)
STYLE_ADD_BTN = Style(foreground=COLOR_BG, background=COLOR_SUCCESS, bold=True)
STYLE_STATUS_BAR = Style(background=COLOR_BG_PANEL, foreground=COLOR_MUTED)
STYLE_STATUS_KEY = Style(foreground=COLOR_ACCENT2, bold=True)
STYLE_STATUS_SEP = Style(foreground=COLOR_BORDER)
STYLE_MODAL = Style(
    background=COLOR_BG_PANEL,
    border="rounded",
    border_foreground=COLOR_BORDER_FOCUSED,
    padding=(1, 2),
)
STYLE_MODAL_TITLE = Style(foreground=COLOR_ACCENT, bold=True)
STYLE_MODAL_INPUT = Style(
    foreground=COLOR_TEXT,
    background=COLOR_BG_HOVER,
    border="normal",
    border_foreground=COLOR_BORDER,
    padding=(0, 1),
    width=40,
)
STYLE_LOGO = Style(foreground=COLOR_ACCENT, bold=True)
STYLE_LOGO_SUB = Style(foreground=COLOR_MUTED)
STYLE_REPO_ITEM = Style(foreground=COLOR_TEXT)
STYLE_REPO_ITEM_SELECTED = Style(
    foreground=COLOR_ACCENT, background=COLOR_BG_HOVER, bold=True
)
STYLE_REPO_PATH = Style(foreground=COLOR_MUTED)
STYLE_BADGE = Style(
    foreground=COLOR_BG, background=COLOR_ACCENT, padding=(0, 1), bold=True
)
STYLE_BADGE_INFO = Style(
    foreground=COLOR_BG, background=COLOR_INFO, padding=(0, 1), bold=True
)
STYLE_OUTPUT = Style(foreground=COLOR_MUTED, padding=(0, 0, 0, 1))
STYLE_OUTPUT_SUCCESS = Style(foreground=COLOR_SUCCESS, padding=(0, 0, 0, 1))
STYLE_OUTPUT_ERROR = Style(foreground=COLOR_DANGER, padding=(0, 0, 0, 1))
STYLE_LOADER = Style(foreground=COLOR_ACCENT, bold=True)
STYLE_DIVIDER = Style(foreground=COLOR_BORDER)
STYLE_HIGHLIGHT = Style(foreground=COLOR_ACCENT2, bold=True)

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

_LOGO = "\n".join(
    (
        "  ██████╗  █████╗  ██████╗██╗  ██╗██╗    ██╗██╗███████╗",
        "  ██╔══██╗██╔══██╗██╔════╝██║ ██╔╝██║    ██║██║╚══███╔╝",
        "  ██████╔╝███████║██║     █████╔╝ ██║ █╗ ██║██║  ███╔╝ ",
        "  ██╔═══╝ ██╔══██║██║     ██╔═██╗ ██║███╗██║██║ ███╔╝  ",
        "  ██║     ██║  ██║╚██████╗██║  ██╗╚███╔███╔╝██║███████╗",
        "  ╚═╝     ╚═╝  ╚═╝ ╚═════╝╚═╝  ╚═╝ ╚══╝╚══╝ ╚═╝╚══════╝",
    )
)


def style_muted(text: str) -> str:
    """Render ``text`` in the muted colour."""
    return Style(foreground=COLOR_MUTED).render(text)


def render_logo() -> str:
    """Return the block-letter header."""
    return STYLE_LOGO.render(_LOGO)