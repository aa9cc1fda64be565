"""Recognising packwiz's interactive prompts in its output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

SOURCE_HEADER = "header"
SOURCE_MODRINTH = "modrinth"
SOURCE_CURSEFORGE = "curseforge"
MODRINTH_HEADER = "=== Modrinth ==="
CURSEFORGE_HEADER = "=== CurseForge ==="
COMBINED_PROMPT = "Select a mod from Modrinth or CurseForge:"
NO_RESULTS_MESSAGE = "No results found in either Modrinth or CurseForge"
VAGUE_MATCH_PROMPT = "Multiple matches found. Please re-run with more specific search."
YES_NO_MARKERS = ("[y/n]", "(y/n)")
_MAX_YES_NO_LINES = 15

_ANSI = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")
_CONTROL = re.compile(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]")
_LIST_STARTS = ("[1]", "1.", "0)", "1)")


@dataclass
class InteractivePrompt:
    """A question packwiz asked, with its choices and where each came from."""

    prompt: str
    options: list[str]
    output: str = ""
    sources: list[str] = field(default_factory=list)


def strip_ansi(text: str) -> str:
    """Remove escape sequences, control characters and carriage returns."""
    text = _ANSI.sub("", text)
    text = _CONTROL.sub("", text)
    return text.replace("\r\n", "\n").replace("\r", "")


def _parse_option(trimmed: str) -> str:
    if trimmed.startswith("["):
        idx = trimmed.find("]")
        if 0 < idx < len(trimmed) - 1:
            return trimmed[idx + 1 :].strip().removeprefix(":").strip()
        return ""
    if len(trimmed) > 2 and trimmed[0] in "0123456789" and trimmed[1] in ".)":
        return trimmed[2:].strip().removeprefix("*").strip()
    return ""


def _is_selection_line(trimmed: str, lower: str) -> bool:
    return (
        "select" in lower
        or "choose" in lower
        or "which" in lower
        or "[1-" in trimmed
        or ("enter" in lower and ("number" in lower or "choice" in lower))
    )


def _mentions_multiple(lower: str) -> bool:
    return "multiple" in lower and ("found" in lower or "match" in lower)


def detect_interactive_prompt(output: str) -> InteractivePrompt | None:
    """Find a numbered list of choices in ``output``, or ``None`` if there is none."""
    options: list[str] = []
    prompt_line = ""
    in_list = False
    list_started = False

    for line in output.split("\n"):
        trimmed = line.strip()
        lower = trimmed.lower()

        if _mentions_multiple(lower):
            prompt_line = trimmed
            in_list = True
            list_started = True
            continue

        if in_list or (not list_started and trimmed.startswith(_LIST_STARTS)):
            option = _parse_option(trimmed)
            if option:
                options.append(option)
                in_list = True
                list_started = True
                continue

        if in_list and options and _is_selection_line(trimmed, lower):
            prompt_line = f"{prompt_line} {trimmed}" if prompt_line else trimmed
            break

    if options:
        if not prompt_line:
            prompt_line = f"Select an option [1-{len(options)}]:"
        return InteractivePrompt(prompt=prompt_line, options=options, output=output)

    if _mentions_multiple(output.lower()):
        return InteractivePrompt(prompt=VAGUE_MATCH_PROMPT, options=["OK"], output=output)
    return None


def extract_yes_no_prompt(clean_output: str) -> InteractivePrompt | None:
    """Return the yes/no question in ``clean_output`` with its context, if it asks one."""
    lower_output = clean_output.lower()
    if not any(marker in lower_output for marker in YES_NO_MARKERS):
        return None

    prompt_lines: list[str] = []
    found = False
    for raw in reversed(clean_output.strip().split("\n")):
        if len(prompt_lines) >= _MAX_YES_NO_LINES:
            break
        line = raw.strip()
        if not line:
            continue
        lower = line.lower()
        if "y/n" in lower and not found:
            prompt_lines.insert(0, line)
            found = True
        elif found:
            prompt_lines.insert(0, line)
            if "dependencies found" in lower:
                break

    return InteractivePrompt(
        prompt="\n".join(prompt_lines), options=["Yes", "No"], output=clean_output
    )


def already_answered(input_text: str) -> bool:
    """Whether the input sent so far already holds a yes/no answer."""
    lower = input_text.lower()
    return "\ny" in lower or "\nn" in lower or lower.endswith(("y", "n"))


def _strip_description(option: str) -> str:
    paren = option.rfind("(")
    return option[:paren].strip() if paren != -1 else option


def combine_search_results(
    mr_output: str,
    mr_prompt: InteractivePrompt | None,
    cf_output: str,
    cf_prompt: InteractivePrompt | None,
) -> InteractivePrompt:
    """Merge Modrinth and CurseForge choices under section headers.

    Raises ``LookupError`` when neither search offered any choice.
    """
    options: list[str] = []
    sources: list[str] = []
    parts: list[str] = []

    if mr_prompt is not None and mr_prompt.options:
        options.append(MODRINTH_HEADER)
        sources.append(SOURCE_HEADER)
        options.extend(mr_prompt.options)
        sources.extend(SOURCE_MODRINTH for _ in mr_prompt.options)
        parts.append(f"{MODRINTH_HEADER}\n{mr_output}\n\n")

    if cf_prompt is not None and cf_prompt.options:
        options.append(CURSEFORGE_HEADER)
        sources.append(SOURCE_HEADER)
        options.extend(_strip_description(opt) for opt in cf_prompt.options)
        sources.extend(SOURCE_CURSEFORGE for _ in cf_prompt.options)
        parts.append(f"{CURSEFORGE_HEADER}\n{cf_output}")

    if not options:
        raise LookupError(NO_RESULTS_MESSAGE)

    combined = "".join(parts)
    return InteractivePrompt(
        prompt=COMBINED_PROMPT, options=options, output=combined, sources=sources
    )


def is_yes_no(options: list[str]) -> bool:
    """Whether ``options`` are exactly a yes choice followed by a no choice."""
    if len(options) != 2:
        return False
    first, second = (opt.lower() for opt in options)
    return first in ("yes", "y") and second in ("no", "n")