import os
import sys
import textwrap
import time

import pytest

from packwiz_tui import packwiz
from packwiz_tui.gitops import CommandError
from packwiz_tui.packwiz import (
    run_both_packwiz_searches,
    run_packwiz,
    run_packwiz_interactive,
    run_packwiz_with_input,
)
from packwiz_tui.prompts import (
    COMBINED_PROMPT,
    CURSEFORGE_HEADER,
    MODRINTH_HEADER,
    NO_RESULTS_MESSAGE,
    SOURCE_CURSEFORGE,
    SOURCE_HEADER,
    SOURCE_MODRINTH,
)


def install_packwiz(tmp_path, monkeypatch, body):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    script = bin_dir / "packwiz"
    script.write_text(
        f"#!{sys.executable}\nimport os, sys, time\n" + textwrap.dedent(body)
    )
    script.chmod(0o755)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    pack = tmp_path / "pack"
    pack.mkdir(exist_ok=True)
    return pack


DEPENDENCY_BODY = """
choice = sys.stdin.readline().strip()
sys.stdout.write("Dependencies found:\\nfabric-api\\nInstall? [Y/n]: ")
sys.stdout.flush()
answer = sys.stdin.readline().strip()
print()
print("installed " + choice + answer)
"""


def test_run_packwiz_runs_in_pack_dir(tmp_path, monkeypatch):
    pack = install_packwiz(
        tmp_path,
        monkeypatch,
        """
        print("  " + os.getcwd())
        print(" ".join(sys.argv[1:]) + "  ")
        """,
    )
    output = run_packwiz(str(pack), "refresh", "--build")
    assert output == f"{os.path.realpath(pack)}\nrefresh --build"


def test_run_packwiz_failure_keeps_output(tmp_path, monkeypatch):
    pack = install_packwiz(tmp_path, monkeypatch, 'print("broken")\nsys.exit(3)\n')
    with pytest.raises(CommandError) as info:
        run_packwiz(str(pack), "refresh")
    assert info.value.output == "broken"
    assert info.value.returncode == 3


def test_run_packwiz_missing_binary(tmp_path, monkeypatch):
    empty = tmp_path / "empty"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    with pytest.raises(CommandError):
        run_packwiz(str(tmp_path), "refresh")


def test_interactive_plain_output_is_trimmed(tmp_path, monkeypatch):
    pack = install_packwiz(tmp_path, monkeypatch, 'print("  added jei  ")\n')
    result = run_packwiz_interactive(str(pack), "mr", "add", "jei")
    assert result.output == "added jei"
    assert result.prompt is None


def test_interactive_detects_list_even_on_failure(tmp_path, monkeypatch):
    pack = install_packwiz(
        tmp_path,
        monkeypatch,
        """
        print("Multiple projects found:")
        print("1) JEI")
        print("2) REI")
        print("Select a project")
        sys.exit(1)
        """,
    )
    result = run_packwiz_interactive(str(pack), "mr", "add", "jei")
    assert result.prompt is not None
    assert result.prompt.options == ["JEI", "REI"]
    assert result.prompt.prompt.startswith("Multiple projects found:")
    assert "2) REI" in result.output


def test_interactive_failure_raises(tmp_path, monkeypatch):
    pack = install_packwiz(tmp_path, monkeypatch, 'print("oops")\nsys.exit(2)\n')
    with pytest.raises(CommandError) as info:
        run_packwiz_interactive(str(pack), "refresh")
    assert info.value.output == "oops"
    assert info.value.returncode == 2


def test_interactive_stops_waiting_command_with_choices(tmp_path, monkeypatch):
    pack = install_packwiz(
        tmp_path,
        monkeypatch,
        'print("1) A\\n2) B", flush=True)\ntime.sleep(30)\n',
    )
    monkeypatch.setattr(packwiz, "INTERACTIVE_TIMEOUT", 0.5)
    started = time.monotonic()
    result = run_packwiz_interactive(str(pack), "mr", "add", "a")
    assert time.monotonic() - started < 10
    assert result.prompt is not None
    assert result.prompt.options == ["A", "B"]


def test_both_searches_single_modrinth_match_skips_curseforge(tmp_path, monkeypatch):
    marker = tmp_path / "cf-called"
    pack = install_packwiz(
        tmp_path,
        monkeypatch,
        f"""
        if sys.argv[1] == "cf":
            open({str(marker)!r}, "w").close()
        print("Project JEI added")
        """,
    )
    result = run_both_packwiz_searches(str(pack), "jei")
    assert result.output == "Project JEI added"
    assert result.prompt is None
    assert not marker.exists()


def test_both_searches_combine_choices(tmp_path, monkeypatch):
    pack = install_packwiz(
        tmp_path,
        monkeypatch,
        """
        if sys.argv[1] == "mr":
            print("1) JEI\\n2) JEI Addon")
        else:
            print("1) JEI (Just Enough Items)\\n2) JEI Tweaks")
        """,
    )
    result = run_both_packwiz_searches(str(pack), "jei")
    assert result.prompt is not None
    assert result.prompt.prompt == COMBINED_PROMPT
    assert result.prompt.options == [
        MODRINTH_HEADER,
        "JEI",
        "JEI Addon",
        CURSEFORGE_HEADER,
        "JEI",
        "JEI Tweaks",
    ]
    assert result.prompt.sources == [
        SOURCE_HEADER,
        SOURCE_MODRINTH,
        SOURCE_MODRINTH,
        SOURCE_HEADER,
        SOURCE_CURSEFORGE,
        SOURCE_CURSEFORGE,
    ]
    assert result.output.startswith(MODRINTH_HEADER)
    assert result.output == result.prompt.output


def test_both_searches_use_curseforge_when_modrinth_fails(tmp_path, monkeypatch):
    pack = install_packwiz(
        tmp_path,
        monkeypatch,
        """
        if sys.argv[1] == "mr":
            print("not found")
            sys.exit(1)
        print("1) Waystones\\n2) Waystones Extra")
        """,
    )
    result = run_both_packwiz_searches(str(pack), "waystones")
    assert result.prompt.options[0] == CURSEFORGE_HEADER
    assert result.prompt.options[1:] == ["Waystones", "Waystones Extra"]


def test_both_searches_without_results_raise(tmp_path, monkeypatch):
    pack = install_packwiz(tmp_path, monkeypatch, 'print("nothing")\nsys.exit(1)\n')
    with pytest.raises(CommandError) as info:
        run_both_packwiz_searches(str(pack), "nothing")
    assert info.value.output == NO_RESULTS_MESSAGE


def test_with_input_returns_unanswered_yes_no_question(tmp_path, monkeypatch):
    pack = install_packwiz(tmp_path, monkeypatch, DEPENDENCY_BODY)
    result = run_packwiz_with_input(str(pack), "1", "mr", "add", "sodium")
    assert result.prompt is not None
    assert result.prompt.options == ["Yes", "No"]
    assert result.prompt.prompt == "Dependencies found:\nfabric-api\nInstall? [Y/n]:"
    assert "\r" not in result.output


def test_with_input_runs_to_completion_once_answered(tmp_path, monkeypatch):
    pack = install_packwiz(tmp_path, monkeypatch, DEPENDENCY_BODY)
    result = run_packwiz_with_input(str(pack), "1\ny", "mr", "add", "sodium")
    assert result.prompt is None
    assert "installed 1y" in result.output
    assert result.output == result.output.strip()