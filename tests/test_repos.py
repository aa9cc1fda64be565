import json

import pytest

from packwiz_tui.repos import (
    MAX_RECENT_REPOS,
    RECENT_REPOS_FILE,
    ModFile,
    RepoEntry,
    add_recent_repo,
    find_pack_toml,
    get_repo_name,
    list_mod_files,
    load_recent_repos,
    parse_pack_name,
    save_recent_repos,
)


def test_repo_name_from_remote():
    assert get_repo_name("https://github.com/user/modpack.git", "/x/y") == "user/modpack"


def test_repo_name_single_part_remote():
    assert get_repo_name("modpack.git", "/x/y") == "modpack"


def test_repo_name_falls_back_to_path():
    assert get_repo_name("", "/home/me/packs/forge") == "forge"


def test_load_missing_file_gives_empty(tmp_path):
    assert load_recent_repos(tmp_path) == []


def test_load_malformed_file_gives_empty(tmp_path):
    (tmp_path / RECENT_REPOS_FILE).write_text("{not json", encoding="utf-8")
    assert load_recent_repos(tmp_path) == []


def test_load_wrong_shape_gives_empty(tmp_path):
    (tmp_path / RECENT_REPOS_FILE).write_text('{"name": "a"}', encoding="utf-8")
    assert load_recent_repos(tmp_path) == []


def test_save_and_load_round_trip(tmp_path):
    repos = [
        RepoEntry("a/b", "/p/b", "git@host:a/b.git", "2024-01-01T00:00:00Z"),
        RepoEntry("c", "/p/c", "", "2024-01-02T00:00:00Z"),
    ]
    save_recent_repos(repos, tmp_path)
    assert load_recent_repos(tmp_path) == repos


def test_saved_file_uses_json_field_names(tmp_path):
    save_recent_repos([RepoEntry("n", "/p", "r", "t")], tmp_path)
    data = json.loads((tmp_path / RECENT_REPOS_FILE).read_text(encoding="utf-8"))
    assert data == [{"name": "n", "path": "/p", "remote": "r", "last_used": "t"}]


def test_from_dict_missing_fields_are_empty():
    assert RepoEntry.from_dict({"path": "/p"}) == RepoEntry(path="/p")


def test_from_dict_rejects_non_string():
    with pytest.raises(TypeError):
        RepoEntry.from_dict({"name": 3})


def test_add_recent_repo_moves_existing_to_front(tmp_path):
    save_recent_repos([RepoEntry("a", "/a"), RepoEntry("b", "/b")], tmp_path)
    add_recent_repo(RepoEntry("b2", "/b"), tmp_path)
    loaded = load_recent_repos(tmp_path)
    assert [r.path for r in loaded] == ["/b", "/a"]
    assert loaded[0].name == "b2"


def test_add_recent_repo_caps_list(tmp_path):
    for i in range(MAX_RECENT_REPOS + 5):
        add_recent_repo(RepoEntry(str(i), f"/r/{i}"), tmp_path)
    loaded = load_recent_repos(tmp_path)
    assert len(loaded) == MAX_RECENT_REPOS
    assert loaded[0].path == f"/r/{MAX_RECENT_REPOS + 4}"


def test_find_pack_toml_nested(tmp_path):
    target = tmp_path / "pack" / "pack.toml"
    target.parent.mkdir()
    target.write_text("", encoding="utf-8")
    assert find_pack_toml(tmp_path) == str(target)


def test_find_pack_toml_skips_git_and_node_modules(tmp_path):
    for skipped in (".git", "node_modules"):
        (tmp_path / skipped).mkdir()
        (tmp_path / skipped / "pack.toml").write_text("", encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        find_pack_toml(tmp_path)


def test_find_pack_toml_lexical_order(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "pack.toml").write_text("", encoding="utf-8")
    (tmp_path / "pack.toml").write_text("", encoding="utf-8")
    assert find_pack_toml(tmp_path) == str(tmp_path / "a" / "pack.toml")


def test_find_pack_toml_missing_root(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_pack_toml(tmp_path / "nope")


def test_list_mod_files(tmp_path):
    mods = tmp_path / "mods"
    mods.mkdir()
    (mods / "zeta.toml").write_text("", encoding="utf-8")
    (mods / "alpha.toml").write_text("", encoding="utf-8")
    (mods / "readme.txt").write_text("", encoding="utf-8")
    (mods / "dir.toml").mkdir()
    assert list_mod_files(tmp_path) == [
        ModFile("alpha", "alpha.toml", str(mods / "alpha.toml")),
        ModFile("zeta", "zeta.toml", str(mods / "zeta.toml")),
    ]


def test_list_mod_files_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_mod_files(tmp_path)


def test_parse_pack_name(tmp_path):
    pack = tmp_path / "pack.toml"
    pack.write_text('pack-format = "x"\nname = "My Pack"\n', encoding="utf-8")
    assert parse_pack_name(pack) == "My Pack"


def test_parse_pack_name_single_quotes(tmp_path):
    pack = tmp_path / "pack.toml"
    pack.write_text("  name='Other'\n", encoding="utf-8")
    assert parse_pack_name(pack) == "Other"


def test_parse_pack_name_without_name_uses_dir(tmp_path):
    folder = tmp_path / "forgepack"
    folder.mkdir()
    pack = folder / "pack.toml"
    pack.write_text("version = 1\n", encoding="utf-8")
    assert parse_pack_name(pack) == "forgepack"


def test_parse_pack_name_missing_file_uses_dir(tmp_path):
    assert parse_pack_name(tmp_path / "gone" / "pack.toml") == "gone"