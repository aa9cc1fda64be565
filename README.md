# packwiz-tui

A full-screen terminal interface for managing a Minecraft modpack that is
built with the `packwiz` command-line tool and kept in a git repository.

## What it does

- Finds the git repository you are standing in and looks for the first
  `pack.toml` inside it. If you are not inside a repository, or it holds no
  `pack.toml`, it shows a list of recently used repositories. From there you
  can also clone a new one, which goes into `~/modpacks/<name>`.
- Lists the `.toml` files in the pack's `mods/` directory, sorted by name,
  and marks each one as added (`A`), modified (`M`) or deleted (`D`) using
  `git status --porcelain`. Deleted mod files stay in the list so that they
  can be restored.
- Adds mods with `packwiz mr add <name>`. If Modrinth offers more than one
  match, or the Modrinth search fails, CurseForge is searched as well and
  you choose from both lists, shown under separate headings. Yes/no
  questions from packwiz, such as whether to install dependencies, are
  answered in the interface; for these packwiz is run on a
  pseudo-terminal.
- Deletes a mod file, or restores a deleted one with `git checkout`. Either
  way, `packwiz refresh` runs afterwards in the background.
- Opens a mod file in `$EDITOR`. If that is not set, it tries `vim`, `vi`,
  `nano` and `emacs` in turn. After the editor closes, `packwiz refresh`
  runs if the file changed, and the list is reloaded.
- Opens `lazygit` in the repository, if it is on your `PATH`.
- The main-menu entry **Push & Exit** runs `git add .`, commits with a
  timestamped message and runs `git push`, showing the output. An empty
  commit is not treated as a failure.

Recently used repositories are stored in `~/.packwiz-tui-recents.json`,
most recent first. At most 20 are kept.

## Requirements

- Python 3.10 or later on a POSIX system (it uses pseudo-terminals)
- `git` and `packwiz` on your `PATH`
- Optional: `lazygit` and a text editor

## Installation

```
pip install .
```

## Usage

Run this from inside a modpack repository, or from anywhere else:

```
packwiz-tui
```

It takes no options besides `--help`.

### Keys

| Screen       | Keys                                                                       |
|--------------|----------------------------------------------------------------------------|
| Repositories | `↑`/`↓` or `k`/`j` move, `enter` or space select, `q` quit                 |
| Clone        | `enter` clone, `esc` back, `ctrl+c` quit                                   |
| Main menu    | `↑`/`↓` move, `enter` select, `1`–`4` shortcuts, `g` lazygit, `q` quit     |
| Mods         | `enter` edit, `/` search, `n` add, `d` delete or restore, `r` refresh, `g` lazygit, `esc` back |
| Output       | `enter`, `q` or `esc` continue once the command has finished               |
| Choices      | `↑`/`↓` (or `←`/`→` for yes/no), `enter` select, `esc` cancel              |

You can also use the mouse: click a main-menu entry, the `+` button to add
a mod, or the `−` button beside a mod to delete it (`+` to restore).

## What it does not do

- **Push & Exit** does not leave the program: after a successful push it
  returns to the mod list. Use **Exit without Pushing** or `q` to quit.
- The **Manage Loader** screen only lists the `packwiz fabric|forge|neoforge|quilt
  install` commands; you run them yourself in the pack directory.
- Mods are added by name only; there is no browsing of versions or
  categories.

## Development

```
pip install -e ".[test]"
pytest
```