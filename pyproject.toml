[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "packwiz-tui"
version = "0.1.0"
description = "Terminal interface for managing packwiz Minecraft modpacks kept in git"
requires-python = ">=3.10"
keywords = ["packwiz", "minecraft", "modpack", "tui", "terminal", "git"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "blessed",
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
packwiz-tui = "packwiz_tui.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["packwiz_tui"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]
