from __future__ import annotations

from pathlib import Path

import pytest

MAIN_SOURCE = """use std::io;
use std::{BufReader};
pub mod game;
enum Test {
    One,
}"""

GAME_SOURCE = """struct Game {
    test: i32,
}
use std::fs::{File}
use std::io;"""

BUNDLED_SOURCE = """use std::io;
use std::{BufReader};
pub mod game{
struct Game {
    test: i32,
}
use std::fs::{File}
use std::io;
}
enum Test {
    One,
}
"""


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Write ``files`` (relative path -> content) under ``root`` and return it."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def flat_crate(tmp_path: Path) -> Path:
    """A crate whose only submodule is a sibling ``game.rs`` file."""
    return write_files(tmp_path / "src", {"main.rs": MAIN_SOURCE, "game.rs": GAME_SOURCE})


@pytest.fixture
def nested_crate(tmp_path: Path) -> Path:
    """A crate with a directory module (``game/mod.rs``) declaring ``inner``."""
    return write_files(
        tmp_path / "src",
        {
            "main.rs": "mod game;\n\nfn main() {\n    game::inner::run();\n}\n",
            "game/mod.rs": "pub mod inner;\nconst SIZE: usize = 3;\n",
            "game/inner.rs": "use super::SIZE;\n\npub fn run() {\n    let _ = SIZE;\n}\n",
        },
    )


@pytest.fixture
def main_source() -> str:
    return MAIN_SOURCE


@pytest.fixture
def game_source() -> str:
    return GAME_SOURCE


@pytest.fixture
def bundled_source() -> str:
    """Expected bundle of ``main_source`` declaring ``game_source``."""
    return BUNDLED_SOURCE
