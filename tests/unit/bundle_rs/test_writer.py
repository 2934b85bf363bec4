from __future__ import annotations

import io
import json

import pytest

from bundle_rs.exceptions import BundleWriteError
from bundle_rs.syntax import classify_line
from bundle_rs.tokens import Block
from bundle_rs.writer import block_header, dump_tokens_json, render_tokens, write_tokens


class _FailingSink(io.StringIO):
    def write(self, s: str) -> int:
        raise OSError("disk full")


class _CountingSink(io.StringIO):
    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def write(self, s: str) -> int:
        self.writes += 1
        return super().write(s)


@pytest.mark.unit
def test_block_header_visibility() -> None:
    assert block_header(Block(name="game", is_public=True)) == "pub mod game{"
    assert block_header(Block(name="game", is_public=False)) == "mod game{"


@pytest.mark.unit
def test_nested_blocks_are_not_reindented() -> None:
    tree = (
        classify_line("use std::io;"),
        Block(
            name="outer",
            children=(
                classify_line("    const A: u8 = 1;"),
                Block(name="inner", is_public=False, children=(classify_line("\tfn f() {}"),)),
            ),
        ),
        classify_line(""),
    )

    assert render_tokens(tree) == (
        "use std::io;\npub mod outer{\n    const A: u8 = 1;\nmod inner{\n\tfn f() {}\n}\n}\n\n"
    )


@pytest.mark.unit
def test_submodule_declaration_token_is_written_verbatim() -> None:
    assert render_tokens((classify_line("  pub mod kept;  "),)) == "  pub mod kept;  \n"


@pytest.mark.unit
def test_empty_tree_writes_nothing() -> None:
    out = io.StringIO()

    write_tokens(out, ())

    assert out.getvalue() == ""


@pytest.mark.unit
def test_sink_failure_is_wrapped() -> None:
    with pytest.raises(BundleWriteError, match="disk full"):
        write_tokens(_FailingSink(), (classify_line("fn main() {}"),))


@pytest.mark.unit
def test_tree_is_handed_to_sink_in_one_write() -> None:
    tokens = (
        classify_line("use std::io;"),
        Block(name="game", is_public=True, children=(classify_line("fn play() {}"),)),
        classify_line("fn main() {}"),
    )
    sink = _CountingSink()

    write_tokens(sink, tokens)

    assert sink.writes == 1
    assert sink.getvalue() == "use std::io;\npub mod game{\nfn play() {}\n}\nfn main() {}\n"


@pytest.mark.unit
def test_dump_tokens_json_exposes_kinds_and_spans() -> None:
    tree = (classify_line("use std::{a, b};"), Block(name="m"))

    data = json.loads(dump_tokens_json(tree))

    assert [item["kind"] for item in data] == ["multi_import", "block"]
    assert data[0]["name_spans"] == [{"start": 10, "length": 1}, {"start": 13, "length": 1}]
    assert data[1]["children"] == []
