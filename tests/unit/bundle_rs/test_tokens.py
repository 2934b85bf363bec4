from __future__ import annotations

import pytest
from pydantic import ValidationError

from bundle_rs.tokens import (
    TOKEN_TREE_ADAPTER,
    Block,
    LineSpan,
    PlainLine,
    SingleImport,
    SubmoduleDeclaration,
    count_blocks,
    count_lines,
)


def plain(line: str) -> PlainLine:
    stripped = line.strip()
    start = line.find(stripped) if stripped else 0
    return PlainLine(line=line, trimmed_span=LineSpan(start=start, length=len(stripped)))


@pytest.mark.unit
def test_line_span_resolves_substring() -> None:
    assert LineSpan(start=0, length=5).resolve("Hello, world") == "Hello"
    assert LineSpan(start=7, length=5).resolve("Hello, world") == "world"


@pytest.mark.unit
def test_line_span_empty() -> None:
    span = LineSpan(start=0, length=0)

    assert span.resolve("test") == ""
    assert span.end == 0


@pytest.mark.unit
def test_line_span_rejects_negative_values() -> None:
    with pytest.raises(ValidationError):
        LineSpan(start=-1, length=2)
    with pytest.raises(ValidationError):
        LineSpan(start=0, length=-2)


@pytest.mark.unit
def test_line_span_shifted() -> None:
    assert LineSpan(start=2, length=3).shifted(10) == LineSpan(start=12, length=3)


@pytest.mark.unit
def test_token_rejects_span_past_end_of_line() -> None:
    with pytest.raises(ValidationError, match="overruns"):
        PlainLine(line="abc", trimmed_span=LineSpan(start=2, length=5))


@pytest.mark.unit
def test_span_ending_exactly_at_end_of_line_is_valid() -> None:
    token = SingleImport(line="use a;", name_span=LineSpan(start=4, length=2))

    assert token.path == "a;"


@pytest.mark.unit
def test_tokens_are_frozen() -> None:
    token = SubmoduleDeclaration(line="mod a;", name_span=LineSpan(start=4, length=1))

    with pytest.raises(ValidationError):
        token.is_public = True  # type: ignore[misc]


@pytest.mark.unit
def test_block_requires_a_name() -> None:
    with pytest.raises(ValidationError):
        Block(name="", children=())


@pytest.mark.unit
def test_counts_walk_nested_blocks() -> None:
    tree = (
        plain("use std::io;"),
        Block(
            name="game",
            children=(
                plain("struct Game;"),
                Block(name="inner", children=(plain("fn run() {}"),)),
            ),
        ),
        plain("fn main() {}"),
    )

    assert count_lines(tree) == 4
    assert count_blocks(tree) == 2


@pytest.mark.unit
def test_token_tree_json_keeps_variants() -> None:
    tree = (
        SubmoduleDeclaration(line="pub mod a;", name_span=LineSpan(start=8, length=1), is_public=True),
        Block(name="b", is_public=False, children=(plain("  x  "),)),
    )

    restored = TOKEN_TREE_ADAPTER.validate_json(TOKEN_TREE_ADAPTER.dump_json(tree))

    assert restored == tree
    assert isinstance(restored[1], Block)
    assert isinstance(restored[1].children[0], PlainLine)
