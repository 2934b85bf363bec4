"""Token tree model produced by the loader and consumed by the writer.

Every line-carrying token owns its original ``line`` text and refers into it
through :class:`LineSpan` offsets, so classification never copies substrings.
"""

from __future__ import annotations

from typing import Annotated, Literal, Self

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class LineSpan(BaseModel):
    """A ``(start, length)`` reference into the text of the owning line."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, description="Offset of the first character")
    length: int = Field(..., ge=0, description="Number of characters")

    @property
    def end(self) -> int:
        """Offset one past the last character."""
        return self.start + self.length

    def resolve(self, line: str) -> str:
        """Return the substring of ``line`` this span designates."""
        return line[self.start : self.end]

    def shifted(self, offset: int) -> LineSpan:
        """Return the same span moved ``offset`` characters to the right."""
        return LineSpan(start=self.start + offset, length=self.length)


class LineToken(BaseModel):
    """Common base of the tokens that stand for exactly one source line.

    Attributes:
        line: The full original text of the line, without its terminator.
    """

    model_config = ConfigDict(frozen=True)

    line: str = Field(..., description="Original line text")

    def spans(self) -> tuple[LineSpan, ...]:
        """All spans held by the token, checked against ``line`` on construction."""
        return ()

    @model_validator(mode="after")
    def check_spans_within_line(self) -> Self:
        for span in self.spans():
            if span.end > len(self.line):
                msg = f"span {span.start}+{span.length} overruns a line of {len(self.line)} characters"
                raise ValueError(msg)
        return self


class SubmoduleDeclaration(LineToken):
    """``[pub] mod name;``: a child module to be inlined in place."""

    kind: Literal["submodule"] = "submodule"
    name_span: LineSpan
    is_public: bool = False

    def spans(self) -> tuple[LineSpan, ...]:
        return (self.name_span,)

    @property
    def name(self) -> str:
        return self.name_span.resolve(self.line)


class SingleImport(LineToken):
    """``use a::b::c;``: an import of exactly one qualified name."""

    kind: Literal["single_import"] = "single_import"
    name_span: LineSpan

    def spans(self) -> tuple[LineSpan, ...]:
        return (self.name_span,)

    @property
    def path(self) -> str:
        return self.name_span.resolve(self.line)


class MultiImport(LineToken):
    """``use a::b::{c, d};``: an import whose last segment is a brace group.

    ``parent_span`` covers the path before the group; ``name_spans`` cover the
    listed names in declaration order.
    """

    kind: Literal["multi_import"] = "multi_import"
    parent_span: LineSpan
    name_spans: tuple[LineSpan, ...] = ()

    def spans(self) -> tuple[LineSpan, ...]:
        return (self.parent_span, *self.name_spans)

    @property
    def parent(self) -> str:
        return self.parent_span.resolve(self.line)

    @property
    def names(self) -> list[str]:
        return [span.resolve(self.line) for span in self.name_spans]


class PlainLine(LineToken):
    """Any line without structural meaning, passed through untouched."""

    kind: Literal["plain"] = "plain"
    trimmed_span: LineSpan

    def spans(self) -> tuple[LineSpan, ...]:
        return (self.trimmed_span,)

    @property
    def trimmed(self) -> str:
        return self.trimmed_span.resolve(self.line)


class Block(BaseModel):
    """An inlined module: replaces its declaration line in the tree."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["block"] = "block"
    name: str = Field(..., min_length=1, description="Module name")
    is_public: bool = True
    children: tuple[Token, ...] = ()


Token = Annotated[
    SubmoduleDeclaration | SingleImport | MultiImport | Block | PlainLine,
    Field(discriminator="kind"),
]
TokenTree = tuple[Token, ...]

Block.model_rebuild()

TOKEN_TREE_ADAPTER: TypeAdapter[TokenTree] = TypeAdapter(TokenTree)


def count_lines(tokens: TokenTree) -> int:
    """Count the source lines held by a tree, block markers excluded."""
    total = 0
    for token in tokens:
        if isinstance(token, Block):
            total += count_lines(token.children)
        else:
            total += 1
    return total


def count_blocks(tokens: TokenTree) -> int:
    """Count the inlined modules of a tree, nested ones included."""
    return sum(1 + count_blocks(token.children) for token in tokens if isinstance(token, Block))
