"""Line classifier for Rust module sources.

Classification is lexical: each line is matched against a few precompiled
patterns in a fixed order and the first match wins. Braces or semicolons inside
string literals or comments are not understood; such lines are classified on
their surface text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from bundle_rs.tokens import LineSpan, MultiImport, PlainLine, SingleImport, SubmoduleDeclaration

if TYPE_CHECKING:
    from collections.abc import Iterator

    from bundle_rs.tokens import LineToken

SUBMODULE_PATTERN = re.compile(r"^\s*(?:(?P<visibility>pub(?:\([^)]*\))?)\s+)?mod\s+(?P<name>\w+)\s*;")
SINGLE_IMPORT_PATTERN = re.compile(r"^\s*use\s+(?P<path>(?:\w+::)*\w+)\s*;")
MULTI_IMPORT_PATTERN = re.compile(r"^\s*use\s+(?P<parent>(?:\w+::)*\w+)::\{(?P<names>.+)\}\s*;")
TRIMMED_PATTERN = re.compile(r"^\s*(?P<body>.*?)\s*\Z", re.DOTALL)

NAME_SEPARATOR = ","


def span_of(match: re.Match[str], group: str) -> LineSpan:
    """Return the span covered by a named group of ``match``."""
    start, end = match.span(group)
    return LineSpan(start=start, length=end - start)


def tokenize_spans(text: str) -> Iterator[LineSpan]:
    """Split a comma separated name list into spans relative to ``text``.

    Spaces are skipped while a field is still empty, so ``"a,  bb"`` yields the
    spans of ``"a"`` and ``"bb"``; any other character, trailing spaces
    included, belongs to the field. Two adjacent commas produce an empty span,
    a trailing comma does not.

    Args:
        text (str): the content of a brace group, braces excluded

    Yields:
        Iterator[LineSpan]: one span per field, in order
    """
    start = 0
    size = 0
    while True:
        pos = start + size
        if pos >= len(text):
            if size > 0:
                yield LineSpan(start=start, length=size)
            return
        char = text[pos]
        if char == NAME_SEPARATOR:
            yield LineSpan(start=start, length=size)
            start = pos + 1
            size = 0
        elif char == " " and size == 0:
            start += 1
        else:
            size += 1


def classify_line(line: str) -> LineToken:
    """Classify a single source line.

    Never fails: a line matching none of the structural patterns becomes a
    :class:`PlainLine`.

    Args:
        line (str): the line text, without its terminator

    Returns:
        LineToken: the token owning ``line``
    """
    if match := SUBMODULE_PATTERN.match(line):
        return SubmoduleDeclaration(
            line=line,
            name_span=span_of(match, "name"),
            is_public=match.group("visibility") is not None,
        )

    if match := SINGLE_IMPORT_PATTERN.match(line):
        return SingleImport(line=line, name_span=span_of(match, "path"))

    if match := MULTI_IMPORT_PATTERN.match(line):
        names_start = match.start("names")
        names = tuple(span.shifted(names_start) for span in tokenize_spans(match.group("names")))
        return MultiImport(line=line, parent_span=span_of(match, "parent"), name_spans=names)

    match = TRIMMED_PATTERN.match(line)
    if match is None or not match.group("body"):
        return PlainLine(line=line, trimmed_span=LineSpan(start=0, length=0))
    return PlainLine(line=line, trimmed_span=span_of(match, "body"))
