from __future__ import annotations

import io
from typing import TYPE_CHECKING

from bundle_rs.exceptions import BundleWriteError
from bundle_rs.tokens import TOKEN_TREE_ADAPTER, Block

if TYPE_CHECKING:
    from typing import TextIO

    from bundle_rs.tokens import TokenTree

LINE_TERMINATOR = "\n"
BLOCK_CLOSE = "}"


def block_header(block: Block) -> str:
    """Return the opening line of an inlined module, e.g. ``pub mod game{``."""
    visibility = "pub " if block.is_public else ""
    return f"{visibility}mod {block.name}{{"


def _write_tree(sink: TextIO, tokens: TokenTree) -> None:
    for token in tokens:
        if isinstance(token, Block):
            sink.write(block_header(token) + LINE_TERMINATOR)
            _write_tree(sink, token.children)
            sink.write(BLOCK_CLOSE + LINE_TERMINATOR)
        else:
            # spans are never used here: the original text is emitted as is
            sink.write(token.line + LINE_TERMINATOR)


def write_tokens(sink: TextIO, tokens: TokenTree) -> None:
    """Serialize a token tree to a text sink.

    Lines are written verbatim, one terminator each, in tree order. Blocks get
    an opening ``[pub ]mod <name>{`` line and a closing ``}`` line around their
    children; nested content is not re-indented. The whole text is assembled in
    memory first and handed to the sink in a single write, then flushed.

    Args:
        sink (TextIO): any writable text stream
        tokens (TokenTree): the tree to serialize

    Raises:
        BundleWriteError: if the sink fails; whatever was already written stays.
    """
    buffer = io.StringIO()
    _write_tree(buffer, tokens)
    try:
        sink.write(buffer.getvalue())
        sink.flush()
    except OSError as e:
        raise BundleWriteError(reason=str(e)) from e


def render_tokens(tokens: TokenTree) -> str:
    """Serialize a token tree to a string."""
    out = io.StringIO()
    write_tokens(out, tokens)
    return out.getvalue()


def dump_tokens_json(tokens: TokenTree) -> str:
    """Dump a token tree, spans included, as indented JSON."""
    return TOKEN_TREE_ADAPTER.dump_json(tokens, indent=2).decode("utf-8") + LINE_TERMINATOR
