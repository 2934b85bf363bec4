"""Bundle a tree of Rust module files into a single source.

Loading starts from the entry module, classifies each of its lines and, for
every ``mod name;`` declaration, resolves and loads the child module
recursively. The declaration is replaced by a :class:`Block` holding the
child's tokens, so writing the tree back produces one file in which each
module appears as an inline ``mod name{ ... }`` block.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from bundle_rs.exceptions import BundleNotLoadedError, ModuleReadError, SubmoduleNotFoundError
from bundle_rs.logging import logger
from bundle_rs.resolver import join_relative
from bundle_rs.syntax import classify_line
from bundle_rs.tokens import Block, SubmoduleDeclaration, count_blocks, count_lines
from bundle_rs.writer import render_tokens, write_tokens

if TYPE_CHECKING:
    from typing import TextIO

    from bundle_rs.resolver import ModuleResolver
    from bundle_rs.tokens import Token, TokenTree


class Bundle:
    """A module tree rooted at ``entry_module``, loaded through ``resolver``.

    Args:
        entry_module: Name of the root module, resolved with an empty path context.
        resolver: Where module sources come from.
        preserve_visibility: Keep each declaration's own ``pub`` flag on its
            block. By default every inlined block is written ``pub``.
    """

    def __init__(
        self,
        entry_module: str,
        resolver: ModuleResolver,
        *,
        preserve_visibility: bool = False,
    ) -> None:
        self.entry_module = entry_module
        self.resolver = resolver
        self.preserve_visibility = preserve_visibility
        self._tokens: TokenTree | None = None

    @property
    def is_loaded(self) -> bool:
        return self._tokens is not None

    @property
    def tokens(self) -> TokenTree:
        """The loaded token tree.

        Raises:
            BundleNotLoadedError: if :meth:`load` has not succeeded yet.
        """
        if self._tokens is None:
            raise BundleNotLoadedError(entry_module=self.entry_module)
        return self._tokens

    def load(self) -> None:
        """Load the whole module tree.

        The tree is only stored once every module has been read; on failure the
        bundle keeps whatever it held before.

        Raises:
            SubmoduleNotFoundError: if a declared module cannot be resolved.
            ModuleReadError: if a module cannot be opened, read or decoded.
        """
        lines = self._read_module("", self.entry_module)
        tokens = self._load_lines("", lines)
        self._tokens = tokens
        logger.info(
            "bundle_loaded",
            entry=self.entry_module,
            modules=count_blocks(tokens) + 1,
            lines=count_lines(tokens),
        )

    def write(self, sink: TextIO) -> None:
        """Write the bundled source to ``sink``.

        Raises:
            BundleNotLoadedError: if the bundle was never loaded.
            BundleWriteError: if the sink fails.
        """
        write_tokens(sink, self.tokens)

    def render(self) -> str:
        """Return the bundled source as a string."""
        return render_tokens(self.tokens)

    def _read_module(self, relative_path: str, module_name: str) -> list[str]:
        logger.debug("loading_module", relative_path=relative_path, module=module_name)
        try:
            stream = self.resolver.open_submodule(relative_path, module_name)
        except FileNotFoundError as e:
            raise SubmoduleNotFoundError(relative_path=relative_path, module_name=module_name) from e
        except OSError as e:
            raise ModuleReadError(relative_path=relative_path, module_name=module_name, reason=str(e)) from e

        try:
            # lines end at "\n" only; a lone "\r" stays part of the line
            with io.TextIOWrapper(stream, encoding="utf-8", newline="\n") as text:
                return [line.removesuffix("\n").removesuffix("\r") for line in text]
        except (OSError, UnicodeDecodeError) as e:
            raise ModuleReadError(relative_path=relative_path, module_name=module_name, reason=str(e)) from e

    def _load_lines(self, relative_path: str, lines: list[str]) -> TokenTree:
        result: list[Token] = []
        for line in lines:
            token = classify_line(line)
            if not isinstance(token, SubmoduleDeclaration):
                result.append(token)
                continue

            name = token.name
            child_lines = self._read_module(relative_path, name)
            children = self._load_lines(join_relative(relative_path, name), child_lines)
            result.append(
                Block(
                    name=name,
                    is_public=token.is_public if self.preserve_visibility else True,
                    children=children,
                ),
            )
        return tuple(result)
