"""Module resolution: map a module name and its path context to a byte stream.

The loader only depends on :class:`ModuleResolver`; any object with a matching
``open_submodule`` method can be used (filesystem, in-memory table, network...).
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol, runtime_checkable

from bundle_rs.config import MODULE_DEFAULT_ENTRY, MODULE_FILE_EXTENSION
from bundle_rs.exceptions import SubmoduleNotFoundError
from bundle_rs.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence


@runtime_checkable
class ModuleResolver(Protocol):
    """Capability to open the source of a module.

    ``relative_path`` is the accumulated path of the enclosing modules, ``""``
    for the entry module and ``"/a/b"`` for a module declared inside ``a::b``.
    """

    def open_submodule(self, relative_path: str, module_name: str) -> BinaryIO:
        """Open the module source for reading.

        Raises:
            SubmoduleNotFoundError: if no source exists for the module.
        """
        ...


def join_relative(relative_path: str, module_name: str) -> str:
    """Extend a resolution context with one more module level."""
    return f"{relative_path}/{module_name}"


class FileSystemResolver:
    """Resolve modules against an ordered list of search roots.

    For each root, ``<root><relative_path>/<name>.rs`` is tried before
    ``<root><relative_path>/<name>/mod.rs``; the first existing file wins, roots
    being visited in the order they were given.
    """

    def __init__(self, search_roots: Iterable[str | Path]) -> None:
        self.search_roots: list[Path] = [Path(root) for root in search_roots]

    def candidates(self, relative_path: str, module_name: str) -> list[Path]:
        """List the candidate files for a module, in lookup order.

        Args:
            relative_path (str): the resolution context, e.g. ``"/game"``
            module_name (str): the declared module name

        Returns:
            list[Path]: every candidate path, in the order they are tried
        """
        parts = [part for part in relative_path.split("/") if part]
        out: list[Path] = []
        for root in self.search_roots:
            base = root.joinpath(*parts)
            out.append(base / f"{module_name}{MODULE_FILE_EXTENSION}")
            out.append(base / module_name / MODULE_DEFAULT_ENTRY)
        return out

    def find(self, relative_path: str, module_name: str) -> Path:
        """Return the first existing candidate file for a module.

        Raises:
            SubmoduleNotFoundError: if none of the candidates is a file.
        """
        candidates = self.candidates(relative_path, module_name)
        logger.debug(
            "resolving_module",
            relative_path=relative_path,
            module=module_name,
            candidates=[str(c) for c in candidates],
        )
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise SubmoduleNotFoundError(
            relative_path=relative_path,
            module_name=module_name,
            candidates=tuple(str(c) for c in candidates),
        )

    def open_submodule(self, relative_path: str, module_name: str) -> BinaryIO:
        return self.find(relative_path, module_name).open("rb")


class InMemoryResolver:
    """Resolve modules from a mapping of sources, mostly for tests and embedding.

    A key may be a bare module name (``"game"``) or a qualified one including
    the resolution context (``"/game/inner"``); the qualified key is preferred
    when both exist.
    """

    def __init__(self, sources: Mapping[str, str | bytes] | None = None) -> None:
        self.sources: dict[str, bytes] = {}
        for key, content in (sources or {}).items():
            self.insert(key, content)

    def insert(self, name: str, content: str | bytes) -> None:
        """Register the source of a module."""
        self.sources[name] = content.encode("utf-8") if isinstance(content, str) else content

    def open_submodule(self, relative_path: str, module_name: str) -> BinaryIO:
        keys: Sequence[str] = (join_relative(relative_path, module_name), module_name)
        for key in keys:
            if key in self.sources:
                return io.BytesIO(self.sources[key])
        raise SubmoduleNotFoundError(
            relative_path=relative_path,
            module_name=module_name,
            candidates=tuple(keys),
        )
