"""Inline a tree of Rust module files into a single source file."""

from bundle_rs.bundle import Bundle
from bundle_rs.exceptions import (
    BundleError,
    BundleNotLoadedError,
    BundleWriteError,
    ModuleReadError,
    SubmoduleNotFoundError,
)
from bundle_rs.resolver import FileSystemResolver, InMemoryResolver, ModuleResolver
from bundle_rs.syntax import classify_line, tokenize_spans

__version__ = "0.1.0"

__all__ = [
    "Bundle",
    "BundleError",
    "BundleNotLoadedError",
    "BundleWriteError",
    "FileSystemResolver",
    "InMemoryResolver",
    "ModuleReadError",
    "ModuleResolver",
    "SubmoduleNotFoundError",
    "__version__",
    "classify_line",
    "tokenize_spans",
]
