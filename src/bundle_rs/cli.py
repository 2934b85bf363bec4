"""
bundle_rs: inline a tree of Rust module files into a single source file.

Overview
--------
Starting from an entry module (``main`` by default), every ``mod name;``
declaration is replaced by an inline ``pub mod name{ ... }`` block holding the
content of the declared module, recursively. All other lines are copied
verbatim, so the result can be submitted wherever a single file is expected.

Modules are looked up in each search root as ``<name>.rs`` then
``<name>/mod.rs``, nested modules relative to their parent's directory.

Settings come from, lowest priority first: defaults, ``BUNDLE_RS_*``
environment variables (also read from a ``.env`` file), a YAML file given with
``--config``, then the command line flags.

Usage
-----
Run ``python -m bundle_rs.cli --help`` for full options. Common examples:
    - Bundle src/main.rs to stdout:
        uv run python -m bundle_rs.cli

    - Bundle with several search roots into a file:
        uv run python -m bundle_rs.cli --src src --src vendor --output bundle.rs

    - Inspect the classified token tree:
        uv run python -m bundle_rs.cli --format json --output tokens.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from bundle_rs import __version__
from bundle_rs.bundle import Bundle
from bundle_rs.config import OutputFormat
from bundle_rs.exceptions import BundleError
from bundle_rs.logging import logger, setup_logging
from bundle_rs.resolver import FileSystemResolver
from bundle_rs.settings import ENV_FILE, load_settings
from bundle_rs.writer import dump_tokens_json

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO

    from bundle_rs.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Every option defaults to None so that only flags given explicitly override
    the environment and the config file.

    Returns:
        argparse.ArgumentParser: the configured parser
    """
    p = argparse.ArgumentParser(
        prog="bundle-rs",
        description="Inline a tree of Rust modules into a single source file.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--entry", type=str, default=None, help="Entry module name (default: main).")
    p.add_argument(
        "--src",
        dest="search_roots",
        action="append",
        default=None,
        help="Search root (repeatable, searched in order; default: src).",
    )
    p.add_argument("--output", type=str, default=None, help="Output file (default: stdout).")
    p.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=None,
        help="Write the bundled source or the token tree as JSON.",
    )
    p.add_argument(
        "--preserve-visibility",
        action="store_true",
        default=None,
        help="Keep declared visibility of inlined modules instead of forcing pub.",
    )
    p.add_argument("--config", type=Path, default=None, help="YAML config file.")
    p.add_argument("--log-file", type=str, default=None, help="Log file path.")
    p.add_argument("--verbose", action="store_true", default=None, help="Log at debug level.")
    return p


def parse_args(argv: Sequence[str] | None = None, *, env_file: str | None = ENV_FILE) -> Settings:
    """Parse command line arguments into settings.

    Args:
        argv (Sequence[str] | None): arguments, ``sys.argv[1:]`` when None
        env_file (str | None): ``.env`` file to read, None to skip it

    Returns:
        Settings: the merged settings
    """
    args = vars(build_parser().parse_args(argv))
    config_file = args.pop("config")
    return load_settings(args, config_file=config_file, env_file=env_file)


def emit(bundle: Bundle, sink: TextIO, fmt: OutputFormat) -> None:
    if fmt == OutputFormat.JSON:
        sink.write(dump_tokens_json(bundle.tokens))
    else:
        bundle.write(sink)


def run(settings: Settings) -> int:
    """Load the bundle described by ``settings`` and write it out.

    The output file is only opened once loading succeeded.

    Args:
        settings (Settings): what to bundle and where to write it

    Returns:
        int: the process exit code
    """
    resolver = FileSystemResolver(settings.search_roots)
    bundle = Bundle(settings.entry, resolver, preserve_visibility=settings.preserve_visibility)
    try:
        bundle.load()
        if settings.output is None:
            emit(bundle, sys.stdout, settings.format)
        else:
            with settings.output.open("w", encoding="utf-8", newline="\n") as f:
                emit(bundle, f, settings.format)
    except (BundleError, OSError) as e:
        logger.error("bundle_failed", entry=settings.entry, error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    if settings.output is not None:
        print(f"Wrote {settings.output} format={settings.format}", file=sys.stderr)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    try:
        settings = parse_args(argv, env_file=ENV_FILE)
    except (BundleError, ValidationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    if settings.log_file or settings.verbose:
        setup_logging(
            settings.log_file or None,
            level=logging.DEBUG if settings.verbose else logging.INFO,
            force=True,
        )
    return run(settings)


if __name__ == "__main__":
    raise SystemExit(main())
