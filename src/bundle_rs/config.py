from __future__ import annotations

from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

import yaml

from bundle_rs.exceptions import ConfigFileError

if TYPE_CHECKING:
    from pathlib import Path

MODULE_FILE_EXTENSION = ".rs"
MODULE_DEFAULT_ENTRY = f"mod{MODULE_FILE_EXTENSION}"
DEFAULT_ENTRY_MODULE = "main"
DEFAULT_SEARCH_ROOT = "src"

ENV_PREFIX = "BUNDLE_RS_"
LIST_SEPARATOR = ","

CONFIG_KEYS = frozenset(
    {
        "entry",
        "search_roots",
        "output",
        "format",
        "preserve_visibility",
        "log_file",
        "verbose",
    },
)


class OutputFormat(StrEnum):
    """What the command line writes out."""

    RUST = auto()
    JSON = auto()


def load_config_file(path: Path) -> dict[str, Any]:
    """Load bundle settings from a YAML file.

    The file holds a single mapping whose keys are the ``Settings`` field
    names, e.g.::

        entry: main
        search_roots: [src, vendor]
        preserve_visibility: true

    Args:
        path (Path): the YAML file to read

    Raises:
        ConfigFileError: if the file cannot be read, is not valid YAML, is not a
            mapping or holds unknown keys.

    Returns:
        dict[str, Any]: the settings found in the file (empty for an empty file)
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigFileError(file=path, reason=str(e)) from e
    if not isinstance(data, dict):
        raise ConfigFileError(file=path, reason="expected a mapping at top level")
    unknown = sorted(str(key) for key in set(data) - CONFIG_KEYS)
    if unknown:
        raise ConfigFileError(file=path, reason=f"unknown keys: {', '.join(unknown)}")
    return data
