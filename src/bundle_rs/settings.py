from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from bundle_rs.config import (
    CONFIG_KEYS,
    DEFAULT_ENTRY_MODULE,
    DEFAULT_SEARCH_ROOT,
    ENV_PREFIX,
    LIST_SEPARATOR,
    OutputFormat,
    load_config_file,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_FILE = find_dotenv(usecwd=True)


class Settings(BaseModel):
    """Configuration settings for the bundle_rs module."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    entry: str = Field(default=DEFAULT_ENTRY_MODULE, min_length=1, description="Entry module name.")
    search_roots: list[Path] = Field(
        default_factory=lambda: [Path(DEFAULT_SEARCH_ROOT)],
        min_length=1,
        description="Directories searched for modules, in order.",
    )
    output: Path | None = Field(default=None, description="Output file; stdout when unset.")
    format: OutputFormat = Field(default=OutputFormat.RUST, description="Bundle source or token tree.")
    preserve_visibility: bool = Field(
        default=False,
        description="Keep the declared visibility of inlined modules instead of forcing pub.",
    )
    log_file: str = Field(default="", description="Log file path.")
    verbose: bool = Field(default=False, description="Log at debug level.")

    @field_validator("search_roots", mode="before")
    @classmethod
    def split_search_roots(cls, value: Any) -> Any:  # noqa: ANN401
        """Accept a comma separated string, as found in environment variables."""
        if isinstance(value, str):
            return [part.strip() for part in value.split(LIST_SEPARATOR) if part.strip()]
        return value

    @field_validator("output", mode="before")
    @classmethod
    def empty_output_is_stdout(cls, value: Any) -> Any:  # noqa: ANN401
        if value == "":
            return None
        return value


def env_values(env_file: str | None = ENV_FILE) -> dict[str, str]:
    """Collect ``BUNDLE_RS_*`` settings from a ``.env`` file and the environment.

    The process environment wins over the file.

    Args:
        env_file (str | None): the ``.env`` file to read, None to skip it

    Returns:
        dict[str, str]: settings keyed by field name
    """
    values: dict[str, str | None] = dict(dotenv_values(env_file)) if env_file else {}
    values.update(os.environ)
    out: dict[str, str] = {}
    for key, value in values.items():
        if not key.startswith(ENV_PREFIX) or value is None:
            continue
        name = key.removeprefix(ENV_PREFIX).lower()
        if name in CONFIG_KEYS:
            out[name] = value
    return out


def load_settings(
    overrides: Mapping[str, Any] | None = None,
    *,
    config_file: Path | None = None,
    env_file: str | None = ENV_FILE,
) -> Settings:
    """Build settings from every source, lowest priority first.

    Defaults, then environment (``.env`` and process), then the YAML config
    file, then ``overrides`` (the command line). None overrides are ignored so
    unset flags do not mask lower layers.

    Args:
        overrides (Mapping[str, Any] | None): explicit values, typically CLI flags
        config_file (Path | None): optional YAML config file
        env_file (str | None): ``.env`` file to read, None to skip it

    Returns:
        Settings: the validated settings
    """
    merged: dict[str, Any] = dict(env_values(env_file))
    if config_file is not None:
        merged.update(load_config_file(config_file))
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return Settings(**merged)
