from dataclasses import dataclass, field
from pathlib import Path


def _module_path(relative_path: str, module_name: str) -> str:
    return f"{relative_path}/{module_name}" if relative_path else module_name


@dataclass(frozen=True)
class BundleError(Exception):
    """Base exception for errors in the bundle_rs module."""

    def __str__(self) -> str:
        return getattr(self, "message", self.__class__.__name__)


@dataclass(frozen=True)
class SubmoduleNotFoundError(BundleError):
    """Raised when a declared module cannot be located by the resolver."""

    relative_path: str
    module_name: str
    candidates: tuple[str, ...] = field(default=())

    @property
    def message(self) -> str:
        msg = f"Module {_module_path(self.relative_path, self.module_name)!r} not found"
        if self.candidates:
            msg += f" (tried: {', '.join(self.candidates)})"
        return msg


@dataclass(frozen=True)
class ModuleReadError(BundleError):
    """Raised when a resolved module stream cannot be opened, read or decoded."""

    relative_path: str
    module_name: str
    reason: str = ""

    @property
    def message(self) -> str:
        msg = f"Failed to read module {_module_path(self.relative_path, self.module_name)!r}"
        return f"{msg}: {self.reason}" if self.reason else msg


@dataclass(frozen=True)
class BundleWriteError(BundleError):
    """Raised when the output sink rejects a write."""

    reason: str = ""

    @property
    def message(self) -> str:
        return f"Failed to write bundle: {self.reason}" if self.reason else "Failed to write bundle"


@dataclass(frozen=True)
class BundleNotLoadedError(BundleError):
    """Raised when writing a bundle whose token tree was never loaded."""

    entry_module: str
    message: str = "The bundle must be loaded before it can be written."


@dataclass(frozen=True)
class ConfigFileError(BundleError):
    """Raised when a YAML configuration file is unreadable or malformed."""

    file: Path
    reason: str = ""

    @property
    def message(self) -> str:
        return f"Invalid configuration file {self.file}: {self.reason}"
