"""Data structures shared by the extractor, the scanner and the CLI."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple, Union


class AmdForm(Enum):
    """The AMD shape of a define/require call site."""

    NAMED = "named"  # define("name", [deps], function(...) {})
    DEPS = "deps"  # define([deps], function(...) {})
    DRIVER = "driver"  # require([deps], function(...) {})
    FACTORY = "factory"  # define(function(require) {})
    REM = "rem"  # define(function(require, exports, module) {})
    NODEPS = "nodeps"  # define({})
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ExtractOptions:
    """Options accepted by the dependency extractor."""

    skip_lazy_loaded: bool = False

    @classmethod
    def coerce(
        cls, options: Union["ExtractOptions", Mapping[str, Any], None]
    ) -> "ExtractOptions":
        """Build options from None, an ExtractOptions, or a plain mapping."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            if "skip_lazy_loaded" in options:
                flag = options["skip_lazy_loaded"]
            else:
                flag = options.get("skipLazyLoaded", False)
            return cls(skip_lazy_loaded=bool(flag))
        raise TypeError(
            f"options must be ExtractOptions or a mapping, not {type(options).__name__}"
        )


@dataclass(frozen=True)
class FileDependencies:
    """Dependencies extracted from one source file."""

    source_file: str
    dependencies: Tuple[str, ...]


@dataclass(frozen=True)
class ScanResult:
    """Results of scanning a batch of files."""

    files: List[FileDependencies]
    scan_duration_ms: int
    errors: Optional[List[str]] = field(default=None)

    def __post_init__(self):
        if self.errors is None:
            object.__setattr__(self, "errors", [])

    @property
    def total_dependencies(self) -> int:
        """Number of dependencies across all scanned files."""
        return sum(len(f.dependencies) for f in self.files)

    @property
    def unique_dependencies(self) -> List[str]:
        """Every dependency seen in the batch, first occurrence order."""
        return list(dict.fromkeys(d for f in self.files for d in f.dependencies))

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
