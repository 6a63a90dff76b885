"""Scan configuration, progress and findings exchanged while scanning."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .osv import GO_CMD_MODULE_PATH, GO_STD_MODULE_PATH
from .stdlib import semver_to_go_tag


class ScanLevel(str, Enum):
    """How deep a scan looks: required modules, imported packages or called symbols."""

    MODULE = "module"
    PACKAGE = "package"
    SYMBOL = "symbol"

    def want_symbols(self) -> bool:
        """Report whether the scan reaches down to symbols."""
        return self is ScanLevel.SYMBOL

    def want_packages(self) -> bool:
        """Report whether the scan reaches down to packages."""
        return self in (ScanLevel.PACKAGE, ScanLevel.SYMBOL)


@dataclass
class Position:
    """A position in a source file."""

    filename: str = ""
    offset: int = 0
    line: int = 0
    column: int = 0


@dataclass
class Frame:
    """One entry of a call stack, or the module or package a finding is in."""

    module: str = ""
    version: str = ""
    package: str = ""
    function: str = ""
    receiver: str = ""
    position: Position | None = None


@dataclass
class Finding:
    """A vulnerability found in the scanned code.

    The first frame of the trace is the vulnerable symbol, package or module.
    """

    osv: str = ""
    fixed_version: str = ""
    trace: list[Frame] = field(default_factory=list)


@dataclass
class Config:
    """Details of the scanner and the database used for a scan."""

    protocol_version: str = ""
    scanner_name: str = ""
    scanner_version: str = ""
    db: str = ""
    db_last_modified: datetime | None = None
    go_version: str = ""
    scan_level: ScanLevel | None = None


@dataclass
class Progress:
    """A progress message shown while scanning."""

    message: str = ""


def validate_findings(*args: Finding) -> None:
    """Raise ValueError unless every finding obeys the protocol rules."""
    for finding in args:
        if not finding.osv:
            raise ValueError("invalid finding: all findings must have an associated OSV")
        if not finding.trace:
            raise ValueError(
                "invalid finding: all callstacks must have at least one frame"
            )
        for frame in finding.trace:
            if frame.version and not frame.module:
                raise ValueError(
                    "invalid finding: if Frame.Version is set, Frame.Module must also be"
                )
            if frame.package and not frame.module:
                raise ValueError(
                    "invalid finding: if Frame.Package is set, Frame.Module must also be"
                )
            if frame.function and not frame.package:
                raise ValueError(
                    "invalid finding: if Frame.Function is set, Frame.Package must also be"
                )


def module_version_string(module_path: str, version: str) -> str:
    """Return version as shown for module_path, using Go tags for the toolchain."""
    if not version:
        return ""
    if module_path in (GO_STD_MODULE_PATH, GO_CMD_MODULE_PATH):
        return semver_to_go_tag(version)
    return version