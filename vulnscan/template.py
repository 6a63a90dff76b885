"""Grouping and formatting of findings for human-readable reports."""

from __future__ import annotations

import posixpath
import re
import unicodedata
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, Iterable, Sequence

from .model import Finding, Frame, Position
from .osv import DatabaseSpecific, Entry
from .paths import abs_rel_shorter


@dataclass
class FindingSummary:
    """A finding together with its compact trace and its vulnerability entry."""

    finding: Finding
    compact: str = ""
    osv: Entry | None = None

    @property
    def trace(self) -> list[Frame]:
        """The call stack of the finding, vulnerable frame first."""
        return self.finding.trace

    @property
    def fixed_version(self) -> str:
        """The version that fixes the finding, if any."""
        return self.finding.fixed_version


@dataclass
class SummaryCounters:
    """Counts reported in the closing summary of a scan."""

    vulnerabilities_called: int = 0
    modules_called: int = 0
    vulnerabilities_imported: int = 0
    vulnerabilities_required: int = 0
    stdlib_called: bool = False


def fixup_findings(osvs: Sequence[Entry], findings: Iterable[FindingSummary]) -> None:
    """Attach to each finding the entry its OSV identifier names."""
    for summary in findings:
        summary.osv = get_osv(osvs, summary.finding.osv)


def _osv_id(summary: FindingSummary) -> str:
    return summary.osv.id if summary.osv is not None else summary.finding.osv


def _compare_text(left: str, right: str) -> int:
    return (left > right) - (left < right)


def group_by(
    findings: list[FindingSummary],
    compare: Callable[[FindingSummary, FindingSummary], int],
) -> list[list[FindingSummary]]:
    """Sort findings stably by compare, in place, and split them into runs of equals."""
    if not findings:
        return []
    if len(findings) == 1:
        return [list(findings)]
    findings.sort(key=cmp_to_key(compare))
    groups = [[findings[0]]]
    for item in findings[1:]:
        if compare(groups[-1][0], item) != 0:
            groups.append([item])
        else:
            groups[-1].append(item)
    return groups


def group_by_vuln(findings: list[FindingSummary]) -> list[list[FindingSummary]]:
    """Group findings by vulnerability, highest identifier first."""
    return group_by(findings, lambda left, right: -_compare_text(_osv_id(left), _osv_id(right)))


def group_by_module(findings: list[FindingSummary]) -> list[list[FindingSummary]]:
    """Group findings by the module of their vulnerable frame."""
    return group_by(
        findings,
        lambda left, right: _compare_text(left.trace[0].module, right.trace[0].module),
    )


def is_required(findings: Iterable[FindingSummary]) -> bool:
    """Report whether any finding names a module."""
    return any(f.trace[0].module for f in findings)


def is_imported(findings: Iterable[FindingSummary]) -> bool:
    """Report whether any finding names a package."""
    return any(f.trace[0].package for f in findings)


def is_called(findings: Iterable[FindingSummary]) -> bool:
    """Report whether any finding names a function."""
    return any(f.trace[0].function for f in findings)


def get_osv(osvs: Iterable[Entry], osv_id: str) -> Entry:
    """Return the entry with the given identifier, or a bare placeholder entry."""
    for entry in osvs:
        if entry.id == osv_id:
            return entry
    return Entry(id=osv_id, database_specific=DatabaseSpecific())


def new_finding_summary(finding: Finding) -> FindingSummary:
    """Wrap a finding with its compact trace."""
    return FindingSummary(finding=finding, compact=compact_trace(finding))


def platforms(mod: str, entry: Entry | None) -> list[str]:
    """Return the sorted GOOS, GOARCH or GOOS/GOARCH values the entry is limited to.

    With an empty mod every affected module is considered. An empty list
    means the vulnerability affects every platform.
    """
    if entry is None:
        return []
    found: set[str] = set()
    for affected in entry.affected:
        if mod and affected.module.path != mod:
            continue
        for package in affected.ecosystem_specific.packages:
            for goos in package.goos:
                if not package.goarch:
                    found.add(goos)
                else:
                    found.update(f"{goos}/{arch}" for arch in package.goarch)
            if not package.goos:
                found.update(package.goarch)
    return sorted(found)


def pos_to_string(pos: Position | None) -> str:
    """Format a position as file:line[:column], or "" if it has no line."""
    if pos is None or pos.line <= 0:
        return ""
    text = abs_rel_shorter(pos.filename)
    if text:
        text += ":"
    text += str(pos.line)
    if pos.column != 0:
        text += f":{pos.column}"
    return text


def symbol(frame: Frame, short: bool) -> str:
    """Return the qualified name of the frame's function, or "" if it has none."""
    if not frame.function:
        return ""
    parts = []
    if frame.package:
        parts.append(import_path_to_assumed_name(frame.package) if short else frame.package)
    if frame.receiver:
        parts.append(frame.receiver.removeprefix("*"))
    parts.append(frame.function.split("$")[0])
    return ".".join(parts)


def compact_trace(finding: Finding) -> str:
    """Return a short description of the finding's call stack.

    It shows where the top module calls out to other code, the next call
    after that if any, and the vulnerable symbol.
    """
    trace = finding.trace
    if not trace:
        return ""
    top_module = trace[-1].module
    i_top = next(i for i, frame in enumerate(trace) if frame.module == top_module)
    if i_top == 0:
        # Everything is in one module: start from the entry point.
        i_top = len(trace) - 1

    parts = []
    top_pos = pos_to_string(trace[i_top].position)
    if top_pos:
        parts.append(top_pos + ": ")
    if i_top > 0:
        parts.append(symbol(trace[i_top], True) + " calls ")
    if i_top > 1:
        which = ", which eventually calls " if i_top > 2 else ", which calls "
        parts.append(symbol(trace[i_top - 1], True) + which)
    parts.append(symbol(trace[0], True))
    return "".join(parts)


def _not_identifier(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    category = unicodedata.category(ch)
    return not (category.startswith("L") or category == "Nd")


def _path_base(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def _path_dir(path: str) -> str:
    return posixpath.normpath(posixpath.dirname(path))


_VERSION_SUFFIX_RE = re.compile(r"[+-]?[0-9]+")


def import_path_to_assumed_name(import_path: str) -> str:
    """Return the name a package with this import path is naturally imported as."""
    base = _path_base(import_path)
    if base.startswith("v") and _VERSION_SUFFIX_RE.fullmatch(base[1:]):
        parent = _path_dir(import_path)
        if parent != ".":
            base = _path_base(parent)
    base = base.removeprefix("go-")
    for i, ch in enumerate(base):
        if _not_identifier(ch):
            return base[:i]
    return base