"""Semantic versions as used by Go modules and Go toolchain tags.

Versions handed to the helpers here may carry a "v" prefix, a "go"
prefix or no prefix at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Iterable

from .osv import Range, RangeEvent, RangeType

_NUM = r"(0|[1-9][0-9]*)"
_PRERELEASE_IDENT = r"(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_BUILD_IDENT = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    rf"v{_NUM}(?:\.{_NUM}(?:\.{_NUM}"
    rf"(-{_PRERELEASE_IDENT}(?:\.{_PRERELEASE_IDENT})*)?"
    rf"(\+{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*)?)?)?"
)

# Go release tags: major.minor, optional patch, optional beta/rc/-pre number.
_TAG_RE = re.compile(r"go([0-9]+\.[0-9]+)(\.[0-9]+|)((beta|rc|-pre)([0-9]+))?")


@dataclass(frozen=True)
class _Parsed:
    major: str
    minor: str
    patch: str
    short: str
    prerelease: str
    build: str


def _parse(v: str) -> _Parsed | None:
    match = _SEMVER_RE.fullmatch(v)
    if match is None:
        return None
    major, minor, patch = match[1], match[2], match[3]
    short = ""
    if minor is None:
        minor, patch, short = "0", "0", ".0.0"
    elif patch is None:
        patch, short = "0", ".0"
    return _Parsed(major, minor, patch, short, match[4] or "", match[5] or "")


def is_valid(v: str) -> bool:
    """Report whether v is a valid "v"-prefixed semantic version."""
    return _parse(v) is not None


def canonical(v: str) -> str:
    """Return the canonical form of v, or "" if v is invalid.

    Missing minor and patch numbers become ".0" and build metadata is dropped.
    """
    parsed = _parse(v)
    if parsed is None:
        return ""
    if parsed.build:
        return v[: -len(parsed.build)]
    return v + parsed.short


def prerelease(v: str) -> str:
    """Return the prerelease suffix of v, including the leading "-"."""
    parsed = _parse(v)
    return parsed.prerelease if parsed else ""


def major_minor(v: str) -> str:
    """Return the "vMAJOR.MINOR" prefix of v, or "" if v is invalid."""
    parsed = _parse(v)
    if parsed is None:
        return ""
    i = 1 + len(parsed.major)
    j = i + 1 + len(parsed.minor)
    if j <= len(v) and v[i] == "." and v[i + 1 : j] == parsed.minor:
        return v[:j]
    return v[:i] + "." + parsed.minor


def _compare_int(x: str, y: str) -> int:
    key_x, key_y = (len(x), x), (len(y), y)
    return (key_x > key_y) - (key_x < key_y)


def _is_num(s: str) -> bool:
    return s.isascii() and s.isdigit()


def _compare_prerelease(x: str, y: str) -> int:
    if x == y:
        return 0
    if not x:
        return 1
    if not y:
        return -1
    xs, ys = x[1:].split("."), y[1:].split(".")
    for dx, dy in zip(xs, ys):
        if dx == dy:
            continue
        nx, ny = _is_num(dx), _is_num(dy)
        if nx != ny:
            return -1 if nx else 1
        if nx and len(dx) != len(dy):
            return -1 if len(dx) < len(dy) else 1
        return -1 if dx < dy else 1
    return -1 if len(xs) < len(ys) else 1


def compare(v: str, w: str) -> int:
    """Compare two "v"-prefixed versions, returning -1, 0 or 1.

    An invalid version sorts before every valid one; two invalid
    versions are equal.
    """
    pv, pw = _parse(v), _parse(w)
    if pv is None and pw is None:
        return 0
    if pv is None:
        return -1
    if pw is None:
        return 1
    for x, y in ((pv.major, pw.major), (pv.minor, pw.minor), (pv.patch, pw.patch)):
        result = _compare_int(x, y)
        if result:
            return result
    return _compare_prerelease(pv.prerelease, pw.prerelease)


def _add_semver_prefix(s: str) -> str:
    if not s.startswith("v") and not s.startswith("go"):
        return "v" + s
    return s


def _remove_semver_prefix(s: str) -> str:
    s = s.removeprefix("v")
    return s.removeprefix("go")


def canonicalize_semver_prefix(s: str) -> str:
    """Rewrite a bare, "v"- or "go"-prefixed version with a "v" prefix."""
    return _add_semver_prefix(_remove_semver_prefix(s))


def less(v1: str, v2: str) -> bool:
    """Report whether v1 < v2, whatever prefix either carries."""
    return compare(canonicalize_semver_prefix(v1), canonicalize_semver_prefix(v2)) < 0


def valid(v: str) -> bool:
    """Report whether v is valid semver with a "v", "go" or no prefix."""
    return is_valid(canonicalize_semver_prefix(v))


def go_tag_to_semver(tag: str) -> str:
    """Convert a Go release tag such as "go1.20rc1" to semver, or "" if it is not one."""
    fields = tag.split()
    if not fields:
        return ""
    tag = fields[0]
    if tag == "go1":
        return "v1.0.0"
    if tag == "go1.0":
        return ""
    match = _TAG_RE.fullmatch(tag)
    if match is None:
        return ""
    version = "v" + match[1] + (match[2] or ".0")
    if match[3]:
        if not match[4].startswith("-"):
            version += "-"
        version += match[4] + "." + match[5]
    return version


def affects(ranges: Iterable[Range], v: str) -> bool:
    """Report whether version v falls in any of the semver ranges.

    With no ranges, or no semver ranges among them, every version is affected.
    """
    semver_range_present = False
    for version_range in ranges:
        if version_range.type != RangeType.SEMVER:
            continue
        semver_range_present = True
        if contains_semver(version_range, v):
            return True
    return not semver_range_present


def _event_version(event: RangeEvent) -> str:
    return event.fixed or event.introduced


def _event_order(a: RangeEvent, b: RangeEvent) -> int:
    a_start, b_start = a.introduced == "0", b.introduced == "0"
    if a_start or b_start:
        return int(b_start) - int(a_start)
    return compare(
        canonicalize_semver_prefix(_event_version(a)),
        canonicalize_semver_prefix(_event_version(b)),
    )


def contains_semver(version_range: Range, v: str) -> bool:
    """Report whether v lies in the range, read as left-closed, right-open intervals.

    A range that is not a semver range contains nothing; a semver range
    without events contains everything.
    """
    if version_range.type != RangeType.SEMVER:
        return False
    if not version_range.events:
        return True
    v = canonicalize_semver_prefix(v)
    affected = False
    for event in sorted(version_range.events, key=cmp_to_key(_event_order)):
        if not affected and event.introduced:
            affected = event.introduced == "0" or not less(v, event.introduced)
        elif affected and event.fixed:
            affected = less(v, event.fixed)
    return affected


def non_superseded_fix(ranges: Iterable[Range]) -> str:
    """Return the latest fix not superseded by a later introduction, or ""."""
    latest_fixed = ""
    for version_range in ranges:
        if version_range.type != RangeType.SEMVER:
            continue
        for event in version_range.events:
            if event.fixed and less(latest_fixed, event.fixed):
                latest_fixed = event.fixed
        # A reintroduction after the latest fix means there is no fix.
        if any(
            e.introduced and e.introduced != "0" and less(latest_fixed, e.introduced)
            for e in version_range.events
        ):
            latest_fixed = ""
    return latest_fixed