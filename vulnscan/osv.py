"""Vulnerability entries in the OSV format used by the Go vulnerability database.

Only the subset of the OSV schema published by that database is modelled:
semantic-version ranges, the Go ecosystem and its ecosystem-specific fields.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping, TypeVar


class RangeType(str, Enum):
    """How the versions of a range are to be interpreted."""

    SEMVER = "SEMVER"


class Ecosystem(str, Enum):
    """The library ecosystem of an affected module."""

    GO = "Go"


# Pseudo-module paths for the standard library and the go command.
GO_STD_MODULE_PATH = "stdlib"
GO_CMD_MODULE_PATH = "toolchain"


class ReferenceType(str, Enum):
    """The kind of link a reference points to."""

    ADVISORY = "ADVISORY"
    ARTICLE = "ARTICLE"
    REPORT = "REPORT"
    FIX = "FIX"
    PACKAGE = "PACKAGE"
    EVIDENCE = "EVIDENCE"
    WEB = "WEB"


@dataclass
class Module:
    """The Go module containing a vulnerability ("package" in OSV)."""

    path: str
    ecosystem: str = Ecosystem.GO


@dataclass
class RangeEvent:
    """A version that introduces or fixes a vulnerability.

    Exactly one of the two fields is expected to be set. An introduced
    version of "0" stands for the beginning of time.
    """

    introduced: str = ""
    fixed: str = ""


@dataclass
class Range:
    """Affected versions of a module, described by a list of events."""

    type: str = RangeType.SEMVER
    events: list[RangeEvent] = field(default_factory=list)


@dataclass
class Reference:
    """A link to more information about a vulnerability."""

    type: str
    url: str


@dataclass
class Package:
    """An affected package within a module."""

    path: str = ""
    goos: list[str] = field(default_factory=list)
    goarch: list[str] = field(default_factory=list)
    symbols: list[str] = field(default_factory=list)


@dataclass
class EcosystemSpecific:
    """Go-specific details about an affected module."""

    packages: list[Package] = field(default_factory=list)


@dataclass
class Affected:
    """A module affected by a vulnerability."""

    module: Module
    ranges: list[Range] = field(default_factory=list)
    ecosystem_specific: EcosystemSpecific = field(default_factory=EcosystemSpecific)


@dataclass
class Credit:
    """Someone credited in the life cycle of a vulnerability."""

    name: str


@dataclass
class DatabaseSpecific:
    """Go vulnerability database details of an entry."""

    url: str = ""


@dataclass
class Entry:
    """A vulnerability in the Go OSV format."""

    id: str
    modified: datetime | None = None
    published: datetime | None = None
    withdrawn: datetime | None = None
    aliases: list[str] = field(default_factory=list)
    summary: str = ""
    details: str = ""
    affected: list[Affected] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)
    credits: list[Credit] = field(default_factory=list)
    database_specific: DatabaseSpecific | None = None
    schema_version: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the entry as JSON-ready data, omitting empty optional fields."""
        data: dict[str, Any] = {}
        if self.schema_version:
            data["schema_version"] = self.schema_version
        data["id"] = self.id
        for key in ("modified", "published", "withdrawn"):
            value = getattr(self, key)
            if value is not None:
                data[key] = _format_time(value)
        if self.aliases:
            data["aliases"] = list(self.aliases)
        if self.summary:
            data["summary"] = self.summary
        data["details"] = self.details
        data["affected"] = [_affected_to_dict(a) for a in self.affected]
        if self.references:
            data["references"] = [
                {"type": _text(r.type), "url": r.url} for r in self.references
            ]
        if self.credits:
            data["credits"] = [{"name": c.name} for c in self.credits]
        if self.database_specific is not None:
            specific: dict[str, Any] = {}
            if self.database_specific.url:
                specific["url"] = self.database_specific.url
            data["database_specific"] = specific
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Entry:
        """Build an entry from decoded JSON data."""
        database_specific = data.get("database_specific")
        return cls(
            id=data.get("id", ""),
            modified=_optional_time(data.get("modified")),
            published=_optional_time(data.get("published")),
            withdrawn=_optional_time(data.get("withdrawn")),
            aliases=list(data.get("aliases") or []),
            summary=data.get("summary", ""),
            details=data.get("details", ""),
            affected=[_affected_from_dict(a) for a in data.get("affected") or []],
            references=[
                Reference(type=_enum_or_text(ReferenceType, r.get("type", "")), url=r.get("url", ""))
                for r in data.get("references") or []
            ],
            credits=[Credit(name=c.get("name", "")) for c in data.get("credits") or []],
            database_specific=(
                None
                if database_specific is None
                else DatabaseSpecific(url=database_specific.get("url", ""))
            ),
            schema_version=data.get("schema_version", ""),
        )


_E = TypeVar("_E", bound=Enum)


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else value


def _enum_or_text(kind: type[_E], value: str) -> _E | str:
    try:
        return kind(value)
    except ValueError:
        return value


def _affected_to_dict(affected: Affected) -> dict[str, Any]:
    data: dict[str, Any] = {
        "package": {
            "name": affected.module.path,
            "ecosystem": _text(affected.module.ecosystem),
        }
    }
    if affected.ranges:
        data["ranges"] = [_range_to_dict(r) for r in affected.ranges]
    specific: dict[str, Any] = {}
    if affected.ecosystem_specific.packages:
        specific["imports"] = [
            _package_to_dict(p) for p in affected.ecosystem_specific.packages
        ]
    data["ecosystem_specific"] = specific
    return data


def _range_to_dict(version_range: Range) -> dict[str, Any]:
    events = []
    for event in version_range.events:
        item = {}
        if event.introduced:
            item["introduced"] = event.introduced
        if event.fixed:
            item["fixed"] = event.fixed
        events.append(item)
    return {"type": _text(version_range.type), "events": events}


def _package_to_dict(package: Package) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if package.path:
        data["path"] = package.path
    for key in ("goos", "goarch", "symbols"):
        values = getattr(package, key)
        if values:
            data[key] = list(values)
    return data


def _affected_from_dict(data: Mapping[str, Any]) -> Affected:
    module = data.get("package") or {}
    specific = data.get("ecosystem_specific") or {}
    return Affected(
        module=Module(
            path=module.get("name", ""),
            ecosystem=_enum_or_text(Ecosystem, module.get("ecosystem", "")),
        ),
        ranges=[
            Range(
                type=_enum_or_text(RangeType, r.get("type", "")),
                events=[
                    RangeEvent(
                        introduced=e.get("introduced", ""), fixed=e.get("fixed", "")
                    )
                    for e in r.get("events") or []
                ],
            )
            for r in data.get("ranges") or []
        ],
        ecosystem_specific=EcosystemSpecific(
            packages=[
                Package(
                    path=p.get("path", ""),
                    goos=list(p.get("goos") or []),
                    goarch=list(p.get("goarch") or []),
                    symbols=list(p.get("symbols") or []),
                )
                for p in specific.get("imports") or []
            ]
        ),
    )


_TIME_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt]([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?([Zz]|[+-][0-9]{2}:[0-9]{2})"
)


def _parse_time(text: str) -> datetime:
    match = _TIME_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time {text!r}")
    year, month, day, hour, minute, second = (int(match[i]) for i in range(1, 7))
    micro = int((match[7] or "")[:6].ljust(6, "0"))
    zone = match[8]
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
        tz = timezone(sign * offset)
    return datetime(year, month, day, hour, minute, second, micro, tzinfo=tz)


def _optional_time(value: str | None) -> datetime | None:
    return None if value is None else _parse_time(value)


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}T"
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    total = int(offset.total_seconds())
    if total == 0:
        return text + "Z"
    sign = "+" if total > 0 else "-"
    total = abs(total)
    return f"{text}{sign}{total // 3600:02d}:{total % 3600 // 60:02d}"