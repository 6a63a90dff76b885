"""Identification of the scanner build that is running."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from .model import Config


@dataclass(frozen=True)
class BuildSetting:
    """One key/value setting recorded when the scanner was built."""

    key: str
    value: str


@dataclass
class BuildInfo:
    """What is known about how the scanner was built."""

    path: str = ""
    main_version: str = ""
    settings: list[BuildSetting] = field(default_factory=list)


_RFC3339_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt]([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.[0-9]+)?([Zz]|[+-][0-9]{2}:[0-9]{2})"
)


def _parse_rfc3339(text: str) -> datetime | None:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        return None
    zone = match[7]
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    try:
        return datetime(*(int(match[i]) for i in range(1, 7)), tzinfo=tz)
    except ValueError:
        return None


def _base(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def scanner_version(config: Config, build_info: BuildInfo) -> None:
    """Set the scanner name and version in config from the build information.

    A development build gets a version of the form
    v0.0.0-<revision prefix>-<commit time>.
    """
    if build_info.path:
        config.scanner_name = _base(build_info.path)
    if build_info.main_version and build_info.main_version != "(devel)":
        config.scanner_version = build_info.main_version
        return

    settings = {s.key: s.value for s in build_info.settings}
    revision = settings.get("vcs.revision", "")
    at = settings.get("vcs.time", "")
    version = "v0.0.0"
    if revision:
        version += "-" + revision[:12]
    if at:
        moment = _parse_rfc3339(at)
        if moment is not None:
            version += "-" + moment.strftime("%Y%m%d%H%M%S")
    config.scanner_version = version