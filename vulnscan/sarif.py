"""Static Analysis Results Interchange Format (SARIF) documents."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import timezone
from typing import Any

from .model import Config


def _named(name: str, **kwargs: Any) -> Any:
    return field(metadata={"json": name}, **kwargs)


@dataclass
class Description:
    """Text in raw or markdown form."""

    text: str = ""
    markdown: str = ""


@dataclass
class RuleTags:
    """Tags of a rule, such as the aliases of a vulnerability."""

    tags: list[str] = field(default_factory=list)


@dataclass
class Rule:
    """An analysis rule; for the scanner, one vulnerability entry."""

    id: str = ""
    short_description: Description = _named("shortDescription", default_factory=Description)
    full_description: Description = _named("fullDescription", default_factory=Description)
    help: Description = field(default_factory=Description)
    help_uri: str = _named("helpUri", default="")
    properties: RuleTags = field(default_factory=RuleTags)


@dataclass
class Driver:
    """The scanner that produced the results."""

    name: str = ""
    version: str = _named("semanticVersion", default="")
    information_uri: str = _named("informationUri", default="")
    properties: Config = field(default_factory=Config)
    rules: list[Rule] = field(default_factory=list)


@dataclass
class Tool:
    """The analysis tool of a run."""

    driver: Driver = field(default_factory=Driver)


@dataclass
class ArtifactLocation:
    """A path to a file, absolute or relative to a named base."""

    uri: str = ""
    uri_base_id: str = _named("uriBaseId", default="")


@dataclass
class Region:
    """A region within a file."""

    start_line: int = _named("startLine", default=0)
    start_column: int = _named("startColumn", default=0)
    end_line: int = _named("endLine", default=0)
    end_column: int = _named("endColumn", default=0)


@dataclass
class PhysicalLocation:
    """A region of a file."""

    artifact_location: ArtifactLocation = _named(
        "artifactLocation", default_factory=ArtifactLocation
    )
    region: Region = field(default_factory=Region)


@dataclass
class Location:
    """A physical location annotated with a message."""

    physical_location: PhysicalLocation = _named(
        "physicalLocation", default_factory=PhysicalLocation
    )
    message: Description = field(default_factory=Description)


@dataclass
class ThreadFlowLocation:
    """One step of a thread flow."""

    module: str = ""
    location: Location = field(default_factory=Location)


@dataclass
class ThreadFlow:
    """A flow of locations, such as a call stack."""

    locations: list[ThreadFlowLocation] = field(default_factory=list)


@dataclass
class CodeFlow:
    """A set of related thread flows."""

    thread_flows: list[ThreadFlow] = _named("threadFlows", default_factory=list)


@dataclass
class Frame:
    """A module location within a stack."""

    module: str = ""
    location: Location = field(default_factory=Location)


@dataclass
class Stack:
    """A sequence of frames, such as a call stack."""

    message: Description = field(default_factory=Description)
    frames: list[Frame] = field(default_factory=list)


@dataclass
class Result:
    """The findings for one vulnerability."""

    rule_id: str = _named("ruleId", default="")
    level: str = ""
    message: Description = field(default_factory=Description)
    locations: list[Location] = field(default_factory=list)
    code_flows: list[CodeFlow] = _named("codeFlows", default_factory=list)
    stacks: list[Stack] = field(default_factory=list)


@dataclass
class Run:
    """One invocation of the analysis tool."""

    tool: Tool = field(default_factory=Tool)
    results: list[Result] = field(default_factory=list)
    uri_base_ids: dict[str, ArtifactLocation] = _named(
        "originalUriBaseIds", default_factory=dict
    )


@dataclass
class Log:
    """The top-level SARIF document."""

    version: str = ""
    schema: str = _named("$schema", default="")
    runs: list[Run] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the document as JSON-ready data, omitting empty fields."""
        return _encode(self)


def _config_to_dict(config: Config) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key in ("protocol_version", "scanner_name", "scanner_version", "db"):
        value = getattr(config, key)
        if value:
            data[key] = value
    if config.db_last_modified is not None:
        moment = config.db_last_modified
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        data["db_last_modified"] = moment.isoformat().replace("+00:00", "Z")
    if config.go_version:
        data["go_version"] = config.go_version
    if config.scan_level is not None:
        data["scan_level"] = config.scan_level.value
    return data


def _encode(value: Any) -> Any:
    if isinstance(value, Config):
        return _config_to_dict(value)
    if is_dataclass(value):
        data: dict[str, Any] = {}
        for item in fields(value):
            member = getattr(value, item.name)
            name = item.metadata.get("json", item.name)
            # Nested objects are always written; scalars and collections only when set.
            if is_dataclass(member) or member:
                data[name] = _encode(member)
        return data
    if isinstance(value, list):
        return [_encode(item) for item in value]
    if isinstance(value, dict):
        return {key: _encode(item) for key, item in value.items()}
    return value