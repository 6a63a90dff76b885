"""Looking up the vulnerabilities of modules at given versions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

from .model import Progress
from .semver import valid

_MODULE_QUERY_RE = re.compile(r"(.+)@(.+)")


@dataclass
class ModuleRequest:
    """A request for the vulnerabilities of one module at one version."""

    path: str
    version: str


def parse_module_query(pattern: str) -> tuple[str, str]:
    """Split a "module@version" query into its module and version.

    Raises ValueError if the query has the wrong form or the version is
    not valid semver.
    """
    match = _MODULE_QUERY_RE.search(pattern)
    if match is None:
        raise ValueError(f"invalid query {pattern}: must be of the form module@version")
    module, version = match[1], match[2]
    if not valid(version):
        raise ValueError(f"version {version} is not valid semver")
    return module, version


def query_progress_message(module: str, version: str) -> Progress:
    """Return the progress message for looking up a module at a version."""
    return Progress(message=f"Looking up vulnerabilities in {module} at {version}...")


def run_query(handler: Any, patterns: Iterable[str], client: Any) -> None:
    """Report to handler every vulnerability affecting the queried modules.

    The client's by_modules takes a list of ModuleRequest and returns one
    response per request, each with the matching entries. Each entry is
    reported once, in the order the responses give them.
    """
    requests = []
    for query in patterns:
        module, version = parse_module_query(query)
        handler.progress(query_progress_message(module, version))
        requests.append(ModuleRequest(path=module, version=version))

    seen: set[str] = set()
    for response in client.by_modules(requests):
        for entry in response.entries:
            if entry.id not in seen:
                handler.osv(entry)
                seen.add(entry.id)