"""Helpers for scanning the source code of Go modules."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from typing import Any, Iterable, Sequence

from .model import Progress, ScanLevel


def source_progress_message(top_pkgs: Sequence[Any], mods: int, level: ScanLevel) -> Progress:
    """Return the progress message announcing what a source scan covers.

    For package and symbol scans without matching packages, a message
    saying so is returned instead.
    """
    packages_phrase = ""
    if level.want_packages():
        if not top_pkgs:
            return Progress(message="No packages matching the provided pattern.")
        count = dep_pkgs(top_pkgs)
        packages_phrase = f" and {count} package{'s' if count != 1 else ''}"
    modules_phrase = f" {mods} dependent module{'s' if mods != 1 else ''}"
    return Progress(
        message=(
            f"Scanning your code{packages_phrase} across{modules_phrase} "
            "for known vulnerabilities..."
        )
    )


def _imports(package: Any) -> Iterable[Any]:
    imports = package.imports or ()
    return imports.values() if isinstance(imports, Mapping) else imports


def dep_pkgs(top_pkgs: Iterable[Any]) -> int:
    """Count the packages the top packages depend on, not counting top packages.

    Packages are objects with a pkg_path and imports, the latter either a
    mapping from import path to package or a sequence of packages.
    """
    top_pkgs = list(top_pkgs)
    tops = {p.pkg_path for p in top_pkgs}
    deps: set[str] = set()
    stack = [(p, True) for p in reversed(top_pkgs)]
    while stack:
        package, is_top = stack.pop()
        path = package.pkg_path
        if path in deps:
            continue
        if path in tops and not is_top:
            continue
        if path not in tops:
            deps.add(path)
        stack.extend((d, False) for d in _imports(package))
    return len(deps)


def gomod_exists(directory: str) -> bool:
    """Report whether directory lies inside a Go module, according to "go env GOMOD"."""
    try:
        result = subprocess.run(
            ["go", "env", "GOMOD"],
            cwd=directory or None,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return False
    output = result.stdout.strip()
    # Without a go.mod, GOMOD is the null device in module mode and empty otherwise.
    return output not in (os.devnull, "")