"""Conversions between semantic versions and Go standard library tags."""

from __future__ import annotations

from . import semver


def semver_to_go_tag(v: str) -> str:
    """Return the Go repository tag for the "v"-prefixed semantic version v.

    Go tags begin with "go", drop a zero patch number and write
    prereleases as "rc1" rather than "-rc.1". An unusable version yields
    a string of the form "<!v:reason>".
    """
    if v.startswith("v0.0.0"):
        return "master"
    if v == "v1.0.0":
        return "go1"
    if not semver.is_valid(v):
        return f"<!{v}:invalid semver>"
    go_version = semver.canonical(v)
    pre = semver.prerelease(go_version)
    without_pre = go_version.removesuffix(pre) if pre else go_version
    patch = without_pre.removeprefix(semver.major_minor(go_version) + ".")
    if patch == "0":
        without_pre = without_pre.removesuffix(".0")
    tag = "go" + without_pre.removeprefix("v")
    if pre:
        # Go writes "beta1" where semver needs "beta.1" to sort correctly.
        i = final_digits_index(pre)
        if i >= 1:
            if pre[i - 1] != ".":
                return f"<!{v}:final digits in a prerelease must follow a period>"
            pre = pre[: i - 1] + pre[i:]
        tag += pre.removeprefix("-")
    return tag


def final_digits_index(s: str) -> int:
    """Return the index where the run of ASCII digits ending s starts, or -1."""
    i = len(s)
    while i > 0 and "0" <= s[i - 1] <= "9":
        i -= 1
    return -1 if i == len(s) else i