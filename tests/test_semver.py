import pytest

from vulnscan.osv import Range, RangeEvent, RangeType
from vulnscan.semver import (
    affects,
    canonical,
    canonicalize_semver_prefix,
    compare,
    contains_semver,
    go_tag_to_semver,
    is_valid,
    less,
    major_minor,
    non_superseded_fix,
    prerelease,
    valid,
)


def intro(v):
    return RangeEvent(introduced=v)


def fix(v):
    return RangeEvent(fixed=v)


def semver_range(*events):
    return Range(type=RangeType.SEMVER, events=list(events))


def other_range(*events):
    return Range(type="unspecified", events=list(events))


@pytest.mark.parametrize(
    "v, want",
    [("v1.2.3", "v1.2.3"), ("1.2.3", "v1.2.3"), ("go1.2.3", "v1.2.3")],
)
def test_canonicalize(v, want):
    assert canonicalize_semver_prefix(v) == want


@pytest.mark.parametrize(
    "tag, want",
    [
        ("go1.19", "v1.19.0"),
        ("go1.20-pre4", "v1.20.0-pre.4"),
        ("go1", "v1.0.0"),
        ("go1.0", ""),
        ("", ""),
        ("go1.19rc1", "v1.19.0-rc.1"),
        ("go1.21.3 linux/amd64", "v1.21.3"),
        ("devel", ""),
    ],
)
def test_go_tag_to_semver(tag, want):
    assert go_tag_to_semver(tag) == want


@pytest.mark.parametrize(
    "ranges, version, want",
    [
        ([], "v0.0.0", True),
        ([Range(type=RangeType.SEMVER)], "v0.0.0", True),
        ([semver_range(intro("0"))], "v0.0.0", True),
        ([semver_range(intro("0"), fix("2.0.0"))], "v1.0.0", True),
        ([semver_range(intro("0.0.1"))], "v1.0.0", True),
        ([semver_range(intro("1.0.0"))], "v1.0.0", True),
        ([semver_range(intro("1.0.0"), fix("2.0.0"))], "v1.0.0", True),
        ([semver_range(intro("0.0.1"), fix("2.0.0"))], "v1.0.0", True),
        ([semver_range(intro("1.0.0"), fix("2.0.0"))], "v3.0.0", False),
        ([semver_range(intro("1.0.0"), fix("2.0.0"), intro("3.0.0"))], "v3.0.0", True),
        (
            [semver_range(intro("0"), fix("1.18.6"), intro("1.19.0"), fix("1.19.1"))],
            "v1.18.6",
            False,
        ),
        ([semver_range(intro("0"), intro("1.19.0"), fix("1.19.1"))], "v1.18.6", True),
        (
            [semver_range(intro("1.19.0"), fix("1.19.1"), intro("0"), fix("1.18.6"))],
            "v1.18.1",
            True,
        ),
        ([other_range(intro("3.0.0"))], "v3.0.0", True),
        ([other_range(intro("3.0.0")), semver_range(intro("4.0.0"))], "v3.0.0", False),
        ([other_range(intro("3.0.0")), semver_range(intro("3.0.0"))], "v3.0.0", True),
        ([semver_range(intro("3.0.0"))], "go3.0.1", True),
    ],
)
def test_affects(ranges, version, want):
    assert affects(ranges, version) is want


def test_contains_semver_rejects_non_semver_range():
    assert contains_semver(other_range(intro("0")), "v1.0.0") is False


def test_contains_semver_leaves_events_in_place():
    events = [intro("1.19.0"), fix("1.19.1"), intro("0"), fix("1.18.6")]
    version_range = semver_range(*events)
    contains_semver(version_range, "v1.18.1")
    assert version_range.events == events


@pytest.mark.parametrize(
    "ranges, want",
    [
        ([], ""),
        ([semver_range(intro("0"))], ""),
        ([semver_range(intro("0"), fix("1.0.4"), intro("1.1.2"))], ""),
        (
            [
                semver_range(
                    fix("1.0.4"), intro("0"), intro("1.1.2"), intro("1.5.0"), fix("1.1.4")
                )
            ],
            "",
        ),
        ([semver_range(fix("1.0.0"), intro("0"), fix("0.1.0"), intro("0.5.0"))], "1.0.0"),
        (
            [
                semver_range(intro("0"), fix("0.1.0")),
                semver_range(intro("0"), fix("0.2.0")),
            ],
            "0.2.0",
        ),
        (
            [
                semver_range(
                    intro("0"),
                    fix("0.0.0-20220824120805-abc"),
                    intro("0.0.0-20230824120805-efg"),
                    fix("0.0.0-20240824120805-hij"),
                )
            ],
            "0.0.0-20240824120805-hij",
        ),
    ],
)
def test_non_superseded_fix(ranges, want):
    assert non_superseded_fix(ranges) == want


@pytest.mark.parametrize(
    "v, ok",
    [
        ("v1.2.3", True),
        ("v1.2", True),
        ("v1", True),
        ("v1.2.3-pre.1+build", True),
        ("1.2.3", False),
        ("v01.2.3", False),
        ("v1.2-pre", False),
        ("v1.2.3-01", False),
        ("v1.0.0.2", False),
    ],
)
def test_is_valid(v, ok):
    assert is_valid(v) is ok


def test_valid_accepts_prefixes_used_in_queries():
    assert valid("go1.18")
    assert valid("1.18")
    assert valid("v0.0.0-20140414041502-123456789012")
    assert not valid("1.0.0.2")


def test_canonical():
    assert canonical("v1.2") == "v1.2.0"
    assert canonical("v1") == "v1.0.0"
    assert canonical("v1.2.3+meta") == "v1.2.3"
    assert canonical("v1.2.3-pre") == "v1.2.3-pre"
    assert canonical("bad") == ""


def test_prerelease_and_major_minor():
    assert prerelease("v1.2.3-pre+meta") == "-pre"
    assert prerelease("v1.2.3") == ""
    assert major_minor("v1.2.3") == "v1.2"
    assert major_minor("v1") == "v1.0"
    assert major_minor("bad") == ""


def test_compare_follows_semver_precedence():
    ordered = [
        "v1.0.0-alpha",
        "v1.0.0-alpha.1",
        "v1.0.0-alpha.beta",
        "v1.0.0-beta",
        "v1.0.0-beta.2",
        "v1.0.0-beta.11",
        "v1.0.0-rc.1",
        "v1.0.0",
        "v1.2.0",
        "v1.10.0",
        "v2.0.0",
    ]
    for lower, higher in zip(ordered, ordered[1:]):
        assert compare(lower, higher) == -1
        assert compare(higher, lower) == 1
    assert all(compare(v, v) == 0 for v in ordered)


def test_compare_invalid_versions():
    assert compare("bad", "v1.0.0") == -1
    assert compare("v1.0.0", "bad") == 1
    assert compare("bad", "worse") == 0
    assert compare("v1.2", "v1.2.0") == 0


def test_less_ignores_prefix():
    assert less("go1.18", "v1.19.0")
    assert less("1.2.3", "go1.2.4")
    assert not less("v1.2.3", "1.2.3")
    assert less("", "1.0.0")