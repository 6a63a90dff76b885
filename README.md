# vulnscan

`vulnscan` holds the building blocks for checking Go modules against known
vulnerabilities: data models for vulnerability entries and SARIF logs, Go
version handling and range matching, and helpers that group and summarise
findings. It has no third-party dependencies and needs Python 3.10 or later.

## Modules

- `vulnscan.osv`: data classes for entries in the Go OSV vulnerability format
  (`Entry`, `Affected`, `Module`, `Range`, `RangeEvent`, `Package`,
  `Reference`, `Credit`, ...). `Entry.to_dict` returns JSON-ready data that
  leaves out empty optional fields; `Entry.from_dict` builds an entry from
  decoded JSON, including RFC 3339 timestamps.
- `vulnscan.semver`: semantic versions. `is_valid`, `compare`, `canonical`,
  `prerelease` and `major_minor` work on `v`-prefixed versions; `less`,
  `valid` and `canonicalize_semver_prefix` also accept bare (`1.2.3`) and
  `go`-prefixed versions. `go_tag_to_semver` turns a Go release tag into a
  semantic version. `affects` and `contains_semver` tell whether a version
  falls in OSV ranges, and `non_superseded_fix` finds the latest fix that no
  later introduction supersedes.
- `vulnscan.stdlib`: `semver_to_go_tag` converts a semantic version to a Go
  release tag.
- `vulnscan.model`: `ScanLevel` (module, package, symbol), `Finding`, `Frame`,
  `Position`, `Config` and `Progress`; `validate_findings` raises `ValueError`
  for a finding that breaks the rules, and `module_version_string` shows
  standard library and toolchain versions as Go tags.
- `vulnscan.template`: `FindingSummary` and `SummaryCounters`, grouping of
  findings by vulnerability or module, `platforms` of an entry,
  `compact_trace` for a short description of a call stack, `symbol` and
  `pos_to_string`.
- `vulnscan.query`: `parse_module_query` splits `module@version` queries;
  `run_query` reports every entry affecting the queried modules to a handler,
  once each.
- `vulnscan.source`: `source_progress_message`, `dep_pkgs` (counts the
  dependencies of top-level packages) and `gomod_exists`, which asks the
  `go` command for `GOMOD` in a directory.
- `vulnscan.paths`: `abs_rel_shorter` shortens an absolute path to one
  relative to the current directory when that has fewer segments.
- `vulnscan.sarif`: SARIF log data classes; `Log.to_dict` returns JSON-ready
  data without empty fields.
- `vulnscan.run`: `BuildInfo`, `BuildSetting` and `scanner_version`, which
  sets the scanner name and version in a `Config`.

## Examples

```python
from vulnscan import semver, stdlib

semver.less("go1.18", "v1.19.0")              # True
semver.canonicalize_semver_prefix("go1.2.3")  # "v1.2.3"
semver.go_tag_to_semver("go1.20-pre4")        # "v1.20.0-pre.4"
stdlib.semver_to_go_tag("v1.19.0")            # "go1.19"
```

```python
from vulnscan.osv import Range, RangeEvent
from vulnscan.semver import affects

ranges = [Range(events=[RangeEvent(introduced="0"), RangeEvent(fixed="2.0.0")])]
affects(ranges, "v1.0.0")  # True
```

```python
from vulnscan.query import parse_module_query

parse_module_query("stdlib@go1.18")  # ("stdlib", "go1.18")
```

A pattern without `@`, or with a version that is not valid semver, raises
`ValueError`.

```python
from vulnscan.model import Config
from vulnscan.run import BuildInfo, BuildSetting, scanner_version

config = Config()
scanner_version(config, BuildInfo(settings=[
    BuildSetting("vcs.revision", "1234567890001234"),
    BuildSetting("vcs.time", "2023-01-25T19:57:54Z"),
]))
config.scanner_version  # "v0.0.0-123456789000-20230125195754"
```

## What the package does not do

- There is no command-line program and no option parsing; the package is a
  library only.
- It does not render a finished human-readable report; `vulnscan.template`
  supplies the grouping and trace summaries such a report is built from.
- It does not download a vulnerability database or analyse Go binaries or
  source code itself. `run_query` expects a client object with a
  `by_modules` method, and the package counts and describes packages that are
  handed to it.

## Running the tests

Install the `test` extra, then run `pytest` from the project root.