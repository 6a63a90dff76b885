"""OSV and SARIF models, Go version matching and finding summaries for vulnerability scans."""

__version__ = "0.1.0"