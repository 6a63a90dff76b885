[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vulnscan"
version = "0.1.0"
description = "OSV and SARIF data models, Go version matching and finding summaries for vulnerability scanning of Go modules"
requires-python = ">=3.10"
dependencies = []
keywords = ["vulnerability", "osv", "sarif", "semver", "security", "go"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vulnscan"]

[tool.hatch.build.targets.sdist]
include = ["vulnscan", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
